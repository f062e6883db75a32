"""Lazy dependency registration and resolution.

lazyinject is a flat key-to-value broker. Producers register named values,
consumers register callbacks ("resolvers") naming the values they need, and
each callback runs as soon as all of its values are present, whichever side
shows up first. There is no constructor scanning, scoping or lifecycle
management: registration is explicit and resolution is synchronous.

Key Features:
    - Resolvers may be registered before or after the values they need
    - Re-registering a value with a structurally different value re-runs
      the resolvers that consumed it; an equal value does not
    - Values are passed positionally, optionally with a name to value mapping
    - Diagnostic tracing through the standard ``logging`` module

Basic Usage:
    >>> from lazyinject import DependencyInjector
    >>>
    >>> injector = DependencyInjector({"debugLogging": True})
    >>>
    >>> @injector.resolves("db", "cache")
    >>> def start(db, cache):
    ...     print("starting with", db, cache)
    >>>
    >>> injector.register("db", "postgres://localhost/app")
    >>> injector.register("cache", {"host": "localhost", "port": 6379})
    starting with postgres://localhost/app {'host': 'localhost', 'port': 6379}

The package consists of:
    - injector: the DependencyInjector engine
    - options: construction options (InjectorOptions)
    - domain: the UNSET marker and Resolver registration handle
    - equality: structural change detection
    - errors: library exceptions
"""

from lazyinject.domain import UNSET, Resolver
from lazyinject.equality import deep_equal
from lazyinject.errors import DependencyError, InvalidArgument
from lazyinject.injector import DependencyInjector
from lazyinject.options import InjectorOptions

__all__ = [
    "UNSET",
    "DependencyError",
    "DependencyInjector",
    "InjectorOptions",
    "InvalidArgument",
    "Resolver",
    "deep_equal",
]
