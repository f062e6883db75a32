"""
Lazy registration and resolution of named dependencies.

A :class:`DependencyInjector` holds named values and callbacks waiting on
them. Producers call :meth:`~DependencyInjector.register`, consumers call
:meth:`~DependencyInjector.resolve`; whichever comes last triggers the
callback. Everything runs synchronously on the caller's stack: by the time
``register`` or ``resolve`` returns, every callback it satisfied has run.

Callbacks are re-run when one of their dependencies is re-registered with a
value that differs structurally (see :func:`~lazyinject.equality.deep_equal`)
from the one they last saw.

Exceptions raised by callbacks are not caught. They abort the dispatch in
progress and propagate to whoever called ``register``, ``resolve`` or
``inject``; callbacks later in the same batch are not invoked.
"""

import logging
import threading
from collections.abc import Sequence
from types import MappingProxyType
from typing import Any, Callable, Mapping, Union

from lazyinject.domain import UNSET, Resolver
from lazyinject.equality import deep_equal
from lazyinject.errors import InvalidArgument
from lazyinject.options import OptionsLike, load_options

__all__ = ["DependencyInjector"]

logger = logging.getLogger(__name__)

ResolverLike = Union[Callable[..., Any], Resolver]


class DependencyInjector:
    """Registry of named dependencies and the resolvers waiting on them.

    Args:
        options: :class:`~lazyinject.options.InjectorOptions`, or a mapping of
            option values (``debugLogging``, ``initialDependencies``,
            ``initialPending``).

    Example:
        >>> injector = DependencyInjector()
        >>> injector.resolve(["host", "port"], lambda host, port: print(host, port))
        >>> injector.register("host", "localhost")
        >>> injector.register("port", 8080)
        localhost 8080
    """

    def __init__(self, options: OptionsLike = None):
        options = load_options(options)
        self._debug = options.debug_logging
        self._lock = threading.RLock()
        self._dependencies: dict[str, Any] = dict(options.initial_dependencies)
        self._pending: dict[str, list[Resolver]] = {}
        self._dependants: dict[str, list[Resolver]] = {}
        self._handles: dict[Any, Resolver] = {}

        for name, resolvers in options.initial_pending.items():
            for resolver in resolvers:
                handle = self._handle_for(resolver)
                self._attach(name, handle)

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def dependencies(self) -> Mapping[str, Any]:
        """Read-only view of the registered values."""
        return MappingProxyType(self._dependencies)

    def pending(self, name: str) -> tuple[Resolver, ...]:
        """Resolvers still queued on ``name``."""
        with self._lock:
            return tuple(self._pending.get(name, ()))

    def get(self, name: str, default: Any = None) -> Any:
        with self._lock:
            return self._dependencies.get(name, default)

    def __getitem__(self, name: str) -> Any:
        with self._lock:
            return self._dependencies[name]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._dependencies

    def register(self, name: str, value: Any) -> None:
        """Register ``value`` under ``name`` and run any resolvers it satisfies.

        Resolvers attached to ``name`` are re-armed if ``value`` differs from
        the value previously registered; re-registering an equal value does
        not invoke them again.

        Args:
            name: Dependency name.
            value: Dependency value. Anything but :data:`~lazyinject.domain.UNSET`,
                ``None`` included.

        Raises:
            InvalidArgument: If ``name`` is not a non-empty string or ``value`` is UNSET.
        """
        self._log("register %r = %r", name, value)
        _validate_name(name)
        if value is UNSET:
            raise InvalidArgument("Dependency (value) is required")

        with self._lock:
            old_value = self._dependencies.get(name, UNSET)
            if not deep_equal(value, old_value):
                self._invalidate(name)
            self._dependencies[name] = value
            self.inject([name])

    def resolve(
        self,
        names: Sequence[str],
        resolver: ResolverLike,
        *,
        with_context: bool = False,
    ) -> Resolver:
        """Invoke ``resolver`` once every dependency in ``names`` is registered.

        The resolver receives the values positionally, in the order of
        ``names``. Passing the same callback again replaces its dependency
        list.

        Args:
            names: Non-empty list or tuple of dependency names.
            resolver: Callback (or an existing handle) to invoke.
            with_context: Also pass a ``context`` keyword holding a
                name to value dict.

        Returns:
            The :class:`~lazyinject.domain.Resolver` handle for the callback.

        Raises:
            InvalidArgument: If ``names`` is empty or not a list of names,
                or ``resolver`` is not callable.
        """
        self._log("resolve %r", names)
        _validate_names(names)
        if not (isinstance(resolver, Resolver) or callable(resolver)):
            raise InvalidArgument("Resolver has to be a function")

        with self._lock:
            handle = self._handle_for(resolver)
            if handle.dependencies is not None:
                self._detach(handle, keep=names)
            handle.dependencies = list(names)
            handle.is_resolved = False
            handle.with_context = with_context or (
                isinstance(resolver, Resolver) and resolver.with_context
            )
            self._log("resolver %s dependencies %r", handle.name, handle.dependencies)
            for name in names:
                self._attach(name, handle)
            self.inject(names)
        return handle

    resolve_on = resolve

    def resolves(self, *names: str, with_context: bool = False) -> Callable:
        """Decorator form of :meth:`resolve`.

        Example:
            @injector.resolves("db", "cache")
            def start(db, cache):
                ...
        """

        def decorator(func):
            self.resolve(list(names), func, with_context=with_context)
            return func

        return decorator

    def inject(self, names: Sequence[str]) -> None:
        """Run every resolver queued on ``names`` whose dependencies are all registered.

        Satisfied resolvers are removed from the queue of the name being
        dispatched only; they stay queued on their other names until those
        are dispatched and find them already resolved.

        Raises:
            InvalidArgument: If ``names`` is empty or not a list of names.
        """
        self._log("inject %r", names)
        _validate_names(names)

        with self._lock:
            for name in names:
                self._dispatch_one(name)

    dispatch = inject

    def _dispatch_one(self, name: str) -> None:
        finished: list[Resolver] = []

        for resolver in list(self._pending.get(name, ())):
            if resolver.is_resolved:
                self._log("resolver %s already resolved", resolver.name)
                finished.append(resolver)
                continue

            if resolver.dependencies is None:
                continue

            context: dict[str, Any] = {}
            values: list[Any] = []
            for dependency_name in resolver.dependencies:
                value = self._dependencies.get(dependency_name, UNSET)
                if value is not UNSET:
                    context[dependency_name] = value
                    values.append(value)

            if len(values) == len(resolver.dependencies):
                finished.append(resolver)
                resolver.is_resolved = True
                self._log("invoking resolver %s with %r", resolver.name, context)
                resolver.invoke(values, context)

        if finished:
            remaining = [r for r in self._pending.get(name, ()) if r not in finished]
            if remaining:
                self._pending[name] = remaining
            else:
                self._pending.pop(name, None)

    def _invalidate(self, name: str) -> None:
        queue = self._pending.setdefault(name, [])
        for resolver in self._dependants.get(name, ()):
            self._log(
                "resetting resolver %s; was resolved = %s", resolver.name, resolver.is_resolved
            )
            resolver.is_resolved = False
            if resolver not in queue:
                queue.append(resolver)
        if not queue:
            del self._pending[name]

    def _attach(self, name: str, handle: Resolver) -> None:
        queue = self._pending.setdefault(name, [])
        if handle not in queue:
            queue.append(handle)
        dependants = self._dependants.setdefault(name, [])
        if handle not in dependants:
            dependants.append(handle)

    def _detach(self, handle: Resolver, keep: Sequence[str]) -> None:
        for name in handle.dependencies:
            if name in keep:
                continue
            for registry in (self._pending, self._dependants):
                remaining = [r for r in registry.get(name, ()) if r is not handle]
                if remaining:
                    registry[name] = remaining
                else:
                    registry.pop(name, None)

    def _handle_for(self, resolver: ResolverLike) -> Resolver:
        if isinstance(resolver, Resolver):
            self._handles.setdefault(_callback_key(resolver.callback), resolver)
            return resolver
        key = _callback_key(resolver)
        handle = self._handles.get(key)
        if handle is None:
            handle = Resolver(resolver)
            self._handles[key] = handle
        return handle

    def _log(self, msg: str, *args: Any) -> None:
        if self._debug:
            logger.debug(msg, *args)


def _callback_key(callback: Callable) -> Any:
    # Bound methods are rebuilt on every attribute read but compare equal.
    try:
        hash(callback)
    except TypeError:
        return id(callback)
    return callback


def _validate_name(name: Any) -> None:
    if not isinstance(name, str) or len(name) == 0:
        raise InvalidArgument("Dependency name/key has to be passed as a non-empty string")


def _validate_names(names: Any) -> None:
    if not isinstance(names, (list, tuple)) or len(names) == 0:
        raise InvalidArgument("Dependencies have to be a non-empty list of dependencies")
    for name in names:
        _validate_name(name)
