"""Domain models used throughout the injector."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

__all__ = ["UNSET", "Resolver", "inferred_name"]


class _Unset:
    """Type of the :data:`UNSET` absence-marker."""

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "UNSET"


UNSET = _Unset()
"""Marks a dependency that has no registered value.

Distinct from every value that can be registered, ``None`` included.
"""


def inferred_name(target: Any) -> str:
    """Derive a readable name for a resolver callback.

    Example:
        >>> inferred_name(start_server)               # "start_server"
        >>> inferred_name(functools.partial(f, 1))    # "f"
    """
    name = getattr(target, "__qualname__", None) or getattr(target, "__name__", None)
    if name:
        return name
    func = getattr(target, "func", None)
    if func is not None:
        return inferred_name(func)
    return repr(target)


@dataclass(eq=False)
class Resolver:
    """Registration handle for a callback waiting on named dependencies.

    A single handle is shared between the pending lists of every name it
    depends on, so flipping ``is_resolved`` is seen from all of them.
    Handles compare and hash by identity.

    Attributes:
        callback: The function invoked once all dependencies have values.
        dependencies: Ordered dependency names; ``None`` until the handle is
            passed to :meth:`~lazyinject.injector.DependencyInjector.resolve`.
        name: Name used in diagnostic log lines.
        is_resolved: Whether the callback has run for the current values.
        with_context: Pass the name to value mapping as a ``context`` keyword.
        context: The name to value mapping of the most recent invocation.
    """

    callback: Callable
    dependencies: Optional[list[str]] = None
    name: str = ""
    is_resolved: bool = False
    with_context: bool = False
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            self.name = inferred_name(self.callback)

    def invoke(self, values: list[Any], context: dict[str, Any]) -> Any:
        """Call the callback with ``values`` as positional arguments."""
        self.context = context
        if self.with_context:
            return self.callback(*values, context=dict(context))
        return self.callback(*values)
