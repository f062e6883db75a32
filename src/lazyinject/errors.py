__all__ = ["DependencyError", "InvalidArgument"]


class DependencyError(Exception):
    """Base class for errors raised by the injector."""

    pass


class InvalidArgument(DependencyError, ValueError):
    """Raised when a dependency name, value, name list or resolver is malformed."""

    pass
