"""Construction options for :class:`~lazyinject.injector.DependencyInjector`."""

from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lazyinject.domain import UNSET, Resolver
from lazyinject.errors import InvalidArgument

__all__ = ["BaseConfigModel", "InjectorOptions", "load_options"]


def _to_camel(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class BaseConfigModel(BaseModel):
    """
    Base configuration model with shared validation rules.
    """

    model_config: ConfigDict = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )


class InjectorOptions(BaseConfigModel):
    """
    Options recognised by the injector.

    Keys may be given in snake_case or camelCase
    (``debug_logging`` or ``debugLogging``).
    """

    debug_logging: bool = False
    initial_dependencies: dict[str, Any] = Field(default_factory=dict)
    initial_pending: dict[str, list[Any]] = Field(default_factory=dict)

    @field_validator("initial_dependencies")
    @classmethod
    def no_unset_values(cls, value: dict[str, Any]) -> dict[str, Any]:
        for name, dependency in value.items():
            if not name:
                raise ValueError("Dependency names must be non-empty strings")
            if dependency is UNSET:
                raise ValueError(f"Dependency {name!r} is seeded with UNSET")
        return value

    @field_validator("initial_pending")
    @classmethod
    def callable_resolvers(cls, value: dict[str, list[Any]]) -> dict[str, list[Any]]:
        for name, resolvers in value.items():
            if not name:
                raise ValueError("Dependency names must be non-empty strings")
            for resolver in resolvers:
                if not (callable(resolver) or isinstance(resolver, Resolver)):
                    raise ValueError(f"Pending resolver {resolver!r} for {name!r} is not callable")
        return value


OptionsLike = Union[InjectorOptions, Mapping[str, Any], None]


def load_options(options: OptionsLike = None) -> InjectorOptions:
    """Normalise ``options`` into an :class:`InjectorOptions`.

    Args:
        options: An existing options model, a mapping of option values, or None.

    Raises:
        InvalidArgument: If the options fail validation.
    """
    if options is None:
        return InjectorOptions()
    if isinstance(options, InjectorOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidArgument(f"Injector options must be a mapping, got {options!r}")
    try:
        return InjectorOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise InvalidArgument(f"Invalid injector options: {exc}") from exc
