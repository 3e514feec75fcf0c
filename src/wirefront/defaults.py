import datetime
import decimal
import pathlib
import uuid
from collections.abc import Callable
from typing import Any

from pydantic_settings import BaseSettings

from wirefront.registry import Binding
from wirefront.types import Lifetime

DEFAULT_PRIMITIVE_TYPES: frozenset[type[Any]] = frozenset(
    {
        int,
        str,
        float,
        bool,
        bytes,
        complex,
        list,
        dict,
        set,
        frozenset,
        tuple,
        object,
    },
)
"""Parameter types that are never resolved through the container graph."""

DEFAULT_VALUE_TYPES: tuple[type[Any], ...] = (
    pathlib.PurePath,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    decimal.Decimal,
)
"""Value types that must be bound or passed explicitly instead of being auto-built."""

DEFAULT_FORBIDDEN_METHODS: frozenset[str] = frozenset(
    {
        "delete",
        "force_delete",
        "destroy",
        "save",
        "update",
        "create",
        "fill",
        "push",
        "touch",
        "increment",
        "decrement",
    },
)
"""Mutating operations a presenter refuses to forward to the wrapped object."""


def _settings_binding(cls: type[Any]) -> Binding:
    def build_settings() -> Any:
        return cls()

    return Binding(key=cls, concrete=build_settings, lifetime=Lifetime.SINGLETON)


DEFAULT_AUTOREGISTER_FACTORIES: dict[type[Any], Callable[[type[Any]], Binding]] = {
    BaseSettings: _settings_binding,
}
"""Base classes whose unbound subclasses get a non-default binding.

Settings objects are process-wide configuration, so they are built once.
"""
