from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from wirefront.types import Lifetime


class _Missing(enum.Enum):
    MISSING = enum.auto()


MISSING = _Missing.MISSING
"""Sentinel for "no value", since ``None`` is a valid instance or override."""


@dataclass(frozen=True, slots=True)
class Binding:
    """A registered strategy for producing the value of one key.

    Exactly one of ``concrete`` (a class or factory) and ``instance`` is set.
    """

    key: Any
    concrete: Any = None
    instance: Any = MISSING
    lifetime: Lifetime = Lifetime.TRANSIENT

    @property
    def is_instance(self) -> bool:
        return self.instance is not MISSING

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON


class OverrideKind(str, enum.Enum):
    """How a contextual override produces its value."""

    BUILD = "build"
    """Resolve the given class through the container."""

    FACTORY = "factory"
    """Invoke the given callable with injected parameters."""

    VALUE = "value"
    """Use the given object as is."""


@dataclass(frozen=True, slots=True)
class ContextualOverride:
    value: Any
    kind: OverrideKind


class ContextualBindings:
    """Overrides keyed by ``(consumer, dependency)``.

    ``dependency`` is either a class or a constructor parameter name.
    """

    __slots__ = ("_overrides",)

    def __init__(self) -> None:
        self._overrides: dict[tuple[Any, Any], ContextualOverride] = {}

    def add(self, consumer: Any, dependency: Any, override: ContextualOverride) -> None:
        self._overrides[(consumer, dependency)] = override

    def find(self, consumers: Iterable[Any], dependency: Any) -> ContextualOverride | None:
        """Return the override registered for the first matching consumer."""
        for consumer in consumers:
            try:
                override = self._overrides.get((consumer, dependency))
            except TypeError:
                return None
            if override is not None:
                return override
        return None

    def clear(self) -> None:
        self._overrides.clear()

    def __len__(self) -> int:
        return len(self._overrides)
