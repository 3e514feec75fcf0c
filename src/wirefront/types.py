from collections.abc import Callable
from enum import Enum
from typing import Any, TypeAlias


class Lifetime(str, Enum):
    """Defines how long a resolved value lives in the container."""

    TRANSIENT = "transient"
    """A new instance is built every time the key is resolved."""

    SINGLETON = "singleton"
    """A single instance is built and shared for the lifetime of the container."""


Key: TypeAlias = type[Any] | str
"""A binding key: a class or a string alias."""

FactoryFunction: TypeAlias = Callable[..., Any]
"""A callable whose parameters are injected and whose result is the resolved value."""

Concrete: TypeAlias = type[Any] | FactoryFunction
"""Either a class built by reflection or a factory function."""

ResolvingCallback: TypeAlias = Callable[[Any, Any], Any]
"""Callback receiving ``(instance, container)``."""
