from __future__ import annotations

from typing import Any


def describe_key(key: Any) -> str:
    """Return a readable name for a binding key in error messages."""
    if isinstance(key, str):
        return repr(key)
    qualname = getattr(key, "__qualname__", None)
    if qualname is not None:
        return qualname
    return repr(key)


class WirefrontError(Exception):
    """Represent a base class for all wirefront-specific failures.

    Catch this type when you want to handle any wirefront error path without
    matching each concrete exception class individually.
    """


class InvalidRegistrationError(WirefrontError):
    """Signal invalid binding configuration.

    Raised by ``Container.bind``, ``Container.alias`` and the contextual
    binding builder when arguments cannot describe a binding, for example an
    unbound ``bind(key)`` call where ``key`` is not a class.
    """


class ResolutionError(WirefrontError):
    """Signal that a key cannot be resolved.

    Raised by ``Container.make`` when a key has no binding and cannot be built
    by reflection, or when a primitive constructor parameter has neither an
    explicit value, a contextual override nor a default.

    Typical fixes include binding the key, passing the primitive through
    ``params=...`` or registering ``container.when(...).needs(...).give(...)``.
    """

    def __init__(self, key: Any, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Unable to resolve {describe_key(key)}: {reason}")


class DependencyExtractionError(ResolutionError):
    """Signal that constructor or factory type hints could not be read."""

    def __init__(self, key: Any, error: Exception) -> None:
        self.error = error
        super().__init__(key, f"failed to read type hints ({error})")


class CircularDependencyError(WirefrontError):
    """Signal a cycle in the dependency graph.

    ``chain`` holds every key on the resolution path, ending with the key
    that closed the cycle.
    """

    def __init__(self, key: Any, chain: list[Any]) -> None:
        self.key = key
        self.chain = [*chain, key]
        path = " -> ".join(describe_key(item) for item in self.chain)
        super().__init__(f"Circular dependency detected: {path}")


class AttributeNotFoundError(WirefrontError, AttributeError):
    """Signal that no step of the presenter lookup chain matched a name.

    Subclasses ``AttributeError`` so ``hasattr`` and ``getattr`` with a
    default keep their usual behavior on presenters.
    """

    def __init__(self, name: str, obj: Any) -> None:
        self.name = name
        self.obj = obj
        super().__init__(
            f"Attribute {name!r} was not found on presenter for {type(obj).__qualname__}",
        )


class ForbiddenOperationError(WirefrontError):
    """Signal a mutating operation invoked through a presenter.

    Presenters are read-only facades. Call ``get_object()`` to reach the
    wrapped object when a mutation is really intended.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Operation {name!r} is not allowed through a presenter")
