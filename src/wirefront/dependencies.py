from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

from wirefront.exceptions import DependencyExtractionError

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Information about a constructor/function parameter."""

    name: str
    annotation: Any
    """The declared type with ``Optional`` stripped, or ``None`` when unannotated."""

    has_default: bool
    default: Any
    optional: bool
    positional_only: bool


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``T | None`` into ``(T, True)``; other annotations pass through."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1 and len(args) == 2:  # noqa: PLR2004
            return non_none[0], True
    return annotation, False


class DependenciesExtractor:
    """Extract type-hinted parameters from classes and factory callables."""

    def __init__(self) -> None:
        self._cache: dict[Any, tuple[ParameterInfo, ...]] = {}

    def get_parameters(self, target: Any) -> tuple[ParameterInfo, ...]:
        """Return the injectable parameters of a class constructor or a callable."""
        try:
            cached = self._cache.get(target)
        except TypeError:
            return self._extract(target)
        if cached is not None:
            return cached

        result = self._extract(target)
        self._cache[target] = result
        return result

    def clear(self) -> None:
        self._cache.clear()

    def _extract(self, target: Any) -> tuple[ParameterInfo, ...]:
        if (
            isinstance(target, type)
            and target.__init__ is object.__init__
            and target.__new__ is object.__new__
        ):
            return ()

        try:
            sig = inspect.signature(target)
        except (TypeError, ValueError):
            return ()

        type_hints = self._get_type_hints(target, sig)
        result: list[ParameterInfo] = []
        for name, param in sig.parameters.items():
            if param.kind in _SKIPPED_KINDS:
                continue
            annotation = type_hints.get(name, param.annotation)
            if annotation is inspect.Parameter.empty or isinstance(annotation, str):
                annotation = None
            annotation, optional = unwrap_optional(annotation)
            result.append(
                ParameterInfo(
                    name=name,
                    annotation=annotation,
                    has_default=param.default is not inspect.Parameter.empty,
                    default=param.default,
                    optional=optional,
                    positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                ),
            )
        return tuple(result)

    def _get_type_hints(self, target: Any, sig: inspect.Signature) -> dict[str, Any]:
        hint_source = target.__init__ if isinstance(target, type) else target
        try:
            return get_type_hints(hint_source)
        except NameError as e:
            # unresolvable hints only matter for parameters that have to be injected
            if any(
                isinstance(param.annotation, str)
                and param.default is inspect.Parameter.empty
                and param.kind not in _SKIPPED_KINDS
                for param in sig.parameters.values()
            ):
                raise DependencyExtractionError(target, e) from e
            return {}
        except TypeError:
            # partials and callable instances: fall back to the raw signature
            return {}
