from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any, ClassVar

from wirefront.defaults import DEFAULT_FORBIDDEN_METHODS
from wirefront.exceptions import AttributeNotFoundError, ForbiddenOperationError
from wirefront.hooks import SupportsHooks
from wirefront.naming import matches_prefixed, normalize, spellings, to_snake
from wirefront.registry import MISSING

_ACCESSOR_PREFIXES = ("get", "is")


@lru_cache(maxsize=512)
def _public_members(cls: type) -> tuple[str, ...]:
    return tuple(sorted(name for name in dir(cls) if not name.startswith("_")))


def _own_member(presenter: Presenter, name: str) -> Any:
    # bypasses Presenter.__getattr__, which would re-enter the chain
    try:
        return object.__getattribute__(presenter, name)
    except AttributeError:
        return MISSING


def _member(obj: Any, name: str) -> Any:
    return getattr(obj, name, MISSING)


def _find_callable(
    target: Any,
    name: str,
    prefix: str,
    getter: Callable[[Any, str], Any],
) -> Any:
    """Find the method answering ``prefix + name`` on ``target``.

    Exact snake and camel spellings win; otherwise the alphabetically first
    public member with the same normalized name is used.
    """
    for spelling in spellings(name, prefix):
        member = getter(target, spelling)
        if member is not MISSING and callable(member):
            return member

    wanted = prefix + normalize(name)
    for member_name in _public_members(type(target)):
        if normalize(member_name) != wanted or not matches_prefixed(member_name, prefix):
            continue
        member = getter(target, member_name)
        if member is not MISSING and callable(member):
            return member
    return MISSING


class Presenter:
    """Read-only facade over one wrapped object.

    Attribute access falls through to the wrapped object along a fixed chain
    (first match wins):

    1. method ``N`` on the presenter,
    2. method ``get_N`` on the presenter,
    3. method ``is_N`` on the presenter,
    4. method ``get_N`` on the wrapped object,
    5. method ``is_N`` on the wrapped object,
    6. method ``N`` on the wrapped object,
    7. hook ``get_N`` on the wrapped object,
    8. hook ``N`` on the wrapped object,
    9. attribute (or mapping key) ``N`` on the wrapped object.

    Names match case-insensitively with underscores ignored, so
    ``presenter.display_name`` finds ``getDisplayName``. Accessors (steps 2-5
    and the hooks) are called and their value returned. Methods found at
    steps 1 and 6 are returned bound through attribute access, so
    ``presenter.method(*args)`` forwards the call; ``presenter[name]`` calls
    them without arguments instead, as a template expression would.

    Names in ``forbidden_methods`` are never forwarded to the wrapped object.

    Subclasses taking extra constructor dependencies must keep ``obj`` as the
    name of the wrapped-object parameter so a container can build them.
    """

    __slots__ = ("_object",)

    forbidden_methods: ClassVar[frozenset[str]] = DEFAULT_FORBIDDEN_METHODS

    def __init__(self, obj: Any) -> None:
        object.__setattr__(self, "_object", obj)

    def get_object(self) -> Any:
        """Return the wrapped object itself."""
        return self._object

    def present(self, name: str) -> Any:
        """Return the value of ``name``, calling zero-argument methods."""
        return self._lookup(name, invoke_methods=True)

    def __getitem__(self, name: str) -> Any:
        return self.present(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._lookup(name, invoke_methods=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        raise ForbiddenOperationError(f"set {name}")

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        raise ForbiddenOperationError(f"delete {name}")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(dir(self._object)))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Presenter):
            return bool(self._object == other._object)
        return bool(self._object == other)

    def __hash__(self) -> int:
        return hash(self._object)

    def __str__(self) -> str:
        return str(self._object)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._object!r})"

    def _is_forbidden(self, name: str) -> bool:
        normalized = normalize(name)
        return any(normalize(method) == normalized for method in self.forbidden_methods)

    def _lookup(self, name: str, *, invoke_methods: bool) -> Any:
        # 1-3: the presenter itself
        for spelling in spellings(name):
            prop = getattr(type(self), spelling, None)
            if isinstance(prop, property):
                # a failing getter must surface, not fall through the chain
                return prop.__get__(self, type(self))
        method = _find_callable(self, name, "", _own_member)
        if method is not MISSING:
            return method() if invoke_methods else method
        for prefix in _ACCESSOR_PREFIXES:
            accessor = _find_callable(self, name, prefix, _own_member)
            if accessor is not MISSING:
                return accessor()

        if self._is_forbidden(name):
            raise ForbiddenOperationError(name)

        obj = self._object
        # 4-6: the wrapped object
        for prefix in _ACCESSOR_PREFIXES:
            accessor = _find_callable(obj, name, prefix, _member)
            if accessor is not MISSING:
                return accessor()
        method = _find_callable(obj, name, "", _member)
        if method is not MISSING:
            return method() if invoke_methods else method

        # 7-8: hooks
        if isinstance(obj, SupportsHooks):
            snake = to_snake(name)
            for hook_name in (f"get_{snake}", snake):
                if obj.has_hook(hook_name):
                    return obj.call_hook(hook_name)

        # 9: raw attribute
        for spelling in spellings(name):
            value = _member(obj, spelling)
            if value is not MISSING:
                return value
        if isinstance(obj, Mapping):
            for spelling in spellings(name):
                if spelling in obj:
                    return obj[spelling]

        raise AttributeNotFoundError(name, obj)


class Presentable:
    """Base class for objects that know their presenter.

    Set ``presenter_class`` on subclasses, or override ``get_presenter`` when
    building the presenter needs more than the object itself.
    """

    presenter_class: ClassVar[type[Presenter]] = Presenter

    def get_presenter(self) -> Presenter:
        return self.presenter_class(self)
