from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar, Protocol, runtime_checkable

from wirefront.naming import normalize

HookFunction = Callable[..., Any]


@runtime_checkable
class SupportsHooks(Protocol):
    """Objects that dispatch calls by name to dynamically registered hooks."""

    def has_hook(self, name: str) -> bool: ...

    def call_hook(self, name: str, *args: Any, **kwargs: Any) -> Any: ...


class Hookable:
    """Mixin adding per-class hooks dispatched by name.

    Hooks registered on a class are visible from its subclasses; a subclass
    can shadow a hook by registering the same name. Names are matched the
    same way presenter lookups are, so ``get_title`` and ``getTitle`` are one
    hook. A hook receives the object as its first argument.

    Examples:
        @Entry.register_hook("reading_time")
        def reading_time(entry: Entry) -> int:
            return len(entry.body.split()) // 200

    """

    _hooks: ClassVar[dict[str, HookFunction]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._hooks = {}

    @classmethod
    def register_hook(cls, name: str, func: HookFunction | None = None) -> Any:
        """Register ``func`` as hook ``name``; usable as a decorator without ``func``."""
        if func is None:

            def decorator(hook: HookFunction) -> HookFunction:
                cls._hooks[normalize(name)] = hook
                return hook

            return decorator

        cls._hooks[normalize(name)] = func
        return func

    @classmethod
    def _find_hook(cls, name: str) -> HookFunction | None:
        normalized = normalize(name)
        for klass in cls.__mro__:
            hooks = klass.__dict__.get("_hooks")
            if hooks and normalized in hooks:
                return hooks[normalized]
        return None

    def has_hook(self, name: str) -> bool:
        return self._find_hook(name) is not None

    def call_hook(self, name: str, *args: Any, **kwargs: Any) -> Any:
        hook = self._find_hook(name)
        if hook is None:
            msg = f"{type(self).__qualname__} has no hook named {name!r}"
            raise LookupError(msg)
        return hook(self, *args, **kwargs)
