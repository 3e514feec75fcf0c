from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from wirefront.container import Container
from wirefront.exceptions import InvalidRegistrationError, describe_key
from wirefront.presenters import Presentable, Presenter

logger = logging.getLogger(__name__)

_SCALAR_SEQUENCES = (str, bytes, bytearray, memoryview)


def _rebuild_set(
    original: set[Any] | frozenset[Any],
    items: Iterable[Any],
) -> set[Any] | frozenset[Any]:
    return frozenset(items) if isinstance(original, frozenset) else set(items)


class Decorator:
    """Wrap values in presenters before they reach the view layer.

    A value is presentable when it is a ``Presentable``, exposes a callable
    ``get_presenter()``, or its class (or a base class) was registered with
    ``register``. Lists, tuples, sets and mappings are decorated item by item;
    everything else passes through unchanged.

    With a container, presenter classes are built through ``Container.call``
    so their extra constructor dependencies are injected.
    """

    __slots__ = ("_container", "_presenters")

    def __init__(
        self,
        container: Container | None = None,
        presenters: Mapping[type[Any], type[Presenter]] | None = None,
    ) -> None:
        self._container = container
        self._presenters: dict[type[Any], type[Presenter]] = {}
        for cls, presenter_class in (presenters or {}).items():
            self.register(cls, presenter_class)

    def register(self, cls: type[Any], presenter_class: type[Presenter] = Presenter) -> None:
        """Present instances of ``cls`` (and its subclasses) with ``presenter_class``."""
        if not (isinstance(presenter_class, type) and issubclass(presenter_class, Presenter)):
            msg = f"{describe_key(presenter_class)} is not a Presenter subclass."
            raise InvalidRegistrationError(msg)
        self._presenters[cls] = presenter_class
        logger.debug("Registered %s for %s", describe_key(presenter_class), describe_key(cls))

    def decorate(self, value: Any) -> Any:
        """Return ``value`` wrapped for presentation; see the class docstring."""
        if isinstance(value, Presenter) or isinstance(value, _SCALAR_SEQUENCES):
            return value

        presenter = self._presenter_for(value)
        if presenter is not None:
            return presenter

        if isinstance(value, list):
            return [self.decorate(item) for item in value]
        if isinstance(value, tuple):
            return self._rebuild_tuple(value, [self.decorate(item) for item in value])
        if isinstance(value, Mapping):
            return {key: self.decorate(item) for key, item in value.items()}
        if isinstance(value, (set, frozenset)):
            return _rebuild_set(value, (self.decorate(item) for item in value))
        return value

    def undecorate(self, value: Any) -> Any:
        """Return the wrapped object(s) behind ``value``."""
        if isinstance(value, Presenter):
            return value.get_object()
        if isinstance(value, _SCALAR_SEQUENCES):
            return value
        if isinstance(value, list):
            return [self.undecorate(item) for item in value]
        if isinstance(value, tuple):
            return self._rebuild_tuple(value, [self.undecorate(item) for item in value])
        if isinstance(value, Mapping):
            return {key: self.undecorate(item) for key, item in value.items()}
        if isinstance(value, (set, frozenset)):
            return _rebuild_set(value, (self.undecorate(item) for item in value))
        return value

    def _presenter_for(self, value: Any) -> Presenter | None:
        if isinstance(value, type):
            return None
        for cls in type(value).__mro__:
            presenter_class = self._presenters.get(cls)
            if presenter_class is not None:
                return self._build(presenter_class, value)

        if (
            isinstance(value, Presentable)
            and type(value).get_presenter is Presentable.get_presenter
        ):
            return self._build(value.presenter_class, value)

        get_presenter = getattr(value, "get_presenter", None)
        if callable(get_presenter):
            return get_presenter()
        return None

    def _build(self, presenter_class: type[Presenter], value: Any) -> Presenter:
        if self._container is None:
            return presenter_class(value)
        return self._container.call(presenter_class, {"obj": value})

    @staticmethod
    def _rebuild_tuple(original: tuple[Any, ...], items: list[Any]) -> tuple[Any, ...]:
        if hasattr(original, "_fields"):
            return type(original)(*items)
        return tuple(items)
