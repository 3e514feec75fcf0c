from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from contextvars import ContextVar
from typing import Any, TypeVar, get_origin, overload

from typing_extensions import Self

from wirefront.defaults import (
    DEFAULT_AUTOREGISTER_FACTORIES,
    DEFAULT_PRIMITIVE_TYPES,
    DEFAULT_VALUE_TYPES,
)
from wirefront.dependencies import DependenciesExtractor, ParameterInfo
from wirefront.exceptions import (
    CircularDependencyError,
    InvalidRegistrationError,
    ResolutionError,
    describe_key,
)
from wirefront.registry import (
    MISSING,
    Binding,
    ContextualBindings,
    ContextualOverride,
    OverrideKind,
)
from wirefront.types import Concrete, Key, Lifetime, ResolvingCallback

T = TypeVar("T")

logger = logging.getLogger(__name__)

_USE_DEFAULT = object()

# Keys being built in the current context. New threads start empty and
# asyncio tasks inherit a snapshot, so concurrent resolutions never share it.
_resolution_chain: ContextVar[tuple[Any, ...]] = ContextVar(
    "wirefront_resolution_chain",
    default=(),
)


class ContextualBindingBuilder:
    """Fluent builder behind ``container.when(consumer).needs(dependency).give(value)``."""

    __slots__ = ("_consumers", "_container", "_dependency")

    def __init__(self, container: Container, consumers: tuple[Any, ...]) -> None:
        self._container = container
        self._consumers = consumers
        self._dependency: Any = MISSING

    def needs(self, dependency: Any) -> Self:
        """Select the dependency to override: a class or a parameter name."""
        self._dependency = dependency
        return self

    def give(self, value: Any) -> None:
        """Provide the override.

        A class is resolved through the container, any other callable is
        invoked with injected parameters, and everything else is used as is.
        """
        if isinstance(value, type):
            kind = OverrideKind.BUILD
        elif callable(value):
            kind = OverrideKind.FACTORY
        else:
            kind = OverrideKind.VALUE
        self._register(ContextualOverride(value=value, kind=kind))

    def give_value(self, value: Any) -> None:
        """Provide an override used as is, even when it is a class or a callable."""
        self._register(ContextualOverride(value=value, kind=OverrideKind.VALUE))

    def _register(self, override: ContextualOverride) -> None:
        if self._dependency is MISSING:
            msg = "Call needs() before give() when registering a contextual binding."
            raise InvalidRegistrationError(msg)
        self._container._add_contextual_binding(self._consumers, self._dependency, override)


class Container:
    """Dependency injection container for binding and resolving keys.

    Keys are classes or string aliases. Unbound concrete classes are built by
    reflecting over their constructor type hints when ``autoregister`` is on.
    """

    __slots__ = (
        "_aliases",
        "_autoregister",
        "_autoregister_factories",
        "_autoregistered",
        "_bindings",
        "_contextual",
        "_dependencies_extractor",
        "_extenders",
        "_global_resolving_callbacks",
        "_lock",
        "_primitive_types",
        "_resolved",
        "_resolving_callbacks",
        "_singleton_locks",
        "_singleton_locks_lock",
        "_singletons",
    )

    def __init__(
        self,
        *,
        autoregister: bool = True,
        primitive_types: Iterable[type[Any]] = DEFAULT_PRIMITIVE_TYPES,
        autoregister_factories: Mapping[type[Any], Callable[[type[Any]], Binding]] | None = None,
    ) -> None:
        self._autoregister = autoregister
        self._primitive_types = frozenset(primitive_types)
        self._autoregister_factories = dict(
            DEFAULT_AUTOREGISTER_FACTORIES
            if autoregister_factories is None
            else autoregister_factories,
        )

        self._bindings: dict[Any, Binding] = {}
        self._autoregistered: dict[Any, Binding] = {}
        self._aliases: dict[Any, Any] = {}
        self._contextual = ContextualBindings()
        self._singletons: dict[Any, Any] = {}
        self._extenders: dict[Any, list[ResolvingCallback]] = {}
        self._resolving_callbacks: dict[Any, list[ResolvingCallback]] = {}
        self._global_resolving_callbacks: list[ResolvingCallback] = []
        self._resolved: set[Any] = set()

        self._dependencies_extractor = DependenciesExtractor()

        # Guards registry mutation; reads stay lock-free.
        self._lock = threading.RLock()
        # Per-key locks for singleton construction to prevent races
        self._singleton_locks: dict[Any, threading.Lock] = {}
        self._singleton_locks_lock = threading.Lock()

        self._register_self()

    # Registration

    def bind(
        self,
        key: Key,
        concrete: Concrete | None = None,
        *,
        singleton: bool = False,
    ) -> None:
        """Register or replace the binding for a key.

        Args:
            key: A class or string alias.
            concrete: The class to build or a factory whose parameters are
                injected. Defaults to ``key`` itself, which must then be a class.
            singleton: Cache the first resolved value for the container lifetime.

        Raises:
            InvalidRegistrationError: If no concrete class or factory can be derived.

        """
        self._validate_key(key)
        if concrete is None:
            if not isinstance(key, type):
                msg = f"Binding {describe_key(key)} needs a concrete class or factory."
                raise InvalidRegistrationError(msg)
            concrete = key
        elif not callable(concrete):
            msg = (
                f"Concrete for {describe_key(key)} must be a class or a callable; "
                "use instance() to bind an existing object."
            )
            raise InvalidRegistrationError(msg)

        lifetime = Lifetime.SINGLETON if singleton else Lifetime.TRANSIENT
        with self._lock:
            self._aliases.pop(key, None)
            self._singletons.pop(key, None)
            self._bindings[key] = Binding(key=key, concrete=concrete, lifetime=lifetime)
        logger.debug(
            "Bound %s to %s (%s)",
            describe_key(key),
            describe_key(concrete),
            lifetime.value,
        )

    def singleton(self, key: Key, concrete: Concrete | None = None) -> None:
        """Register a binding whose first resolved value is reused."""
        self.bind(key, concrete, singleton=True)

    def bind_if(
        self,
        key: Key,
        concrete: Concrete | None = None,
        *,
        singleton: bool = False,
    ) -> bool:
        """Register the binding only when ``key`` is not bound yet.

        Returns:
            Whether a binding was registered.

        """
        with self._lock:
            if self.bound(key):
                return False
            self.bind(key, concrete, singleton=singleton)
            return True

    def singleton_if(self, key: Key, concrete: Concrete | None = None) -> bool:
        """Register a singleton binding only when ``key`` is not bound yet."""
        return self.bind_if(key, concrete, singleton=True)

    def instance(self, key: Key, obj: T) -> T:
        """Register an existing object; every resolution of ``key`` returns it."""
        self._validate_key(key)
        with self._lock:
            self._aliases.pop(key, None)
            obj = self._apply_extenders(key, obj)
            self._bindings[key] = Binding(key=key, instance=obj, lifetime=Lifetime.SINGLETON)
            self._singletons[key] = obj
        logger.debug("Registered instance for %s", describe_key(key))
        return obj

    def alias(self, key: Key, alias: Key) -> None:
        """Make ``alias`` resolve the same way as ``key``."""
        self._validate_key(key)
        self._validate_key(alias)
        if key == alias:
            msg = f"{describe_key(key)} cannot be aliased to itself."
            raise InvalidRegistrationError(msg)
        with self._lock:
            self._aliases[alias] = key
        logger.debug("Aliased %s to %s", describe_key(alias), describe_key(key))

    def when(self, consumer: Any | Iterable[Any]) -> ContextualBindingBuilder:
        """Start a contextual binding for one consumer or a list of consumers.

        Examples:
            container.when(ReportMailer).needs(Transport).give(SmtpTransport)
            container.when(HttpClient).needs("timeout").give(30)

        """
        if isinstance(consumer, (list, tuple, set, frozenset)):
            consumers = tuple(consumer)
        else:
            consumers = (consumer,)
        return ContextualBindingBuilder(self, consumers)

    def extend(self, key: Key, callback: ResolvingCallback) -> None:
        """Wrap or replace every value built for ``key``.

        ``callback(instance, container)`` returns the value to use. An already
        cached singleton is extended immediately.
        """
        key = self._canonical(key)
        with self._lock:
            self._extenders.setdefault(key, []).append(callback)
            if key in self._singletons:
                self._singletons[key] = callback(self._singletons[key], self)

    @overload
    def resolving(self, key: ResolvingCallback, callback: None = None) -> None: ...

    @overload
    def resolving(self, key: Key, callback: ResolvingCallback) -> None: ...

    def resolving(self, key: Any, callback: ResolvingCallback | None = None) -> None:
        """Register an observer called with ``(instance, container)`` after a build.

        Called with a single callable, the observer sees every build.
        """
        with self._lock:
            if callback is None:
                self._global_resolving_callbacks.append(key)
                return
            self._resolving_callbacks.setdefault(self._canonical(key), []).append(callback)

    # Resolution

    def make(self, key: type[T] | str, params: Mapping[str, Any] | None = None) -> Any:
        """Resolve a key to a value.

        Args:
            key: A class or string alias.
            params: Values for constructor parameters, matched by name. A
                resolution with params always builds a fresh value.

        Raises:
            ResolutionError: If the key is unbound and cannot be built, or a
                primitive parameter has no value.
            CircularDependencyError: If the dependency graph contains a cycle.

        """
        return self._resolve(key, dict(params or {}), ())

    def call(self, func: Callable[..., T], params: Mapping[str, Any] | None = None) -> T:
        """Invoke ``func`` with its parameters injected from the container."""
        return self._invoke(func, dict(params or {}), (func,))

    def bound(self, key: Key) -> bool:
        """Return true when ``key`` has a binding, an instance or an alias."""
        return key in self._bindings or key in self._aliases or key in self._singletons

    def resolved(self, key: Key) -> bool:
        """Return true when ``key`` has been built at least once."""
        key = self._canonical(key)
        return key in self._resolved or key in self._singletons

    def get_bindings(self) -> dict[Any, Binding]:
        """Return a snapshot of the explicit bindings, including the container's own."""
        return dict(self._bindings)

    def forget_instance(self, key: Key) -> None:
        """Drop the cached value for ``key``; instance bindings are removed."""
        key = self._canonical(key)
        with self._lock:
            self._singletons.pop(key, None)
            binding = self._bindings.get(key)
            if binding is not None and binding.is_instance:
                del self._bindings[key]

    def forget_instances(self) -> None:
        """Drop every cached singleton and instance binding."""
        with self._lock:
            self._singletons.clear()
            for key in [key for key, binding in self._bindings.items() if binding.is_instance]:
                del self._bindings[key]
            self._register_self()

    def flush(self) -> None:
        """Drop every binding, alias, override, callback and cached value."""
        with self._lock:
            self._bindings.clear()
            self._autoregistered.clear()
            self._aliases.clear()
            self._contextual.clear()
            self._singletons.clear()
            self._extenders.clear()
            self._resolving_callbacks.clear()
            self._global_resolving_callbacks.clear()
            self._resolved.clear()
            self._dependencies_extractor.clear()
            self._register_self()

    def _register_self(self) -> None:
        for key in {Container, type(self)}:
            self._bindings[key] = Binding(key=key, instance=self, lifetime=Lifetime.SINGLETON)
            self._singletons[key] = self

    def _validate_key(self, key: Any) -> None:
        if not isinstance(key, (str, type)):
            msg = f"Binding keys must be classes or strings, got {key!r}."
            raise InvalidRegistrationError(msg)

    def _add_contextual_binding(
        self,
        consumers: tuple[Any, ...],
        dependency: Any,
        override: ContextualOverride,
    ) -> None:
        with self._lock:
            if isinstance(dependency, type):
                dependency = self._canonical(dependency)
            for consumer in consumers:
                self._contextual.add(self._canonical(consumer), dependency, override)
        logger.debug(
            "Contextual binding: %s needs %s -> %s (%s)",
            ", ".join(describe_key(consumer) for consumer in consumers),
            describe_key(dependency),
            describe_key(override.value) if override.kind is not OverrideKind.VALUE else "value",
            override.kind.value,
        )

    def _canonical(self, key: Any) -> Any:
        seen: list[Any] = []
        while True:
            try:
                target = self._aliases.get(key, MISSING)
            except TypeError:
                return key
            if target is MISSING:
                return key
            if key in seen:
                raise CircularDependencyError(key, seen)
            seen.append(key)
            key = target

    def _resolve(self, key: Any, params: dict[str, Any], consumers: tuple[Any, ...]) -> Any:
        key = self._canonical(key)
        override = self._contextual.find(consumers, key) if consumers else None

        if override is not None:
            # the override stands in for key, so key itself is not being built
            logger.debug(
                "Using contextual override for %s in %s",
                describe_key(key),
                describe_key(consumers[0]),
            )
            return self._produce_override(override)

        if not params:
            cached = self._singletons.get(key, MISSING)
            if cached is not MISSING:
                return cached

        chain = _resolution_chain.get()
        if key in chain:
            raise CircularDependencyError(key, list(chain))
        token = _resolution_chain.set((*chain, key))
        try:
            binding = self._get_binding(key)
            if binding.is_singleton and not params:
                return self._resolve_singleton(binding)
            return self._produce(binding, params)
        finally:
            _resolution_chain.reset(token)

    def _resolve_singleton(self, binding: Binding) -> Any:
        key = binding.key
        with self._get_singleton_lock(key):
            # Second check after acquiring lock
            cached = self._singletons.get(key, MISSING)
            if cached is not MISSING:
                return cached
            instance = self._produce(binding, {})
            self._singletons[key] = instance
            logger.debug("Cached singleton for %s", describe_key(key))
            return instance

    def _get_singleton_lock(self, key: Any) -> threading.Lock:
        """Get or create the construction lock for a singleton key.

        Uses double-checked locking to minimize lock contention.
        """
        if key not in self._singleton_locks:
            with self._singleton_locks_lock:
                if key not in self._singleton_locks:
                    self._singleton_locks[key] = threading.Lock()
        return self._singleton_locks[key]

    def _get_binding(self, key: Any) -> Binding:
        binding = self._bindings.get(key)
        if binding is not None:
            return binding
        binding = self._autoregistered.get(key)
        if binding is not None:
            return binding

        if isinstance(key, str):
            raise ResolutionError(key, "no binding is registered for this alias")
        if not self._autoregister:
            raise ResolutionError(key, "no binding is registered and autoregistration is off")

        binding = self._get_auto_registration(key)
        with self._lock:
            return self._autoregistered.setdefault(key, binding)

    def _get_auto_registration(self, key: Any) -> Binding:
        if not isinstance(key, type):
            raise ResolutionError(key, "only classes can be built without a binding")
        if (
            key in self._primitive_types
            or key.__module__ == "builtins"
            or issubclass(key, DEFAULT_VALUE_TYPES)
        ):
            raise ResolutionError(key, "primitive values must be bound or passed explicitly")
        if getattr(key, "_is_protocol", False) or inspect.isabstract(key):
            raise ResolutionError(key, "abstract types need a binding to a concrete class")

        for base_cls, binding_factory in self._autoregister_factories.items():
            if issubclass(key, base_cls):
                return binding_factory(key)

        return Binding(key=key, concrete=key, lifetime=Lifetime.TRANSIENT)

    def _produce(self, binding: Binding, params: dict[str, Any]) -> Any:
        if binding.is_instance:
            return binding.instance

        concrete = binding.concrete
        consumers = (binding.key,) if concrete is binding.key else (binding.key, concrete)
        instance = self._invoke(concrete, params, consumers)

        instance = self._apply_extenders(binding.key, instance)
        self._fire_resolving(binding.key, instance)
        self._resolved.add(binding.key)
        return instance

    def _produce_override(self, override: ContextualOverride) -> Any:
        if override.kind is OverrideKind.BUILD:
            return self._resolve(override.value, {}, ())
        if override.kind is OverrideKind.FACTORY:
            return self._invoke(override.value, {}, (override.value,))
        return override.value

    def _invoke(
        self,
        target: Callable[..., T],
        params: dict[str, Any],
        consumers: tuple[Any, ...],
    ) -> T:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter in self._dependencies_extractor.get_parameters(target):
            value = self._resolve_parameter(parameter, params, consumers)
            if parameter.positional_only:
                args.append(parameter.default if value is _USE_DEFAULT else value)
            elif value is not _USE_DEFAULT:
                kwargs[parameter.name] = value
        return target(*args, **kwargs)

    def _resolve_parameter(
        self,
        parameter: ParameterInfo,
        params: dict[str, Any],
        consumers: tuple[Any, ...],
    ) -> Any:
        name = parameter.name
        if name in params:
            return params[name]

        annotation = parameter.annotation
        injectable = self._is_injectable(annotation)
        if (
            injectable
            and self._contextual.find(consumers, self._canonical(annotation)) is not None
        ):
            return self._resolve(annotation, {}, consumers)

        override = self._contextual.find(consumers, name)
        if override is not None:
            return self._produce_override(override)

        if not injectable:
            if parameter.has_default:
                return _USE_DEFAULT
            if parameter.optional:
                return None
            type_name = "missing" if annotation is None else describe_key(annotation)
            reason = (
                f"parameter {name!r} (type {type_name}) cannot be injected; "
                "pass it through params or a contextual binding"
            )
            raise ResolutionError(consumers[0], reason)

        try:
            return self._resolve(annotation, {}, consumers)
        except CircularDependencyError:
            raise
        except ResolutionError:
            if parameter.has_default:
                return _USE_DEFAULT
            if parameter.optional:
                return None
            raise

    def _is_injectable(self, annotation: Any) -> bool:
        return (
            isinstance(annotation, type)
            and get_origin(annotation) is None
            and annotation not in self._primitive_types
        )

    def _apply_extenders(self, key: Any, instance: Any) -> Any:
        for extender in self._extenders.get(key, ()):
            instance = extender(instance, self)
        return instance

    def _fire_resolving(self, key: Any, instance: Any) -> None:
        for callback in self._global_resolving_callbacks:
            callback(instance, self)
        for callback in self._resolving_callbacks.get(key, ()):
            callback(instance, self)
