"""Tests for the exception hierarchy."""

import pytest

from wirefront.container import Container
from wirefront.exceptions import (
    AttributeNotFoundError,
    CircularDependencyError,
    DependencyExtractionError,
    ForbiddenOperationError,
    InvalidRegistrationError,
    ResolutionError,
    WirefrontError,
)
from wirefront.presenters import Presenter


class CycleA:
    def __init__(self, b: "CycleB") -> None:
        self.b = b


class CycleB:
    def __init__(self, a: CycleA) -> None:
        self.a = a


class SelfReferencing:
    def __init__(self, other: "SelfReferencing") -> None:
        self.other = other


class WithDefault:
    def __init__(self, a: CycleA | None = None) -> None:
        self.a = a


class BrokenHints:
    def __init__(self, dep: "DoesNotExist") -> None:  # type: ignore[name-defined]  # noqa: F821
        self.dep = dep


class Transport:
    pass


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_class",
        [
            ResolutionError,
            DependencyExtractionError,
            CircularDependencyError,
            InvalidRegistrationError,
            AttributeNotFoundError,
            ForbiddenOperationError,
        ],
    )
    def test_all_errors_share_base(self, error_class: type[Exception]) -> None:
        assert issubclass(error_class, WirefrontError)

    def test_attribute_not_found_is_attribute_error(self) -> None:
        assert issubclass(AttributeNotFoundError, AttributeError)


class TestResolutionError:
    def test_raises_for_unbound_string_key(self, container: Container) -> None:
        with pytest.raises(ResolutionError) as exc_info:
            container.make("missing")

        assert exc_info.value.key == "missing"
        assert "no binding is registered" in str(exc_info.value)

    def test_raises_for_abstract_type(self, container: Container) -> None:
        from abc import ABC, abstractmethod

        class Repository(ABC):
            @abstractmethod
            def find(self) -> None: ...

        with pytest.raises(ResolutionError) as exc_info:
            container.make(Repository)

        assert exc_info.value.key is Repository
        assert "abstract" in str(exc_info.value)

    def test_raises_for_protocol(self, container: Container) -> None:
        from typing import Protocol

        class Sender(Protocol):
            def send(self) -> None: ...

        with pytest.raises(ResolutionError, match="abstract"):
            container.make(Sender)

    def test_raises_for_builtin_type(self, container: Container) -> None:
        with pytest.raises(ResolutionError, match="primitive"):
            container.make(int)

    def test_raises_for_nested_missing_dependency(self, container: Container) -> None:
        class Client:
            def __init__(self, url: str) -> None:
                self.url = url

        class Service:
            def __init__(self, client: Client) -> None:
                self.client = client

        with pytest.raises(ResolutionError) as exc_info:
            container.make(Service)

        assert exc_info.value.key is Client

    def test_dependency_extraction_error(self, container: Container) -> None:
        with pytest.raises(DependencyExtractionError) as exc_info:
            container.make(BrokenHints)

        assert exc_info.value.key is BrokenHints
        assert isinstance(exc_info.value.error, NameError)


class TestCircularDependencyError:
    def test_raises_for_mutual_dependency(self, container: Container) -> None:
        with pytest.raises(CircularDependencyError) as exc_info:
            container.make(CycleA)

        assert exc_info.value.chain == [CycleA, CycleB, CycleA]
        assert "CycleA -> CycleB -> CycleA" in str(exc_info.value)

    def test_raises_for_self_dependency(self, container: Container) -> None:
        with pytest.raises(CircularDependencyError) as exc_info:
            container.make(SelfReferencing)

        assert exc_info.value.chain == [SelfReferencing, SelfReferencing]

    def test_raises_through_string_binding(self, container: Container) -> None:
        container.bind("a", CycleA)

        with pytest.raises(CircularDependencyError) as exc_info:
            container.make("a")

        assert exc_info.value.chain[0] == "a"
        assert exc_info.value.chain[-1] is CycleB

    def test_singletons_do_not_deadlock_on_cycle(self, container: Container) -> None:
        container.singleton(CycleA)
        container.singleton(CycleB)

        with pytest.raises(CircularDependencyError):
            container.make(CycleA)

    def test_cycle_is_not_hidden_by_default(self, container: Container) -> None:
        with pytest.raises(CircularDependencyError):
            container.make(WithDefault)

    def test_chain_is_clean_after_error(self, container: Container) -> None:
        with pytest.raises(CircularDependencyError):
            container.make(CycleA)

        assert isinstance(container.make(Transport), Transport)
        with pytest.raises(CircularDependencyError) as exc_info:
            container.make(SelfReferencing)
        assert exc_info.value.chain == [SelfReferencing, SelfReferencing]


class TestInvalidRegistrationError:
    def test_raises_for_non_class_key_without_concrete(self, container: Container) -> None:
        with pytest.raises(InvalidRegistrationError, match="concrete class or factory"):
            container.bind("transport")


class TestAttributeNotFoundError:
    def test_names_attribute(self) -> None:
        presenter = Presenter(Transport())

        with pytest.raises(AttributeNotFoundError) as exc_info:
            presenter.missing_value  # noqa: B018

        assert exc_info.value.name == "missing_value"
        assert "'missing_value'" in str(exc_info.value)
        assert "Transport" in str(exc_info.value)


class TestForbiddenOperationError:
    def test_names_operation(self) -> None:
        presenter = Presenter(Transport())

        with pytest.raises(ForbiddenOperationError) as exc_info:
            presenter.delete()

        assert exc_info.value.name == "delete"
