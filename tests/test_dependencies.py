import functools
from dataclasses import dataclass
from typing import Optional

import pytest

from wirefront.dependencies import DependenciesExtractor, unwrap_optional


@pytest.fixture(scope="module")
def dependencies_extractor() -> DependenciesExtractor:
    return DependenciesExtractor()


def test_regular_class(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    class ServiceB:
        def __init__(self, service_a: ServiceA, retries: int = 3) -> None:
            self.service_a = service_a

    service_a, retries = dependencies_extractor.get_parameters(ServiceB)

    assert service_a.name == "service_a"
    assert service_a.annotation is ServiceA
    assert not service_a.has_default
    assert retries.annotation is int
    assert retries.has_default
    assert retries.default == 3


def test_class_without_init(dependencies_extractor: DependenciesExtractor) -> None:
    class Plain:
        pass

    assert dependencies_extractor.get_parameters(Plain) == ()


def test_dataclass(dependencies_extractor: DependenciesExtractor) -> None:
    @dataclass
    class ServiceA:
        pass

    @dataclass
    class ServiceB:
        service_a: ServiceA

    (service_a,) = dependencies_extractor.get_parameters(ServiceB)
    assert service_a.annotation is ServiceA


def test_function_and_untyped_params(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    def handler(service_a: ServiceA, raw_value, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        pass

    service_a, raw_value = dependencies_extractor.get_parameters(handler)
    assert service_a.annotation is ServiceA
    assert raw_value.annotation is None


def test_optional_annotations(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    def handler(a: Optional[ServiceA], b: ServiceA | None = None) -> None:  # noqa: UP045
        pass

    a, b = dependencies_extractor.get_parameters(handler)
    assert (a.annotation, a.optional) == (ServiceA, True)
    assert (b.annotation, b.optional) == (ServiceA, True)


def test_unwrap_optional_keeps_wider_unions() -> None:
    assert unwrap_optional(int | str | None) == (int | str | None, False)
    assert unwrap_optional(int) == (int, False)


def test_positional_only(dependencies_extractor: DependenciesExtractor) -> None:
    def handler(value: int, /) -> None:
        pass

    (value,) = dependencies_extractor.get_parameters(handler)
    assert value.positional_only


def test_partial_falls_back_to_signature(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    def handler(service_a: ServiceA, name: str) -> None:
        pass

    service_a, name = dependencies_extractor.get_parameters(functools.partial(handler, name="x"))
    assert service_a.annotation is ServiceA
    assert name.default == "x"


def test_results_are_cached(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        def __init__(self, value: int) -> None:
            self.value = value

    assert dependencies_extractor.get_parameters(ServiceA) is dependencies_extractor.get_parameters(
        ServiceA,
    )
