"""Shared pytest fixtures for wirefront tests."""

import pytest

from wirefront.container import Container
from wirefront.decorator import Decorator


@pytest.fixture()
def container() -> Container:
    """Default container with autoregistration enabled."""
    return Container()


@pytest.fixture()
def container_no_autoregister() -> Container:
    """Container that only resolves explicit bindings."""
    return Container(autoregister=False)


@pytest.fixture()
def decorator() -> Decorator:
    """Decorator without a container; presenters are built directly."""
    return Decorator()
