from __future__ import annotations

import pytest

from wirefront.container import Container
from wirefront.decorator import Decorator


@pytest.fixture()
def wirefront_container() -> Container:
    """Create a per-test container.

    The fixture is function-scoped, so bindings and cached singletons are
    isolated between tests unless users override fixture scope explicitly.

    Returns:
        A new ``Container`` instance.

    """
    return Container()


@pytest.fixture()
def wirefront_decorator(wirefront_container: Container) -> Decorator:
    """Create a decorator that builds presenters through ``wirefront_container``.

    The container gets the decorator bound as an instance, so application code
    resolving ``Decorator`` during the test receives this one.

    Returns:
        A new ``Decorator`` instance.

    """
    decorator = Decorator(container=wirefront_container)
    wirefront_container.instance(Decorator, decorator)
    return decorator
