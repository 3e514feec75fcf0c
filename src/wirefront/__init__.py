from wirefront.container import Container, ContextualBindingBuilder
from wirefront.decorator import Decorator
from wirefront.exceptions import (
    AttributeNotFoundError,
    CircularDependencyError,
    DependencyExtractionError,
    ForbiddenOperationError,
    InvalidRegistrationError,
    ResolutionError,
    WirefrontError,
)
from wirefront.hooks import Hookable, SupportsHooks
from wirefront.presenters import Presentable, Presenter
from wirefront.registry import Binding
from wirefront.types import Lifetime

__all__ = [
    "AttributeNotFoundError",
    "Binding",
    "CircularDependencyError",
    "Container",
    "ContextualBindingBuilder",
    "Decorator",
    "DependencyExtractionError",
    "ForbiddenOperationError",
    "Hookable",
    "InvalidRegistrationError",
    "Lifetime",
    "Presentable",
    "Presenter",
    "ResolutionError",
    "SupportsHooks",
    "WirefrontError",
]
