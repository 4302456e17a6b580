"""Domain interfaces (ports) implemented by the infrastructure layer."""

from .repositories import IAccountRepository
from .services import IEventPublisher, INotifier, ITokenGenerator

__all__ = [
    "IAccountRepository",
    "IEventPublisher",
    "INotifier",
    "ITokenGenerator",
]
