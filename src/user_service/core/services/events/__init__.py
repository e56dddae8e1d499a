from .dispatcher import EventDispatcher, Subscriber
from .publisher import FactPublisher, TransactionalPublisher

__all__ = [
    "EventDispatcher",
    "FactPublisher",
    "Subscriber",
    "TransactionalPublisher",
]
