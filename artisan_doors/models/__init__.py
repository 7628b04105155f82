# Importar todos los modelos para que create_all los detecte
from .subscriber import Subscriber, SubscriberStatus

__all__ = [
    "Subscriber",
    "SubscriberStatus",
]
