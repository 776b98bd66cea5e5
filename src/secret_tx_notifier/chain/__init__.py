from .client import SecretNodeClient
from .models import Attribute, Event, LogEntry, Receipt

__all__ = [
    "SecretNodeClient",
    "Receipt",
    "LogEntry",
    "Event",
    "Attribute",
]
