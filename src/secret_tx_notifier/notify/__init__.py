from .pushover import PushoverClient
from .templates import FAILED_TITLE, SUCCESS_TITLE, failure_summary, success_alert

__all__ = [
    "PushoverClient",
    "FAILED_TITLE",
    "SUCCESS_TITLE",
    "failure_summary",
    "success_alert",
]
