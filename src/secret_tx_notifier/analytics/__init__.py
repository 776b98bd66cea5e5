from .classify import EXTRACTORS, classify_receipt, triage_receipt
from .models import FailedTx, TxAction, TxKind, ValuedTransaction
from .pricing import resolve_value

__all__ = [
    "EXTRACTORS",
    "classify_receipt",
    "triage_receipt",
    "resolve_value",
    "TxKind",
    "TxAction",
    "FailedTx",
    "ValuedTransaction",
]
