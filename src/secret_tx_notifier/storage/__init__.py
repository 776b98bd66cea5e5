from .notified_store import NotifiedLedger
from .tx_log import TransactionRecord, parse_line, read_transactions

__all__ = [
    "NotifiedLedger",
    "TransactionRecord",
    "parse_line",
    "read_transactions",
]
