from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TxKind(str, Enum):
    PRIVATE = "private"
    SILK = "silk"
    XTOKEN = "xToken"

    @classmethod
    def parse(cls, raw: str | None) -> "TxKind | None":
        for kind in cls:
            if kind.value == raw:
                return kind
        return None


@dataclass(frozen=True)
class TxAction:
    token: str  # contract address
    amount: str  # raw integer amount, before decimals
    type: TxKind


@dataclass(frozen=True)
class FailedTx:
    type: str
    hash: str


@dataclass(frozen=True)
class ValuedTransaction:
    type: TxKind
    symbol: str
    amount: float
    usd_value: float
