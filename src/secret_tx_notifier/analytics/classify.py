from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Callable, Literal, Sequence

from ..chain.models import Attribute, Event, Receipt
from .models import TxAction, TxKind

WASM_EVENT = "wasm"

ReceiptStatus = Literal["missing", "failed", "ok"]

Extractor = Callable[[Receipt], "TxAction | None"]


def index_of_attr(attributes: Sequence[Attribute], key: str, start: int = 0) -> int:
    """
    Position of the first attribute at or after `start` whose trimmed key
    equals `key`, or -1. The same key may appear several times in one event.
    """
    for i in range(max(0, start), len(attributes)):
        if attributes[i].key_name == key:
            return i
    return -1


def find_attr(attributes: Sequence[Attribute], key: str, start: int = 0) -> str | None:
    i = index_of_attr(attributes, key, start)
    if i == -1:
        return None
    return attributes[i].value


def _first_of(event: Event | None, *keys: str) -> str | None:
    if event is None:
        return None
    for key in keys:
        value = find_attr(event.attributes, key)
        if value is not None:
            return value
    return None


def _wasm_event(receipt: Receipt, log_index: int) -> Event | None:
    entry = receipt.log(log_index)
    if entry is None:
        return None
    return entry.first_event(WASM_EVENT)


def _net_amount(amount_in: str, amount_out: str) -> str | None:
    try:
        diff = Decimal(amount_out) - Decimal(amount_in)
    except InvalidOperation:
        return None
    if not diff.is_finite():
        return None
    if diff == diff.to_integral_value():
        return str(int(diff))
    return format(diff.normalize(), "f")


def extract_private(receipt: Receipt) -> TxAction | None:
    event = _wasm_event(receipt, 0)
    if event is None:
        return None

    token = find_attr(event.attributes, "caller_share_token")
    amount = find_attr(event.attributes, "caller_share_amount")
    if token and amount:
        return TxAction(token=token, amount=amount, type=TxKind.PRIVATE)
    return None


def extract_silk(receipt: Receipt) -> TxAction | None:
    event = _wasm_event(receipt, 0)
    if event is None:
        return None

    attrs = event.attributes
    amount_index = index_of_attr(attrs, "liquidator_share")
    if amount_index == -1:
        return None

    amount = attrs[amount_index].value
    # the owning contract's address follows its share in the log
    token = find_attr(attrs, "contract_address", start=amount_index + 1)
    if token and amount:
        return TxAction(token=token, amount=amount, type=TxKind.SILK)
    return None


def extract_xtoken(receipt: Receipt) -> TxAction | None:
    deposit = _wasm_event(receipt, 1)
    withdraw = _wasm_event(receipt, 2)
    if deposit is None or withdraw is None:
        return None

    token = _first_of(deposit, "token")
    if token is None:
        token = _first_of(withdraw, "token")
    amount_in = _first_of(deposit, "amount_in", "token_deposited")
    amount_out = _first_of(withdraw, "token_withdraw_amount", "amount_out")
    if not (token and amount_in and amount_out):
        return None

    amount = _net_amount(amount_in, amount_out)
    if amount is None:
        return None
    return TxAction(token=token, amount=amount, type=TxKind.XTOKEN)


EXTRACTORS: dict[TxKind, Extractor] = {
    TxKind.PRIVATE: extract_private,
    TxKind.SILK: extract_silk,
    TxKind.XTOKEN: extract_xtoken,
}


def triage_receipt(receipt: Receipt | None) -> ReceiptStatus:
    if receipt is None:
        return "missing"
    if not receipt.ok:
        return "failed"
    return "ok"


def classify_receipt(receipt: Receipt, kind: TxKind | str | None) -> TxAction | None:
    """
    Token movement for a successful receipt, or None when the kind is unknown
    or the logs don't carry the fields the kind needs.
    """
    if not receipt.ok:
        return None

    if not isinstance(kind, TxKind):
        kind = TxKind.parse(kind)
    if kind is None:
        return None

    return EXTRACTORS[kind](receipt)
