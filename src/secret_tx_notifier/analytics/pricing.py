from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Sequence

from ..market.models import PriceQuote, TokenMeta
from .models import TxAction, ValuedTransaction


def find_token(tokens: Sequence[TokenMeta], contract_address: str) -> TokenMeta | None:
    for t in tokens:
        if t.contractAddress == contract_address:
            return t
    return None


def find_price(prices: Sequence[PriceQuote], price_ids: set[str]) -> PriceQuote | None:
    """
    First quote (in source order) linked to the token with a positive value.
    When a token has several feeds nothing ranks them; source order wins.
    """
    for p in prices:
        if p.id in price_ids and p.is_usable:
            return p
    return None


def normalize_amount(raw_amount: str, decimals: int) -> float | None:
    try:
        raw = Decimal(raw_amount)
    except InvalidOperation:
        return None
    if not raw.is_finite():
        return None
    return float(raw / (Decimal(10) ** decimals))


def resolve_value(
    action: TxAction,
    tokens: Sequence[TokenMeta],
    prices: Sequence[PriceQuote],
) -> ValuedTransaction | None:
    token = find_token(tokens, action.token)
    if token is None:
        return None

    price = find_price(prices, token.price_ids)
    if price is None or price.value is None:
        return None

    amount = normalize_amount(action.amount, token.decimals)
    if amount is None:
        return None

    return ValuedTransaction(
        type=action.type,
        symbol=token.symbol,
        amount=amount,
        usd_value=amount * price.value,
    )
