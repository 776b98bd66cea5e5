from __future__ import annotations

import math
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..analytics.models import FailedTx, TxKind, ValuedTransaction

FAILED_TITLE = "Failed Transaction Alert"
SUCCESS_TITLE = "New Transaction Alert"


def fmt_amount(x: float) -> str:
    """
    Number rendering as in JavaScript's String(x): shortest round-trip digits,
    plain notation for 1e-6 <= |x| < 1e21, otherwise `1e-7` / `1.5e+21`.
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "-Infinity" if x < 0 else "Infinity"
    if x == 0:
        return "0"

    sign = "-" if x < 0 else ""
    d = Decimal(repr(abs(x))).normalize()
    _, digit_tuple, exp = d.as_tuple()
    digits = "".join(str(n) for n in digit_tuple)
    k = len(digits)
    n = exp + k  # value = 0.<digits> * 10**n

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        body = f"{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"
    return sign + body


def fmt_usd(x: float) -> str:
    """
    Four decimals with ties rounded away from zero, like Number.toFixed(4).
    """
    if not math.isfinite(x) or abs(x) >= 1e21:
        return fmt_amount(x)
    if x == 0:
        x = 0.0
    q = Decimal(x).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    return format(q, "f")


def failure_summary(failed: Iterable[FailedTx]) -> str | None:
    counts = Counter(tx.type for tx in failed)

    lines: list[str] = []
    for kind in TxKind:
        n = counts.get(kind.value, 0)
        if n > 0:
            lines.append(f"{kind.value}: {n} failed transactions\n")

    if not lines:
        return None
    return "".join(lines)


def success_alert(v: ValuedTransaction) -> str:
    return (
        f"Type: {v.type.value}, Value: ${fmt_usd(v.usd_value)}, "
        f"Token: {v.symbol}, Amount: {fmt_amount(v.amount)}"
    )
