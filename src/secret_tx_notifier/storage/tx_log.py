from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Container, Iterable

from ..analytics.models import TxKind

# log timestamps are stored in units of 10 ms
TIME_SCALE_MS = 10


@dataclass(frozen=True)
class TransactionRecord:
    time: datetime | None
    hash: str
    type: str

    @property
    def kind(self) -> TxKind | None:
        return TxKind.parse(self.type)


def _parse_time(raw: str) -> datetime | None:
    try:
        ms = float(raw) * TIME_SCALE_MS
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def parse_line(line: str) -> TransactionRecord | None:
    """
    One line of the transaction log: `timestamp,hash,type`.
    Returns None when there is no hash; every other field is best-effort.
    """
    parts = line.split(",")
    tx_hash = parts[1].strip() if len(parts) > 1 else ""
    if not tx_hash:
        return None

    return TransactionRecord(
        time=_parse_time(parts[0].strip()),
        hash=tx_hash,
        type=parts[2].strip() if len(parts) > 2 else "",
    )


def parse_lines(lines: Iterable[str], notified: Container[str] = ()) -> list[TransactionRecord]:
    out: list[TransactionRecord] = []
    for line in lines:
        rec = parse_line(line)
        if rec is None:
            continue
        if rec.hash in notified:
            continue
        out.append(rec)
    return out


def read_transactions(path: Path, notified: Container[str] = ()) -> list[TransactionRecord]:
    """
    Records from the log file in file order, minus hash-less lines and
    hashes already present in `notified`.
    """
    text = Path(path).read_text(encoding="utf-8")
    return parse_lines(text.splitlines(), notified)
