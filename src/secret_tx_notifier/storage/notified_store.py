from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


class NotifiedLedger:
    """
    Hashes of transactions that already produced a notification.

    Stored as a single JSON list:

      ["E7BD03...", "0A1B2C...", ...]

    Semantically a set; order of first insertion is kept so the file stays
    diffable. The whole document is rewritten on every persist().
    """

    def __init__(self, path: Path, hashes: Iterable[str] = ()):
        self.path = Path(path)
        self._hashes: list[str] = []
        self._seen: set[str] = set()
        self.extend(hashes)

    @classmethod
    def load(cls, path: Path) -> "NotifiedLedger":
        p = Path(path)
        if not p.exists():
            ledger = cls(p)
            ledger.persist()
            return ledger

        data = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Notified ledger {p} must contain a JSON list")

        return cls(p, (str(x) for x in data))

    def __contains__(self, tx_hash: object) -> bool:
        return tx_hash in self._seen

    def __len__(self) -> int:
        return len(self._hashes)

    def contains(self, tx_hash: str) -> bool:
        return tx_hash in self._seen

    def hashes(self) -> list[str]:
        return list(self._hashes)

    def append(self, tx_hash: str) -> None:
        if tx_hash in self._seen:
            return
        self._seen.add(tx_hash)
        self._hashes.append(tx_hash)

    def extend(self, hashes: Iterable[str]) -> None:
        for h in hashes:
            self.append(h)

    def persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(self._hashes), encoding="utf-8")
        tmp.replace(self.path)
        logger.debug("Notified ledger persisted: %s hashes -> %s", len(self._hashes), self.path)
