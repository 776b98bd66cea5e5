from __future__ import annotations

import base64
import json
import logging

import httpx
from pydantic import ValidationError

from .. import __version__
from .encryption import PLAINTEXT_KEYS, EncryptionUtils
from .models import Event, LogEntry, Receipt

logger = logging.getLogger(__name__)

MSG_INDEX_KEY = "msg_index"


def _logs_from_raw(raw_log: str) -> list[LogEntry]:
    """
    Older nodes leave `logs` empty and put the same structure into `raw_log`
    as a JSON string. Anything that isn't a JSON array is a plain error text.
    """
    s = (raw_log or "").strip()
    if not s.startswith("["):
        return []
    try:
        data = json.loads(s)
        return [LogEntry.model_validate(x) for x in data if isinstance(x, dict)]
    except (json.JSONDecodeError, ValidationError):
        return []


def _logs_from_events(events: list[Event]) -> list[LogEntry]:
    """
    Rebuild per-message log groups from flat tx events. Events without a
    `msg_index` attribute (fees, signatures) belong to no message and are
    dropped; event and attribute order within a message is kept.
    """
    groups: dict[int, list[Event]] = {}
    for ev in events:
        idx: int | None = None
        attrs = []
        for a in ev.attributes:
            if a.key_name == MSG_INDEX_KEY and idx is None:
                try:
                    idx = int(a.value or "")
                except ValueError:
                    pass
                continue
            attrs.append(a)
        if idx is None or idx < 0:
            continue
        groups.setdefault(idx, []).append(Event(type=ev.type, attributes=attrs))

    if not groups:
        return []
    return [LogEntry(msg_index=i, events=groups.get(i, [])) for i in range(max(groups) + 1)]


def parse_tx_response(payload: object) -> Receipt | None:
    if not isinstance(payload, dict):
        return None
    body = payload.get("tx_response")
    if not isinstance(body, dict):
        return None

    receipt = Receipt.model_validate(body)
    if not receipt.logs and receipt.raw_log:
        receipt.logs = _logs_from_raw(receipt.raw_log)
    if not receipt.logs and receipt.events:
        receipt.logs = _logs_from_events(receipt.events)
    return receipt


def contract_messages(payload: object) -> list[bytes | None]:
    """
    Encrypted `msg` bytes of each tx message, by message index.
    None for messages that don't carry a contract message.
    """
    if not isinstance(payload, dict):
        return []
    body = (payload.get("tx") or {}).get("body") or {}
    messages = body.get("messages") or []

    out: list[bytes | None] = []
    for m in messages:
        raw = m.get("msg") if isinstance(m, dict) else None
        if not isinstance(raw, str) or not raw:
            out.append(None)
            continue
        try:
            out.append(base64.b64decode(raw, validate=True))
        except ValueError:
            out.append(None)
    return out


class SecretNodeClient:
    """
    Read-only client for a Secret Network node's LCD (REST) endpoint.
    Only the single call the notifier needs: look up a transaction by hash.

    With an encryption seed, wasm event attributes of messages this wallet
    sent are decrypted in place; everything else is returned as served.
    """

    def __init__(
        self,
        base_url: str,
        chain_id: str,
        encryption_seed: bytes | None = None,
        timeout: float = 20.0,
    ):
        self._base_url = base_url.rstrip("/")
        self.chain_id = chain_id

        self._encryption = EncryptionUtils(encryption_seed) if encryption_seed else None
        self._consensus_io_pubkey: bytes | None = None

        self._client = httpx.Client(
            base_url=self._base_url,
            headers={"User-Agent": f"secret-tx-notifier/{__version__}"},
            timeout=httpx.Timeout(timeout),
        )

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str) -> httpx.Response:
        try:
            return self._client.get(path)
        except httpx.HTTPError as e:
            raise RuntimeError(f"Node request failed: {path}. Error: {e}") from e

    def _get_json(self, path: str) -> object:
        resp = self._get(path)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RuntimeError(
                f"Node API error: {resp.status_code} {resp.reason_phrase}. Response: {resp.text}"
            ) from e

        try:
            return resp.json()
        except ValueError as e:
            raise RuntimeError(f"Node returned non-JSON body for {path}") from e

    def consensus_io_pubkey(self) -> bytes:
        if self._consensus_io_pubkey is None:
            data = self._get_json("/registration/v1beta1/tx-key")
            key = data.get("key") if isinstance(data, dict) else None
            if not isinstance(key, str):
                raise RuntimeError("Node returned no consensus IO public key")
            self._consensus_io_pubkey = base64.b64decode(key)
        return self._consensus_io_pubkey

    def _decrypt_logs(self, receipt: Receipt, messages: list[bytes | None]) -> None:
        enc = self._encryption
        if enc is None:
            return

        for position, entry in enumerate(receipt.logs):
            idx = entry.msg_index if entry.msg_index is not None else position
            msg = messages[idx] if 0 <= idx < len(messages) else None
            nonce = enc.nonce_of(msg) if msg else None
            if nonce is None:
                continue

            io_key = self.consensus_io_pubkey()
            for ev in entry.events:
                if ev.type != "wasm":
                    continue
                for a in ev.attributes:
                    if a.key_name in PLAINTEXT_KEYS:
                        continue
                    a.key = enc.try_decrypt_text(a.key, nonce, io_key)
                    if a.value:
                        a.value = enc.try_decrypt_text(a.value, nonce, io_key)

    def get_tx(self, tx_hash: str) -> Receipt | None:
        """
        Returns None when the node doesn't know the transaction
        (not indexed yet, pruned, or a bogus hash).
        """
        resp = self._get(f"/cosmos/tx/v1beta1/txs/{tx_hash}")

        if resp.status_code == 404:
            return None
        if resp.status_code == 400 and "not found" in resp.text.lower():
            return None

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RuntimeError(
                f"Node API error: {resp.status_code} {resp.reason_phrase}. Response: {resp.text}"
            ) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise RuntimeError(f"Node returned non-JSON body for tx {tx_hash}") from e

        receipt = parse_tx_response(payload)
        if receipt is not None:
            self._decrypt_logs(receipt, contract_messages(payload))
        return receipt

    def network(self) -> str | None:
        data = self._get_json("/cosmos/base/tendermint/v1beta1/node_info")
        info = (data.get("default_node_info") if isinstance(data, dict) else None) or {}
        network = info.get("network")
        return str(network) if network else None

    def verify_chain_id(self) -> bool:
        network = self.network()
        if network != self.chain_id:
            logger.warning("Node reports chain id %s, expected %s", network, self.chain_id)
            return False
        return True
