from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .analytics.classify import classify_receipt, triage_receipt
from .analytics.models import FailedTx, TxAction
from .analytics.pricing import resolve_value
from .market.client import GraphQLError
from .notify.templates import FAILED_TITLE, SUCCESS_TITLE, failure_summary, success_alert
from .storage.notified_store import NotifiedLedger
from .storage.tx_log import TransactionRecord, read_transactions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    scanned: int
    failed: int
    actions: int
    alerts: int


def run_diagnostic_probe(node, tx_hash: str) -> None:
    receipt = node.get_tx(tx_hash)
    if receipt is None:
        logger.debug("Probe %s: not found", tx_hash)
        return
    logger.debug("Probe %s: %s", tx_hash, receipt.model_dump_json(indent=2))


def collect_actions(
    *,
    node,
    transactions: list[TransactionRecord],
    request_delay: float,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[list[TxAction], list[FailedTx]]:
    """
    Fetch and classify each transaction in log order, pausing `request_delay`
    seconds before every node call. Node errors are not caught here.
    """
    actions: list[TxAction] = []
    failed: list[FailedTx] = []

    for tx in transactions:
        sleep(request_delay)
        receipt = node.get_tx(tx.hash)

        status = triage_receipt(receipt)
        if status == "missing":
            logger.info("Tx %s not found on node, skipping", tx.hash)
            continue
        if status == "failed":
            logger.info("Tx %s failed on chain (code=%s)", tx.hash, receipt.code)
            failed.append(FailedTx(type=tx.type, hash=tx.hash))
            continue

        action = classify_receipt(receipt, tx.kind)
        if action is None:
            logger.debug("Tx %s (%s): nothing to extract", tx.hash, tx.type)
            continue
        actions.append(action)

    return actions, failed


def run_once(
    *,
    node,
    market,
    notifier,
    ledger: NotifiedLedger,
    transactions_path: Path,
    request_delay: float = 5.0,
    probe_hash: str | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunResult:
    """
    One pass over the transaction log:

    - skip hashes already in the ledger
    - fetch + classify the rest, one node call at a time
    - alert on chain failures, then value and alert on extracted actions
    - mark every scanned hash as notified

    The ledger is persisted only at the two checkpoints below; an exception
    in between leaves it untouched on disk.
    """
    transactions = read_transactions(transactions_path, ledger)
    logger.info("Transactions to check: %s", len(transactions))

    if probe_hash:
        run_diagnostic_probe(node, probe_hash)

    if not transactions:
        return RunResult(scanned=0, failed=0, actions=0, alerts=0)

    actions, failed = collect_actions(
        node=node,
        transactions=transactions,
        request_delay=request_delay,
        sleep=sleep,
    )
    logger.info("Classified: actions=%s failed=%s", len(actions), len(failed))

    if failed:
        message = failure_summary(failed)
        if message:
            notifier.send(message, FAILED_TITLE, priority=0)

        ledger.extend(tx.hash for tx in failed)
        if not actions:
            ledger.persist()

    if not actions:
        return RunResult(scanned=len(transactions), failed=len(failed), actions=0, alerts=0)

    try:
        prices = market.fetch_prices()
        tokens = market.fetch_tokens()
    except GraphQLError as e:
        logger.error("%s", e)
        return RunResult(scanned=len(transactions), failed=len(failed), actions=len(actions), alerts=0)

    alerts = 0
    for action in actions:
        valued = resolve_value(action, tokens, prices)
        if valued is None:
            logger.info("No token/price for %s (%s), skipping alert", action.token, action.type.value)
            continue
        notifier.send(success_alert(valued), SUCCESS_TITLE, priority=0)
        alerts += 1

    # every scanned hash counts as notified, alert or not
    ledger.extend(tx.hash for tx in transactions)
    ledger.persist()

    return RunResult(scanned=len(transactions), failed=len(failed), actions=len(actions), alerts=alerts)
