import argparse
import logging

from . import __version__
from .config import Settings, load_settings
from .logging_setup import setup_logging


def mask(value: str | None, show: int = 4) -> str:
    if not value:
        return "None"
    if len(value) <= show:
        return "*" * len(value)
    return value[:show] + "*" * (len(value) - show)


def run_notifier(settings: Settings) -> int:
    from .chain import SecretNodeClient
    from .job import run_once
    from .market import MarketDataClient
    from .notify import PushoverClient
    from .storage import NotifiedLedger

    logger = logging.getLogger(__name__)

    ledger = NotifiedLedger.load(settings.notified_file)

    node = SecretNodeClient(
        settings.node_url,
        chain_id=settings.chain_id,
        encryption_seed=settings.seed_bytes,
        timeout=settings.http_timeout_seconds,
    )
    market = MarketDataClient(settings.graphql_url, timeout=settings.http_timeout_seconds)
    notifier = PushoverClient(
        settings.pushover_token,
        settings.pushover_user,
        timeout=settings.http_timeout_seconds,
    )
    try:
        result = run_once(
            node=node,
            market=market,
            notifier=notifier,
            ledger=ledger,
            transactions_path=settings.transactions_file,
            request_delay=settings.request_delay_seconds,
            probe_hash=settings.debug_probe_hash,
        )
    finally:
        node.close()
        market.close()
        notifier.close()

    logger.info(
        "Run done. scanned=%s failed=%s actions=%s alerts=%s",
        result.scanned,
        result.failed,
        result.actions,
        result.alerts,
    )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(prog="secret-tx-notifier")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=["run", "health", "status-env", "schedule"],
        help="Command to run. Default: run (one pass, for cron)",
    )

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return 0

    settings = load_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    if args.command == "status-env":
        print("NODE =", settings.node_url)
        print("CHAIN_ID =", settings.chain_id)
        print("ENCRYPTION_SEED =", mask(settings.encryption_seed))
        print("GRAPHQL =", settings.graphql_url)
        print("PUSHOVER_TOKEN =", mask(settings.pushover_token))
        print("PUSHOVER_USER =", mask(settings.pushover_user))
        print("TRANSACTIONS_FILE =", settings.transactions_file)
        print("NOTIFIED_FILE =", settings.notified_file)
        print("REQUEST_DELAY_SECONDS =", settings.request_delay_seconds)
        print("LOG_LEVEL =", settings.log_level)
        return 0

    if args.command == "health":
        from .chain import SecretNodeClient

        node = SecretNodeClient(
            settings.node_url,
            chain_id=settings.chain_id,
            encryption_seed=settings.seed_bytes,
            timeout=settings.http_timeout_seconds,
        )
        try:
            ok = node.verify_chain_id()
        except Exception:
            logger.exception("Node health check failed")
            return 1
        finally:
            node.close()

        print("ok" if ok else "chain id mismatch")
        return 0 if ok else 1

    if args.command == "schedule":
        from .scheduler import create_scheduler, start_job

        scheduler = create_scheduler(settings.sched_tz, logger)
        start_job(
            scheduler,
            cron=settings.sched_cron,
            job=lambda: run_notifier(settings),
            logger=logger,
        )
        return 0

    try:
        return run_notifier(settings)
    except Exception:
        logger.exception("Notifier run failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
