from secret_tx_notifier.analytics.models import FailedTx, TxKind, ValuedTransaction
from secret_tx_notifier.notify.templates import failure_summary, fmt_amount, fmt_usd, success_alert


def test_failure_summary_counts_per_kind_in_enum_order():
    failed = [
        FailedTx(type="silk", hash="1"),
        FailedTx(type="private", hash="2"),
        FailedTx(type="silk", hash="3"),
    ]
    assert failure_summary(failed) == (
        "private: 1 failed transactions\n"
        "silk: 2 failed transactions\n"
    )


def test_failure_summary_ignores_unknown_types():
    assert failure_summary([FailedTx(type="bogus", hash="1")]) is None
    assert failure_summary([]) is None


def test_success_alert_format():
    v = ValuedTransaction(type=TxKind.XTOKEN, symbol="SHD", amount=2.5, usd_value=12.345678)
    assert success_alert(v) == "Type: xToken, Value: $12.3457, Token: SHD, Amount: 2.5"


def test_fmt_amount_drops_trailing_zero():
    assert fmt_amount(3.0) == "3"
    assert fmt_amount(-0.5) == "-0.5"
    assert fmt_amount(100.0) == "100"


def test_fmt_amount_matches_js_number_text():
    assert fmt_amount(0.000001) == "0.000001"
    assert fmt_amount(0.00001) == "0.00001"
    assert fmt_amount(1e-07) == "1e-7"
    assert fmt_amount(-2.5e-08) == "-2.5e-8"
    assert fmt_amount(1e21) == "1e+21"
    assert fmt_amount(123456789012345680000.0) == "123456789012345680000"
    assert fmt_amount(0.1 + 0.2) == "0.30000000000000004"


def test_fmt_usd_rounds_ties_away_from_zero():
    assert fmt_usd(0.03125) == "0.0313"
    assert fmt_usd(-0.03125) == "-0.0313"
    assert fmt_usd(12.345678) == "12.3457"
    assert fmt_usd(0.0) == "0.0000"
    assert fmt_usd(-0.0) == "0.0000"
