from secret_tx_notifier.analytics.classify import (
    EXTRACTORS,
    classify_receipt,
    find_attr,
    index_of_attr,
    triage_receipt,
)
from secret_tx_notifier.analytics.models import TxAction, TxKind
from secret_tx_notifier.chain.models import Attribute, Receipt


def _attrs(*pairs: tuple[str, str]) -> list[dict]:
    return [{"key": k, "value": v} for k, v in pairs]


def _receipt(*groups: list[dict], code: int = 0) -> Receipt:
    return Receipt.model_validate(
        {
            "txhash": "H",
            "code": code,
            "logs": [{"msg_index": i, "events": events} for i, events in enumerate(groups)],
        }
    )


def _wasm(*pairs: tuple[str, str]) -> dict:
    return {"type": "wasm", "attributes": _attrs(*pairs)}


def _message(*pairs: tuple[str, str]) -> dict:
    return {"type": "message", "attributes": _attrs(*pairs)}


def test_index_of_attr_trims_keys_and_honours_start():
    attrs = [Attribute(key=" a ", value="1"), Attribute(key="b", value="2"), Attribute(key="a", value="3")]
    assert index_of_attr(attrs, "a") == 0
    assert index_of_attr(attrs, "a", start=1) == 2
    assert index_of_attr(attrs, "c") == -1
    assert find_attr(attrs, "a", start=1) == "3"
    assert find_attr(attrs, "c") is None


def test_private_extracts_caller_share():
    r = _receipt(
        [
            _message(("action", "execute")),
            _wasm(("contract_address", "secret1vault"), (" caller_share_token ", "secret1tok"), ("caller_share_amount", "2500000")),
        ]
    )
    assert classify_receipt(r, TxKind.PRIVATE) == TxAction(token="secret1tok", amount="2500000", type=TxKind.PRIVATE)


def test_private_uses_first_wasm_event_only():
    r = _receipt(
        [
            _wasm(("caller_share_token", "secret1tok")),
            _wasm(("caller_share_token", "secret1tok"), ("caller_share_amount", "5")),
        ]
    )
    assert classify_receipt(r, TxKind.PRIVATE) is None


def test_private_requires_both_fields():
    only_token = _receipt([_wasm(("caller_share_token", "secret1tok"))])
    only_amount = _receipt([_wasm(("caller_share_amount", "10"))])
    assert classify_receipt(only_token, TxKind.PRIVATE) is None
    assert classify_receipt(only_amount, TxKind.PRIVATE) is None


def test_private_without_wasm_event():
    r = _receipt([_message(("caller_share_token", "x"), ("caller_share_amount", "1"))])
    assert classify_receipt(r, TxKind.PRIVATE) is None


def test_silk_picks_contract_address_after_share():
    r = _receipt(
        [
            _wasm(
                ("contract_address", "secret1before"),
                ("liquidator_share", "777"),
                ("other", "x"),
                ("contract_address", "secret1after"),
                ("contract_address", "secret1later"),
            )
        ]
    )
    assert classify_receipt(r, TxKind.SILK) == TxAction(token="secret1after", amount="777", type=TxKind.SILK)


def test_silk_ignores_contract_address_before_share():
    r = _receipt([_wasm(("contract_address", "secret1before"), ("liquidator_share", "777"))])
    assert classify_receipt(r, TxKind.SILK) is None


def test_silk_requires_liquidator_share():
    r = _receipt([_wasm(("contract_address", "secret1a"), ("amount", "1"))])
    assert classify_receipt(r, TxKind.SILK) is None


def test_xtoken_net_amount_positive_and_negative():
    up = _receipt(
        [_message()],
        [_wasm(("token", "secret1x"), ("amount_in", "1000"))],
        [_wasm(("amount_out", "1500"))],
    )
    down = _receipt(
        [_message()],
        [_wasm(("token", "secret1x"), ("amount_in", "1500"))],
        [_wasm(("amount_out", "1000"))],
    )
    assert classify_receipt(up, TxKind.XTOKEN) == TxAction(token="secret1x", amount="500", type=TxKind.XTOKEN)
    assert classify_receipt(down, TxKind.XTOKEN).amount == "-500"


def test_xtoken_fallback_fields():
    r = _receipt(
        [_message()],
        [_wasm(("token_deposited", "200"))],
        [_wasm(("token", "secret1y"), ("token_withdraw_amount", "260"), ("amount_out", "999"))],
    )
    assert classify_receipt(r, TxKind.XTOKEN) == TxAction(token="secret1y", amount="60", type=TxKind.XTOKEN)


def test_xtoken_prefers_first_event_token():
    r = _receipt(
        [_message()],
        [_wasm(("token", "secret1first"), ("amount_in", "1"))],
        [_wasm(("token", "secret1second"), ("amount_out", "2"))],
    )
    assert classify_receipt(r, TxKind.XTOKEN).token == "secret1first"


def test_xtoken_missing_groups_or_fields():
    short = _receipt([_message()], [_wasm(("token", "t"), ("amount_in", "1"))])
    no_out = _receipt([_message()], [_wasm(("token", "t"), ("amount_in", "1"))], [_wasm(("x", "y"))])
    bad_number = _receipt([_message()], [_wasm(("token", "t"), ("amount_in", "abc"))], [_wasm(("amount_out", "2"))])
    assert classify_receipt(short, TxKind.XTOKEN) is None
    assert classify_receipt(no_out, TxKind.XTOKEN) is None
    assert classify_receipt(bad_number, TxKind.XTOKEN) is None


def test_unknown_kind_is_noop():
    r = _receipt([_wasm(("caller_share_token", "t"), ("caller_share_amount", "1"))])
    assert classify_receipt(r, "liquidation") is None
    assert classify_receipt(r, None) is None
    assert classify_receipt(r, "private") is not None


def test_failed_receipt_is_never_classified():
    r = _receipt([_wasm(("caller_share_token", "t"), ("caller_share_amount", "1"))], code=5)
    assert classify_receipt(r, TxKind.PRIVATE) is None


def test_triage():
    assert triage_receipt(None) == "missing"
    assert triage_receipt(_receipt(code=3)) == "failed"
    assert triage_receipt(_receipt()) == "ok"


def test_every_kind_has_an_extractor():
    assert set(EXTRACTORS) == set(TxKind)


def test_classification_is_deterministic():
    r = _receipt([_wasm(("liquidator_share", "5"), ("contract_address", "secret1c"))])
    assert classify_receipt(r, TxKind.SILK) == classify_receipt(r, TxKind.SILK)
