# tests/test_verify.py
import pytest

from wechatpay_formatter.core.entropy import Entropy
from wechatpay_formatter.verify.inbound import ResponseInspector, InboundResult

NOW = 1700000000


def make_headers(ts=NOW, **overrides):
    headers = {
        "Wechatpay-Timestamp": str(ts),
        "Wechatpay-Nonce": "fdasfwqewlkja484w",
        "Wechatpay-Serial": "5157F09EFDC096DE15EBE81A47057A72",
        "Wechatpay-Signature": "Cg==",
    }
    headers.update(overrides)
    return {k: v for k, v in headers.items() if v is not None}


@pytest.fixture
def inspector() -> ResponseInspector:
    return ResponseInspector(entropy=Entropy(clock=lambda: float(NOW)))


def test_well_formed_response(inspector):
    result = inspector.inspect(make_headers(), '{"code":"SUCCESS"}')
    assert isinstance(result, InboundResult)
    assert result.is_valid is True
    assert bool(result) is True
    assert result.failures == []
    assert result.canonical == f'{NOW}\nfdasfwqewlkja484w\n{{"code":"SUCCESS"}}\n'
    assert result.serial == "5157F09EFDC096DE15EBE81A47057A72"
    assert result.signature == "Cg=="


def test_header_names_case_insensitive(inspector):
    headers = {k.lower(): v for k, v in make_headers().items()}
    result = inspector.inspect(headers)
    assert result.is_valid
    assert result.canonical == f"{NOW}\nfdasfwqewlkja484w\n\n"


def test_missing_headers_reported(inspector):
    headers = make_headers(**{"Wechatpay-Nonce": None, "Wechatpay-Signature": ""})
    result = inspector.inspect(headers)
    assert result.is_valid is False
    assert not result
    assert {f.header for f in result.failures} == {"Wechatpay-Nonce", "Wechatpay-Signature"}
    assert all(f.category == "header" for f in result.failures)
    assert result.canonical == ""
    assert "FAILED" in str(result)


@pytest.mark.parametrize(
    "raw",
    [
        "yesterday",
        "1_700_000_000",
        " 1700000000 ",
        "+1700000000",
        "1700000000.0",
        "\u0661\u0667\u0660\u0660\u0660\u0660\u0660\u0660\u0660\u0660",  # Arabic-Indic digits
    ],
)
def test_non_integer_timestamp(inspector, raw):
    result = inspector.inspect(make_headers(ts=raw))
    assert result.canonical == ""
    assert result.is_valid is False
    assert result.first_failure.category == "timestamp"


@pytest.mark.parametrize("skew, ok", [(0, True), (300, True), (-300, True), (301, False), (-301, False)])
def test_clock_offset_window(inspector, skew, ok):
    result = inspector.inspect(make_headers(ts=NOW + skew))
    assert result.is_valid is ok
    if not ok:
        assert result.first_failure.category == "clock"


def test_custom_clock_offset():
    strict = ResponseInspector(max_clock_offset=5, entropy=Entropy(clock=lambda: float(NOW)))
    assert not strict.inspect(make_headers(ts=NOW - 6))
    assert strict.inspect(make_headers(ts=NOW - 5))


def test_negative_clock_offset_rejected():
    with pytest.raises(ValueError):
        ResponseInspector(max_clock_offset=-1)


def test_verify_passes_canonical_to_verifier(inspector):
    calls = []

    def verifier(canonical, signature, serial):
        calls.append((canonical, signature, serial))
        return True

    result = inspector.verify(make_headers(), "{}", verifier)
    assert result.is_valid
    assert result.message == "Valid response"
    assert calls == [(f"{NOW}\nfdasfwqewlkja484w\n{{}}\n", "Cg==", "5157F09EFDC096DE15EBE81A47057A72")]


def test_verify_records_bad_signature(inspector):
    result = inspector.verify(make_headers(), "{}", lambda *args: False)
    assert result.is_valid is False
    assert result.first_failure.category == "signature"


def test_verify_skips_verifier_when_malformed(inspector):
    def verifier(*args):
        raise AssertionError("verifier must not run")

    result = inspector.verify(make_headers(ts=NOW + 1000), "{}", verifier)
    assert result.is_valid is False
