import pytest

from cryptoballot import FormatError, SignatureRequest, SignatureRequestError
from cryptoballot.settings import DEFAULT_MIN_KEY_BITS, Settings, load_settings

DELIM = b"\n\n"


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("CRYPTOBALLOT_MIN_KEY_BITS", raising=False)
    monkeypatch.delenv("CRYPTOBALLOT_MAX_REQUEST_BYTES", raising=False)
    assert load_settings() == Settings(min_key_bits=DEFAULT_MIN_KEY_BITS, max_request_bytes=0)


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CRYPTOBALLOT_MIN_KEY_BITS", "3072")
    monkeypatch.setenv("CRYPTOBALLOT_MAX_REQUEST_BYTES", " 4096 ")
    s = load_settings()
    assert s.min_key_bits == 3072
    assert s.max_request_bytes == 4096


@pytest.mark.parametrize("value", ["abc", "-1", "1.5"])
def test_bad_env_values(monkeypatch, value: str) -> None:
    monkeypatch.setenv("CRYPTOBALLOT_MIN_KEY_BITS", value)
    with pytest.raises(ValueError):
        load_settings()


def test_parse_reads_env_when_no_settings_given(monkeypatch, request_fields) -> None:
    raw = DELIM.join(request_fields())
    monkeypatch.setenv("CRYPTOBALLOT_MAX_REQUEST_BYTES", "16")
    with pytest.raises(FormatError):
        SignatureRequest.parse(raw)


def test_bad_env_is_not_reported_as_rejected_request(monkeypatch, request_fields) -> None:
    from cryptoballot import check_signature_request

    raw = DELIM.join(request_fields())
    monkeypatch.setenv("CRYPTOBALLOT_MIN_KEY_BITS", "lots")
    with pytest.raises(ValueError) as ei:
        check_signature_request(raw)
    assert not isinstance(ei.value, SignatureRequestError)

    # settings loaded once by the caller bypass the environment
    outcome = check_signature_request(raw, settings=Settings())
    assert outcome.ok
