import urllib.parse

import pytest

from zcnsdk.config import (
    DEFAULT_CONFIRMATION_CHAIN_LENGTH,
    DEFAULT_MIN_CONFIRMATION,
    DEFAULT_MIN_SUBMIT,
    TOKEN_UNIT,
    ChainConfig,
    SdkConfig,
    SdkError,
    calculate_min_required,
    convert_to_token,
    convert_to_value,
    with_params,
)

CHAIN_JSON = (
    '{"chain_id": "chain", "block_worker": "http://bw.example.com", '
    '"miners": ["http://m1.example.com"], "sharders": ["http://s1.example.com"], '
    '"signature_scheme": "ed25519", "min_submit": 20, "extra": true}'
)


def test_chain_config_from_json():
    chain = ChainConfig.from_json(CHAIN_JSON)
    assert chain.chain_id == "chain"
    assert chain.miners == ["http://m1.example.com"]
    assert chain.sharders == ["http://s1.example.com"]
    assert chain.min_submit == 20
    assert chain.min_confirmation == 0


@pytest.mark.parametrize("text", ["not json", "[1, 2]", '{"miners": "x"}', '{"min_submit": "a"}'])
def test_chain_config_rejects_bad_input(text):
    with pytest.raises(SdkError):
        ChainConfig.from_json(text)


def test_load_chain_json_applies_defaults():
    config = SdkConfig()
    config.load_chain_json(CHAIN_JSON)
    assert config.is_configured
    assert config.chain.min_submit == 20
    assert config.chain.min_confirmation == DEFAULT_MIN_CONFIRMATION
    assert config.min_required_chain_length() == DEFAULT_CONFIRMATION_CHAIN_LENGTH


def test_load_chain_json_rejects_scheme():
    config = SdkConfig()
    with pytest.raises(SdkError, match="signature scheme"):
        config.load_chain_json('{"signature_scheme": "rsa"}')
    assert not config.is_configured


def test_configure_options():
    config = SdkConfig()
    config.configure("http://bw.example.com", "bls0chain", chain_id="abc", min_confirmation=70)
    assert config.chain.block_worker == "http://bw.example.com"
    assert config.chain.chain_id == "abc"
    assert config.chain.min_confirmation == 70
    assert config.chain.min_submit == DEFAULT_MIN_SUBMIT


def test_configure_rejects_scheme():
    with pytest.raises(SdkError):
        SdkConfig().configure("http://bw.example.com", "unknown")


def test_check_sdk_init():
    config = SdkConfig()
    with pytest.raises(SdkError, match="SDK not initialized"):
        config.check_sdk_init()
    config.configure("http://bw.example.com", "ed25519")
    with pytest.raises(SdkError):
        config.check_sdk_init()
    config.chain.miners = ["http://m.example.com"]
    config.chain.sharders = ["http://s.example.com"]
    config.check_sdk_init()
    with pytest.raises(SdkError, match="wallet info not found"):
        config.check_config()


def test_set_wallet_and_check():
    config = SdkConfig()
    config.set_wallet('{"client_id": "cid", "client_key": "ckey"}')
    config.check_wallet_config()
    assert config.client_id == "cid"
    assert config.client_key == "ckey"


def test_set_wallet_invalid_json():
    config = SdkConfig()
    with pytest.raises(SdkError):
        config.set_wallet("{bad")
    assert not config.is_valid_wallet


def test_split_wallet_only_for_bls():
    config = SdkConfig()
    config.configure("http://bw.example.com", "ed25519")
    config.set_wallet('{"client_id": "cid"}', True)
    assert not config.is_split_wallet
    with pytest.raises(SdkError, match="not split key"):
        config.set_auth_url("http://auth.example.com")


def test_set_auth_url():
    config = SdkConfig()
    config.configure("http://bw.example.com", "bls0chain")
    config.set_wallet('{"client_id": "cid"}', True)
    with pytest.raises(SdkError, match="invalid auth url"):
        config.set_auth_url("")
    config.set_auth_url("http://auth.example.com///")
    assert config.auth_url == "http://auth.example.com"


def test_min_miners_and_sharders():
    config = SdkConfig()
    config.configure("http://bw.example.com", "ed25519", min_submit=100, min_confirmation=100)
    config.chain.miners = [f"http://m{i}.example.com" for i in range(6)]
    config.chain.sharders = [f"http://s{i}.example.com" for i in range(5)]
    assert config.min_miners_submit() == len(config.chain.miners)
    assert config.min_sharders_verify() == len(config.chain.sharders)
    config.chain.miners = []
    assert config.min_miners_submit() == 1


@pytest.mark.parametrize("required,percent", [(50, 0.03), (33, 0.1), (100, 0.07)])
def test_calculate_min_required_is_ceiling(required, percent):
    result = calculate_min_required(required, percent)
    assert result >= required * percent
    assert result - 1 < required * percent


def test_token_conversions():
    assert convert_to_value(1.0) == TOKEN_UNIT
    assert convert_to_token(TOKEN_UNIT) == 1.0
    for value in (0, 5 * TOKEN_UNIT, 12345 * TOKEN_UNIT):
        assert convert_to_value(convert_to_token(value)) == value


def test_with_params():
    assert with_params("/path", {}) == "/path"
    result = with_params("/path", {"b": "x y", "a": "1"})
    base, query = result.split("?", 1)
    assert base == "/path"
    assert urllib.parse.parse_qs(query) == {"a": ["1"], "b": ["x y"]}
    assert query.index("a=") < query.index("b=")