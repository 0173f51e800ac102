"""Chain and wallet configuration shared by the SDK's clients."""

from __future__ import annotations

import enum
import json
import math
import urllib.parse
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

SUPPORTED_SCHEMES = ("ed25519", "bls0chain")

StorageSmartContractAddress = "6dba10422e368813802877a85039d3985d96760ed844092319743fb3a76712d7"
VestingSmartContractAddress = "2bba5b05949ea59c80aed3ac3474d7379d3be737e8eb5a968c52295e48333ead"
FaucetSmartContractAddress = "6dba10422e368813802877a85039d3985d96760ed844092319743fb3a76712d3"
InterestPoolSmartContractAddress = "cf8d0df9bd8cc637a4ff4e792ffe3686da6220c45f0e1103baa609f3f1751ef4"
MultiSigSmartContractAddress = "27b5ef7120252b79f9dd9c05505dd28f328c80f6863ee446daede08a84d651a7"
MinerSmartContractAddress = "6dba10422e368813802877a85039d3985d96760ed844092319743fb3a76712d9"
MULTISIG_REGISTER_FUNC_NAME = "register"
MULTISIG_VOTE_FUNC_NAME = "vote"

REGISTER_CLIENT = "/v1/client/put"
GET_CLIENT = "/v1/client/get"
PUT_TRANSACTION = "/v1/transaction/put"
TXN_VERIFY_URL = "/v1/transaction/get/confirmation?hash="
GET_BALANCE = "/v1/client/get/balance?client_id="
GET_LOCK_CONFIG = "/v1/screst/" + InterestPoolSmartContractAddress + "/getLockConfig"
GET_LOCKED_TOKENS = "/v1/screst/" + InterestPoolSmartContractAddress + "/getPoolsStats?client_id="
GET_BLOCK_INFO = "/v1/block/get?"
GET_MAGIC_BLOCK_INFO = "/v1/block/magic/get?"
GET_LATEST_FINALIZED = "/v1/block/get/latest_finalized"
GET_LATEST_FINALIZED_MAGIC_BLOCK = "/v1/block/get/latest_finalized_magic_block"
GET_CHAIN_STATS = "/v1/chain/get/stats"

VESTINGSC_PFX = "/v1/screst/" + VestingSmartContractAddress
GET_VESTING_CONFIG = VESTINGSC_PFX + "/getConfig"
GET_VESTING_POOL_INFO = VESTINGSC_PFX + "/getPoolInfo"
GET_VESTING_CLIENT_POOLS = VESTINGSC_PFX + "/getClientPools"

MINERSC_PFX = "/v1/screst/" + MinerSmartContractAddress
GET_MINERSC_NODE = MINERSC_PFX + "/nodeStat"
GET_MINERSC_POOL = MINERSC_PFX + "/nodePoolStat"
GET_MINERSC_CONFIG = MINERSC_PFX + "/configs"
GET_MINERSC_USER = MINERSC_PFX + "/getUserPools"
GET_MINERSC_MINERS = MINERSC_PFX + "/getMinerList"
GET_MINERSC_SHARDERS = MINERSC_PFX + "/getSharderList"

STORAGESC_PFX = "/v1/screst/" + StorageSmartContractAddress
STORAGESC_GET_SC_CONFIG = STORAGESC_PFX + "/getConfig"
STORAGESC_GET_CHALLENGE_POOL_INFO = STORAGESC_PFX + "/getChallengePoolStat"
STORAGESC_GET_ALLOCATION = STORAGESC_PFX + "/allocation"
STORAGESC_GET_ALLOCATIONS = STORAGESC_PFX + "/allocations"
STORAGESC_GET_READ_POOL_INFO = STORAGESC_PFX + "/getReadPoolStat"
STORAGESC_GET_STAKE_POOL_INFO = STORAGESC_PFX + "/getStakePoolStat"
STORAGESC_GET_STAKE_POOL_USER_INFO = STORAGESC_PFX + "/getUserStakePoolStat"
STORAGESC_GET_BLOBBERS = STORAGESC_PFX + "/getblobbers"
STORAGESC_GET_BLOBBER = STORAGESC_PFX + "/getBlobber"
STORAGESC_GET_WRITE_POOL_INFO = STORAGESC_PFX + "/getWritePoolStat"

CONSENSUS_THRESH = 25.0  # percent

DEFAULT_MIN_SUBMIT = 50
DEFAULT_MIN_CONFIRMATION = 50
DEFAULT_CONFIRMATION_CHAIN_LENGTH = 3
DEFAULT_TXN_EXPIRATION_SECONDS = 60
DEFAULT_WAIT_SECONDS = 3.0

TOKEN_UNIT = 10**10


class Status(enum.IntEnum):
    """Completion status reported for SDK operations."""

    SUCCESS = 0
    NETWORK_ERROR = 1
    ERROR = 2
    REJECTED_BY_USER = 3
    INVALID_SIGNATURE = 4
    AUTH_ERROR = 5
    AUTH_VERIFY_FAILED = 6
    AUTH_TIMEOUT = 7
    UNKNOWN = -1


class Op(enum.IntEnum):
    """Identifiers of information queries."""

    GET_TOKEN_LOCK_CONFIG = 0
    GET_LOCKED_TOKENS = 1
    GET_USER_POOLS = 2
    GET_USER_POOL_DETAIL = 3
    STORAGE_SC_GET_CONFIG = 4
    STORAGE_SC_GET_CHALLENGE_POOL_INFO = 5
    STORAGE_SC_GET_ALLOCATION = 6
    STORAGE_SC_GET_ALLOCATIONS = 7
    STORAGE_SC_GET_READ_POOL_INFO = 8
    STORAGE_SC_GET_STAKE_POOL_INFO = 9
    STORAGE_SC_GET_BLOBBERS = 10
    STORAGE_SC_GET_BLOBBER = 11
    STORAGE_SC_GET_WRITE_POOL_INFO = 12


class SdkError(Exception):
    """Raised when the SDK is misconfigured or a request cannot be completed."""


_STR_FIELDS = {"chain_id", "block_worker", "signature_scheme"}
_LIST_FIELDS = {"miners", "sharders"}
_INT_FIELDS = {"min_submit", "min_confirmation", "confirmation_chain_length"}


@dataclass
class ChainConfig:
    """Parameters of the blockchain the SDK talks to."""

    chain_id: str = ""
    block_worker: str = ""
    miners: list[str] = field(default_factory=list)
    sharders: list[str] = field(default_factory=list)
    signature_scheme: str = ""
    min_submit: int = 0
    min_confirmation: int = 0
    confirmation_chain_length: int = 0

    @classmethod
    def from_json(cls, text: str) -> "ChainConfig":
        """Build a configuration from a JSON object; unknown keys are ignored."""
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as err:
            raise SdkError(f"invalid chain configuration: {err}") from err
        if not isinstance(data, dict):
            raise SdkError("invalid chain configuration: expected a JSON object")
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            value = data[f.name]
            if f.name in _STR_FIELDS and not isinstance(value, str):
                raise SdkError(f"invalid chain configuration: {f.name} must be a string")
            if f.name in _LIST_FIELDS and not (
                isinstance(value, list) and all(isinstance(v, str) for v in value)
            ):
                raise SdkError(f"invalid chain configuration: {f.name} must be a list of strings")
            if f.name in _INT_FIELDS and (isinstance(value, bool) or not isinstance(value, int)):
                raise SdkError(f"invalid chain configuration: {f.name} must be an integer")
            values[f.name] = list(value) if f.name in _LIST_FIELDS else value
        return cls(**values)


def _check_scheme(scheme: str) -> None:
    if scheme not in SUPPORTED_SCHEMES:
        raise SdkError("invalid/unsupported signature scheme")


@dataclass
class SdkConfig:
    """State of an SDK instance: chain parameters, wallet and auth settings."""

    chain: ChainConfig = field(default_factory=ChainConfig)
    wallet: dict[str, Any] = field(default_factory=dict)
    auth_url: str = ""
    is_configured: bool = False
    is_valid_wallet: bool = False
    is_split_wallet: bool = False

    def load_chain_json(self, text: str) -> None:
        """Configure the chain from JSON. Network details are refreshed separately."""
        chain = ChainConfig.from_json(text)
        _check_scheme(chain.signature_scheme)
        self.chain = chain
        self.apply_defaults()
        self.is_configured = True

    def configure(
        self,
        block_worker: str,
        signature_scheme: str,
        chain_id: str | None = None,
        min_submit: int | None = None,
        min_confirmation: int | None = None,
        confirmation_chain_length: int | None = None,
    ) -> None:
        """Configure the chain from a block worker URL and optional settings."""
        _check_scheme(signature_scheme)
        self.chain.block_worker = block_worker
        self.chain.signature_scheme = signature_scheme
        if chain_id is not None:
            self.chain.chain_id = chain_id
        if min_submit is not None:
            self.chain.min_submit = min_submit
        if min_confirmation is not None:
            self.chain.min_confirmation = min_confirmation
        if confirmation_chain_length is not None:
            self.chain.confirmation_chain_length = confirmation_chain_length
        self.apply_defaults()
        self.is_configured = True

    def set_wallet(self, wallet_json: str, split_key_wallet: bool = False) -> None:
        """Set the wallet used for transactions; split keys apply to bls0chain only."""
        try:
            wallet = json.loads(wallet_json)
        except (TypeError, ValueError) as err:
            raise SdkError(f"invalid wallet: {err}") from err
        if not isinstance(wallet, dict):
            raise SdkError("invalid wallet: expected a JSON object")
        self.wallet = wallet
        if self.chain.signature_scheme == "bls0chain":
            self.is_split_wallet = split_key_wallet
        self.is_valid_wallet = True

    @property
    def client_id(self) -> str:
        return self.wallet.get("client_id") or ""

    @property
    def client_key(self) -> str:
        return self.wallet.get("client_key") or ""

    def set_auth_url(self, url: str) -> None:
        """Set the zauth URL; only valid for split-key wallets."""
        if not self.is_split_wallet:
            raise SdkError("wallet type is not split key")
        if not url:
            raise SdkError("invalid auth url")
        self.auth_url = url.rstrip("/")

    def check_sdk_init(self) -> None:
        if not self.is_configured or not self.chain.miners or not self.chain.sharders:
            raise SdkError("SDK not initialized")

    def check_wallet_config(self) -> None:
        if not self.is_valid_wallet or not self.client_id:
            raise SdkError("wallet info not found. set wallet info.")

    def check_config(self) -> None:
        self.check_sdk_init()
        self.check_wallet_config()

    def apply_defaults(self) -> None:
        """Replace non-positive thresholds with their defaults."""
        if self.chain.min_submit <= 0:
            self.chain.min_submit = DEFAULT_MIN_SUBMIT
        if self.chain.min_confirmation <= 0:
            self.chain.min_confirmation = DEFAULT_MIN_CONFIRMATION
        if self.chain.confirmation_chain_length <= 0:
            self.chain.confirmation_chain_length = DEFAULT_CONFIRMATION_CHAIN_LENGTH

    def min_miners_submit(self) -> int:
        return max(calculate_min_required(self.chain.min_submit, len(self.chain.miners) / 100), 1)

    def min_sharders_verify(self) -> int:
        return max(
            calculate_min_required(self.chain.min_confirmation, len(self.chain.sharders) / 100), 1
        )

    def min_required_chain_length(self) -> int:
        return self.chain.confirmation_chain_length


def calculate_min_required(min_required: float, percent: float) -> int:
    return math.ceil(min_required * percent)


def convert_to_token(value: int) -> float:
    """Convert a raw balance value to tokens."""
    return value / TOKEN_UNIT


def convert_to_value(token: float) -> int:
    """Convert tokens to a raw balance value, truncating toward zero."""
    return int(token * TOKEN_UNIT)


def with_params(uri: str, params: Mapping[str, str]) -> str:
    """Append params as a query string sorted by key; no params leaves uri unchanged."""
    if not params:
        return uri
    return uri + "?" + urllib.parse.urlencode(sorted(params.items()))