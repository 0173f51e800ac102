"""Block and magic block lookups by round, answered by the sharders."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, fields
from typing import Any, Iterable

import requests

from .config import GET_BLOCK_INFO, GET_MAGIC_BLOCK_INFO, SdkError
from .sharders import SharderResponse, query_sharders

logger = logging.getLogger(__name__)

_STR_FIELDS = {
    "version",
    "hash",
    "miner_id",
    "merkle_tree_root",
    "state_hash",
    "receipt_merkle_tree_root",
}
_INT_FIELDS = {"creation_date", "round", "round_random_seed", "num_txns"}


@dataclass
class BlockHeader:
    """The summary of a block as reported by a sharder."""

    version: str = ""
    creation_date: int = 0
    hash: str = ""
    miner_id: str = ""
    round: int = 0
    round_random_seed: int = 0
    merkle_tree_root: str = ""
    state_hash: str = ""
    receipt_merkle_tree_root: str = ""
    num_txns: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BlockHeader":
        """Build a header from a decoded JSON object; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise SdkError("invalid block header: expected a JSON object")
        values: dict[str, Any] = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is None:
                continue
            if f.name in _STR_FIELDS and not isinstance(value, str):
                raise SdkError(f"invalid block header: {f.name} must be a string")
            if f.name in _INT_FIELDS and (isinstance(value, bool) or not isinstance(value, int)):
                raise SdkError(f"invalid block header: {f.name} must be an integer")
            values[f.name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Encode the header, leaving out empty fields except the round random seed."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value or f.name == "round_random_seed":
                result[f.name] = value
        return result


def _most_agreed(candidates: Iterable[tuple[str, Any]]) -> Any | None:
    """Return the candidate whose hash was reported most often, or None."""
    counts: Counter[str] = Counter()
    best: Any | None = None
    best_count = 0
    for block_hash, value in candidates:
        counts[block_hash] += 1
        if counts[block_hash] > best_count:
            best_count = counts[block_hash]
            best = value
    return best


def _ok_objects(responses: Iterable[SharderResponse]) -> Iterable[tuple[SharderResponse, dict]]:
    for rsp in responses:
        logger.debug("%s %s", rsp.url, rsp.status_code)
        if not rsp.ok:
            logger.error("%s: %s", rsp.url, rsp.body)
            continue
        data = rsp.json_object()
        if data is None:
            logger.error("block parse error from %s", rsp.url)
            continue
        yield rsp, data


def get_block_by_round(
    sharders: Iterable[str],
    round_number: int,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """The full block of a round, with its header under the ``header`` key."""
    path = f"{GET_BLOCK_INFO}round={round_number}&content=full,header"
    responses = query_sharders(sharders, path, session)

    def candidates() -> Iterable[tuple[str, dict[str, Any]]]:
        for rsp, data in _ok_objects(responses):
            block = data.get("block")
            header = data.get("header")
            if not isinstance(block, dict):
                logger.debug("%s no block in response: %s", rsp.url, rsp.body)
                continue
            if not isinstance(header, dict):
                logger.debug("%s no block header in response: %s", rsp.url, rsp.body)
                continue
            block_hash = str(block.get("hash") or "")
            if str(header.get("hash") or "") != block_hash:
                logger.debug("%s header and block hash mismatch: %s", rsp.url, rsp.body)
                continue
            yield block_hash, {**block, "header": header}

    best = _most_agreed(candidates())
    if best is None:
        raise SdkError("round info not found")
    return best


def get_magic_block_by_number(
    sharders: Iterable[str],
    number: int,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """The magic block with the given number that most sharders agree on."""
    path = f"{GET_MAGIC_BLOCK_INFO}magic_block_number={number}"
    responses = query_sharders(sharders, path, session)

    def candidates() -> Iterable[tuple[str, dict[str, Any]]]:
        for rsp, data in _ok_objects(responses):
            magic_block = data.get("magic_block")
            if not isinstance(magic_block, dict):
                logger.error("magic block parse error from %s", rsp.url)
                continue
            yield str(magic_block.get("hash") or ""), magic_block

    best = _most_agreed(candidates())
    if best is None:
        raise SdkError("magic block info not found")
    return best


def get_block_info_by_round(
    sharders: Iterable[str],
    round_number: int,
    content: str = "header",
    session: requests.Session | None = None,
) -> BlockHeader:
    """The header of a round's block that most sharders agree on."""
    path = f"{GET_BLOCK_INFO}round={round_number}&content={content}"
    responses = query_sharders(sharders, path, session)

    def candidates() -> Iterable[tuple[str, BlockHeader]]:
        for rsp, data in _ok_objects(responses):
            header = data.get("header")
            if header is None:
                logger.debug("%s no round confirmation. Resp: %s", rsp.url, rsp.body)
                continue
            if not isinstance(header, dict) or "hash" not in header:
                continue
            try:
                parsed = BlockHeader.from_dict(header)
            except SdkError as err:
                logger.error("round info parse error. %s", err)
                continue
            yield str(header["hash"]), parsed

    best = _most_agreed(candidates())
    if best is None:
        raise SdkError("round info not found.")
    return best