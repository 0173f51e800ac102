"""Queries sent to every sharder, with the answers combined by consensus."""

from __future__ import annotations

import json
import logging
import random
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable

import requests

from .config import (
    GET_CHAIN_STATS,
    GET_LATEST_FINALIZED,
    GET_LATEST_FINALIZED_MAGIC_BLOCK,
    SdkError,
)

REQUEST_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SharderResponse:
    """The answer of one sharder; ``status_code`` is 0 when no answer arrived."""

    url: str
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def json_object(self) -> dict[str, Any] | None:
        """The body parsed as a JSON object, or None if it is not one."""
        try:
            data = json.loads(self.body)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None


def _fetch(session: requests.Session, url: str) -> SharderResponse:
    logger.info("Query from %s", url)
    try:
        response = session.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as err:
        logger.error("%s get error. %s", url, err)
        return SharderResponse(url=url, status_code=0, body=str(err))
    return SharderResponse(url=url, status_code=response.status_code, body=response.text)


def query_sharders(
    sharders: Iterable[str],
    path: str,
    session: requests.Session | None = None,
) -> list[SharderResponse]:
    """Send ``path`` to every sharder in random order and collect all answers."""
    urls = [sharder + path for sharder in sharders]
    if not urls:
        return []
    random.shuffle(urls)
    session = session or requests.Session()
    with ThreadPoolExecutor(max_workers=len(urls)) as pool:
        return list(pool.map(lambda url: _fetch(session, url), urls))


def _by_consensus(candidates: Iterable[tuple[str, dict[str, Any]]]) -> dict[str, Any] | None:
    """Return the candidate whose hash was reported most often."""
    counts: Counter[str] = Counter()
    best: dict[str, Any] | None = None
    best_count = 0
    for block_hash, value in candidates:
        counts[block_hash] += 1
        if counts[block_hash] > best_count:
            best_count = counts[block_hash]
            best = value
    return best


def _ok_objects(responses: Iterable[SharderResponse]) -> Iterable[dict[str, Any]]:
    for rsp in responses:
        if not rsp.ok:
            logger.error("%s: %s", rsp.url, rsp.body)
            continue
        data = rsp.json_object()
        if data is None:
            logger.error("block parse error from %s", rsp.url)
            continue
        yield data


def get_latest_finalized(
    sharders: Iterable[str],
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """The latest finalized block header most sharders agree on."""
    responses = query_sharders(sharders, GET_LATEST_FINALIZED, session)
    best = _by_consensus(
        (str(block.get("hash") or ""), block) for block in _ok_objects(responses)
    )
    if best is None:
        raise SdkError("block info not found")
    return best


def get_latest_finalized_magic_block(
    sharders: Iterable[str],
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """The latest finalized magic block most sharders agree on."""
    responses = query_sharders(sharders, GET_LATEST_FINALIZED_MAGIC_BLOCK, session)

    def candidates() -> Iterable[tuple[str, dict[str, Any]]]:
        for data in _ok_objects(responses):
            magic_block = data.get("magic_block")
            if not isinstance(magic_block, dict):
                logger.error("magic block parse error: missing magic_block")
                continue
            yield str(magic_block.get("hash") or ""), magic_block

    best = _by_consensus(candidates())
    if best is None:
        raise SdkError("magic block info not found")
    return best


def get_chain_stats(
    sharders: Iterable[str],
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """Chain statistics from a sharder that answered successfully."""
    responses = query_sharders(sharders, GET_CHAIN_STATS, session)
    chosen: SharderResponse | None = None
    for rsp in responses:
        if rsp.ok:
            chosen = rsp
    if chosen is None:
        raise SdkError("http_request_failed: Request failed with status not 200")
    try:
        data = json.loads(chosen.body)
    except ValueError as err:
        raise SdkError(f"invalid chain stats: {err}") from err
    if not isinstance(data, dict):
        raise SdkError("invalid chain stats: expected a JSON object")
    return data