"""Discovery of the chain's miners and sharders through the block worker."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import SdkConfig, SdkError

NETWORK_ENDPOINT = "/network"
DEFAULT_UPDATE_INTERVAL = 3600.0
REQUEST_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


@dataclass
class Network:
    """The miners and sharders currently serving the chain."""

    miners: list[str] = field(default_factory=list)
    sharders: list[str] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps({"miners": self.miners, "sharders": self.sharders}, separators=(",", ":"))


def _string_list(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SdkError(f"Error unmarshaling response : {name} must be a list of strings")
    return list(value)


def get_network_details(block_worker: str, session: requests.Session | None = None) -> Network:
    """Ask the block worker for the current miners and sharders."""
    session = session or requests.Session()
    try:
        response = session.get(block_worker + NETWORK_ENDPOINT, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as err:
        raise SdkError(
            f"get_network_details_error: Unable to get http request with error {err}"
        ) from err
    try:
        data = json.loads(response.text)
    except ValueError as err:
        raise SdkError(f"Error unmarshaling response : {err}") from err
    if not isinstance(data, dict):
        raise SdkError("Error unmarshaling response : expected a JSON object")
    return Network(
        miners=_string_list(data.get("miners"), "miners"),
        sharders=_string_list(data.get("sharders"), "sharders"),
    )


def update_required(config: SdkConfig, network: Network) -> bool:
    """Whether the configured nodes are missing or differ from ``network``."""
    miners = config.chain.miners
    sharders = config.chain.sharders
    if not miners or not sharders:
        return True
    return not (miners == network.miners and sharders == network.sharders)


def update_network_details(config: SdkConfig, session: requests.Session | None = None) -> bool:
    """Refresh the configured nodes from the block worker; return whether they changed."""
    try:
        network = get_network_details(config.chain.block_worker, session)
    except SdkError as err:
        logger.error("Failed to update network details: %s", err)
        raise
    if not update_required(config, network):
        return False
    config.is_configured = False
    config.chain.miners = list(network.miners)
    config.chain.sharders = list(network.sharders)
    config.is_configured = True
    return True


def get_network(config: SdkConfig) -> Network:
    return Network(miners=list(config.chain.miners), sharders=list(config.chain.sharders))


def set_network(config: SdkConfig, miners: list[str], sharders: list[str]) -> None:
    config.chain.miners = list(miners)
    config.chain.sharders = list(sharders)


class NetworkUpdater:
    """Background worker that refreshes network details once after ``interval`` seconds."""

    def __init__(
        self,
        config: SdkConfig,
        interval: float = DEFAULT_UPDATE_INTERVAL,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.interval = interval
        self.session = session
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            raise SdkError("network updater already running")
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="network-updater", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> "NetworkUpdater":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _run(self) -> None:
        if self._stopped.wait(self.interval):
            logger.info("Network stopped by user")
            return
        try:
            update_network_details(self.config, self.session)
        except SdkError as err:
            logger.error("Update network detail worker fail: %s", err)
            return
        logger.info("Successfully updated network details")