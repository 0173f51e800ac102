# zcnsdk

A client library for a sharded blockchain network. It keeps the chain and
wallet configuration, finds the current miners and sharders through a block
worker, asks every sharder for blocks and chain statistics and keeps the
answer most of them agree on, and offers helpers for remote storage paths and
for symmetric encryption.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Configuration (`zcnsdk.config`)

Everything starts from an `SdkConfig`. Give it the chain settings as JSON with
`load_chain_json`, or call `configure` with a block worker URL, a signature
scheme and optional settings. The scheme must be `ed25519` or `bls0chain`;
anything else raises `SdkError`.

```python
from zcnsdk.config import SdkConfig, SdkError

config = SdkConfig()
config.load_chain_json(
    '{"block_worker": "http://localhost:9091/dns", '
    '"signature_scheme": "ed25519", "miners": [], "sharders": []}'
)
config.set_wallet(wallet_json, split_key_wallet=False)

try:
    config.check_config()
except SdkError as err:
    print(err)  # "SDK not initialized" until miners and sharders are known
```

- Zero or missing values for `min_submit`, `min_confirmation` and
  `confirmation_chain_length` are replaced by their defaults (50, 50 and 3)
  through `apply_defaults()`.
- `min_miners_submit()` and `min_sharders_verify()` turn those percentages
  into node counts (at least 1); `min_required_chain_length()` returns the
  confirmation chain length.
- The wallet is kept as the decoded JSON object; `config.client_id` and
  `config.client_key` read its `client_id` and `client_key` entries.
- `set_auth_url` is accepted only for split-key wallets (which apply to
  `bls0chain` only) and strips trailing slashes.
- `check_sdk_init`, `check_wallet_config` and `check_config` raise `SdkError`
  when the chain or the wallet is not ready.

The module also holds the endpoint paths and smart contract addresses, the
`Status` and `Op` enumerations, and small helpers:

- `convert_to_token(value)` and `convert_to_value(token)` move between the
  chain's smallest unit and whole tokens (1 token is 10^10 units).
- `calculate_min_required(min_required, percent)` rounds up their product.
- `with_params(uri, params)` appends the parameters as a query string sorted
  by key, and leaves the URI unchanged when there are none.

## Network (`zcnsdk.network`)

`update_network_details(config)` reads the current miners and sharders from
the block worker's `/network` endpoint and updates the configuration when
they differ; it returns whether anything changed. `get_network_details`,
`update_required`, `get_network` and `set_network` give access to the parts,
and `Network.to_json()` encodes a node list.

`NetworkUpdater` runs one such refresh in a background thread after
`interval` seconds (an hour by default), unless it is stopped first. It can
also be used as a context manager:

```python
from zcnsdk.network import NetworkUpdater

with NetworkUpdater(config, interval=3600):
    ...
```

## Sharder queries (`zcnsdk.sharders`, `zcnsdk.blocks`)

`query_sharders(sharders, path)` sends a path to every sharder in random
order, in parallel, and returns a `SharderResponse` (URL, status code, body)
for each; a sharder that could not be reached has status code 0.

Built on it:

- `get_latest_finalized(sharders)` – the latest finalized block header.
- `get_latest_finalized_magic_block(sharders)` – the latest finalized magic
  block.
- `get_chain_stats(sharders)` – chain statistics from a sharder that answered
  with status 200.
- `get_block_by_round(sharders, round_number)` – the full block of a round,
  with its header under the `header` key; answers whose block and header
  hashes differ are dropped.
- `get_magic_block_by_number(sharders, number)` – a magic block by number.
- `get_block_info_by_round(sharders, round_number, content="header")` – a
  round's block header as a `BlockHeader`.

Where several sharders answer, the value whose hash was reported most often
wins. When no usable answer arrives, `SdkError` is raised. Every function
takes an optional `requests.Session`.

```python
from zcnsdk.blocks import get_block_info_by_round
from zcnsdk.sharders import get_latest_finalized

latest = get_latest_finalized(config.chain.sharders)
header = get_block_info_by_round(config.chain.sharders, latest["round"])
print(header.hash, header.miner_id)
```

## Storage helpers

`zcnsdk.remotepath` works on remote paths, which always use `/`:

- `remote_clean(path)` lexically cleans a path (`\` also separates elements).
- `join(a, b)` joins and cleans two parts.
- `get_full_remote_path(local_path, remote_path)` appends the local file name
  when the remote path is empty or ends with `/`.
- `is_remote_abs(path)` and `new_connection_id()` (a random decimal string).

`zcnsdk.cipher` encrypts with AES-CFB: the plaintext is base64-encoded and
the result starts with a random 16-byte IV. Keys must be 16, 24 or 32 bytes.

```python
import os
from zcnsdk.cipher import decrypt, encrypt

key = os.urandom(32)
assert decrypt(key, encrypt(key, b"hello")) == b"hello"
```

`encrypt_hex` and `decrypt_hex` do the same with string keys and hex-encoded
ciphertext.

## What this package does not do

The package reads chain state but does not change it. It does not create,
recover, split or register wallets, does not build, sign, submit or verify
transactions, and has no smart contract calls (locking tokens, vesting pools,
allocations, stake or read/write pools). It does not query balances or smart
contract information through the sharders beyond the block and chain queries
above, and it has no token price lookup. It provides no command-line program.