"""
Search resolver: classify a free-text query and return the first typed match.

Probes, in order (first hit wins, a miss falls through to the next):
  1. transaction  - trimmed length >= 80 (signature-shaped), getTransaction
  2. block        - non-negative integer, getBlock at that height
  3. address      - trimmed length 32..44 (address-shaped), getBalance;
                    any balance, zero included, is a hit
Nothing matching returns None. Empty input returns None without any RPC call.
Transport failures read the same as misses: search never raises.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from zeno_explorer.explorer.models import AddressSummary, BlockSummary, TransactionSummary
from zeno_explorer.explorer.parsing import (
    lamports_to_tokens,
    parse_block,
    parse_transaction,
    rpc_value,
)
from zeno_explorer.rpc import methods as m
from zeno_explorer.rpc.relay import RpcRelay
from zeno_explorer.zeno_logging import get_logger

logger = get_logger(__name__)

MIN_SIGNATURE_LEN = 80
MIN_ADDRESS_LEN = 32
MAX_ADDRESS_LEN = 44


@dataclass(frozen=True)
class TransactionMatch:
    payload: TransactionSummary
    kind: Literal["transaction"] = "transaction"


@dataclass(frozen=True)
class BlockMatch:
    payload: BlockSummary
    kind: Literal["block"] = "block"


@dataclass(frozen=True)
class AddressMatch:
    payload: AddressSummary
    kind: Literal["address"] = "address"


SearchResult = TransactionMatch | BlockMatch | AddressMatch


def looks_like_signature(query: str) -> bool:
    return len(query) >= MIN_SIGNATURE_LEN


def looks_like_height(query: str) -> bool:
    return query.isascii() and query.isdigit()


def looks_like_address(query: str) -> bool:
    return MIN_ADDRESS_LEN <= len(query) <= MAX_ADDRESS_LEN


async def _probe_transaction(relay: RpcRelay, signature: str) -> TransactionMatch | None:
    result = await relay.call_or_none(m.GET_TRANSACTION, m.transaction_params(signature))
    tx = parse_transaction(result)
    if tx is None:
        return None
    return TransactionMatch(payload=tx)


async def _probe_block(relay: RpcRelay, height: int) -> BlockMatch | None:
    result = await relay.call_or_none(m.GET_BLOCK, m.block_params(height, m.DETAIL_SIGNATURES))
    block = parse_block(height, result)
    if block is None:
        return None
    return BlockMatch(payload=block)


async def _probe_address(relay: RpcRelay, address: str) -> AddressMatch | None:
    result = await relay.call_or_none(m.GET_BALANCE, m.balance_params(address))
    lamports = rpc_value(result)
    if isinstance(lamports, bool) or not isinstance(lamports, (int, float)):
        return None
    if isinstance(lamports, float) and not math.isfinite(lamports):
        return None
    return AddressMatch(
        payload=AddressSummary(address=address, balance=lamports_to_tokens(lamports))
    )


async def search_blockchain(relay: RpcRelay, query: str) -> SearchResult | None:
    """Resolve query to a transaction, block or address match, or None."""
    query = (query or "").strip()
    if not query:
        return None

    probes = []
    if looks_like_signature(query):
        probes.append(("transaction", lambda: _probe_transaction(relay, query)))
    if looks_like_height(query):
        probes.append(("block", lambda: _probe_block(relay, int(query))))
    if looks_like_address(query):
        probes.append(("address", lambda: _probe_address(relay, query)))

    for kind, probe in probes:
        try:
            match = await probe()
        except Exception as e:
            logger.warning("search_probe_failed", kind=kind, query=query[:16], error=str(e))
            continue
        if match is not None:
            logger.info("search_hit", kind=kind, query=query[:16])
            return match
        logger.debug("search_probe_miss", kind=kind, query=query[:16])

    logger.info("search_not_found", query=query[:16], probes=len(probes))
    return None
