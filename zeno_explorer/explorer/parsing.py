"""
Parsing helpers for upstream node results.

Results are plain decoded JSON; every helper tolerates missing keys and wrong
types and falls back to zero/None rather than raising.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from zeno_explorer.explorer.models import BlockSummary, TransactionSummary
from zeno_explorer.rpc import methods as m


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


def rpc_value(result: Any) -> Any:
    """Unwrap {"context": ..., "value": ...} responses; pass other shapes through."""
    if isinstance(result, dict) and "value" in result:
        return result["value"]
    return result


def lamports_to_tokens(lamports: Any) -> Decimal:
    """
    Scale a smallest-unit amount to display units (1 token = 1e9 lamports).
    Floats go through str() so 2.5e9 stays exact; non-numbers read as 0.
    """
    if isinstance(lamports, float) and math.isfinite(lamports):
        amount = Decimal(str(lamports))
    else:
        amount = Decimal(as_int(lamports))
    return amount / Decimal(m.LAMPORTS_PER_TOKEN)


def format_magnitude(lamports: Any) -> str:
    """Lamports -> token amount in billions, e.g. 21e18 lamports -> '21.00B'."""
    billions = lamports_to_tokens(lamports) / Decimal(1_000_000_000)
    return f"{billions:.2f}B"


def parse_transaction(
    entry: Any,
    *,
    slot: int | None = None,
    block_time: int | None = None,
) -> TransactionSummary | None:
    """
    Build a TransactionSummary from a getTransaction result or one entry of a
    full-detail getBlock. Slot and blockTime from the entry win over the
    block-level values. Returns None when the signature is missing.
    """
    if not isinstance(entry, dict):
        return None
    tx = entry.get("transaction")
    meta = entry.get("meta")
    if not isinstance(tx, dict):
        return None
    signatures = tx.get("signatures") or []
    if not signatures or not isinstance(signatures[0], str):
        return None
    message = tx.get("message") if isinstance(tx.get("message"), dict) else {}
    instructions = message.get("instructions") or []
    meta = meta if isinstance(meta, dict) else {}
    entry_time = entry.get("blockTime")
    return TransactionSummary(
        signature=signatures[0],
        slot=as_int(entry.get("slot"), slot if slot is not None else 0),
        timestamp=entry_time if isinstance(entry_time, int) else block_time,
        success=meta.get("err") is None,
        fee=as_int(meta.get("fee")),
        instruction_count=len(instructions) if isinstance(instructions, list) else 0,
    )


def parse_block(slot: int, block: Any) -> BlockSummary | None:
    """BlockSummary from a getBlock result (signatures or full detail)."""
    if not isinstance(block, dict):
        return None
    if block.get("signatures") is not None:
        tx_count = len(block.get("signatures") or [])
    else:
        tx_count = len(block.get("transactions") or [])
    block_time = block.get("blockTime")
    return BlockSummary(
        slot=slot,
        hash=str(block.get("blockhash") or ""),
        timestamp=block_time if isinstance(block_time, int) else None,
        transaction_count=tx_count,
        parent_slot=as_int(block.get("parentSlot")),
    )

