"""
Upstream node RPC method names and parameter builders.

Method names are sent verbatim; changing them breaks compatibility with the node.
"""

from __future__ import annotations

from typing import Any

GET_HEALTH = "getHealth"
GET_BLOCK_HEIGHT = "getBlockHeight"
GET_SLOT = "getSlot"
GET_EPOCH_INFO = "getEpochInfo"
GET_SUPPLY = "getSupply"
GET_BLOCK = "getBlock"
GET_TRANSACTION = "getTransaction"
GET_BALANCE = "getBalance"
GET_VOTE_ACCOUNTS = "getVoteAccounts"
GET_RECENT_PERFORMANCE_SAMPLES = "getRecentPerformanceSamples"
GET_FEE_RATE_GOVERNOR = "getFeeRateGovernor"

# getBlock transactionDetails levels
DETAIL_FULL = "full"
DETAIL_SIGNATURES = "signatures"

HEALTH_OK = "ok"
# 1 token = 1e9 smallest units (lamports)
LAMPORTS_PER_TOKEN = 1_000_000_000
DEFAULT_PERFORMANCE_SAMPLES = 20


def block_params(slot: int, detail: str = DETAIL_FULL) -> list[Any]:
    return [
        slot,
        {
            "encoding": "json",
            "maxSupportedTransactionVersion": 0,
            "transactionDetails": detail,
            "rewards": False,
        },
    ]


def transaction_params(signature: str) -> list[Any]:
    return [signature, {"encoding": "json", "maxSupportedTransactionVersion": 0}]


def balance_params(address: str) -> list[Any]:
    return [address]


def performance_samples_params(limit: int = DEFAULT_PERFORMANCE_SAMPLES) -> list[Any]:
    return [limit]
