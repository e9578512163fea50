"""
Explorer layer: chain data adapter, search resolver and dashboard poller.
"""

from zeno_explorer.explorer.adapter import (
    get_chain_summary,
    get_price_summary,
    get_recent_blocks,
    get_recent_transactions,
    get_validator_summary,
)
from zeno_explorer.explorer.poller import DashboardPoller, ViewSnapshot
from zeno_explorer.explorer.search import (
    AddressMatch,
    BlockMatch,
    SearchResult,
    TransactionMatch,
    search_blockchain,
)

__all__ = [
    "AddressMatch",
    "BlockMatch",
    "DashboardPoller",
    "SearchResult",
    "TransactionMatch",
    "ViewSnapshot",
    "get_chain_summary",
    "get_price_summary",
    "get_recent_blocks",
    "get_recent_transactions",
    "get_validator_summary",
    "search_blockchain",
]
