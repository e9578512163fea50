"""
Zeno explorer backend: JSON-RPC relay, chain data adapter, search and API.
"""

__version__ = "0.1.0"
