"""
Upstream node access: JSON-RPC 2.0 relay, request/response models, method names.
"""

from zeno_explorer.rpc.models import RpcRequest, RpcResponse
from zeno_explorer.rpc.relay import RpcRelay

__all__ = ["RpcRelay", "RpcRequest", "RpcResponse"]
