"""
Sui RPC transport package.

Talks JSON-RPC to a Sui fullnode and wraps the raw transaction block and
object responses in immutable models for the interpreter.
"""

from sui_explainer.sui_rpc.client import SuiRpcClient
from sui_explainer.sui_rpc.models import EnrichedObject, RawTransaction

__all__ = [
    "EnrichedObject",
    "RawTransaction",
    "SuiRpcClient",
]
