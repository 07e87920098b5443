"""
Infrastructure layer: collaborator interfaces, RPC access and log correlation
"""

from .interfaces import AccountFetcher, TransactionSubmitter
from .rpc import RpcClient, RpcClientConfig
from .correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    log_with_correlation,
)

__all__ = [
    "AccountFetcher",
    "TransactionSubmitter",
    "RpcClient",
    "RpcClientConfig",
    "CorrelationContext",
    "generate_correlation_id",
    "get_correlation_id",
    "log_with_correlation",
]
