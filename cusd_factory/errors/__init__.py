"""
Error definitions for the CUSD factory client
"""

from .exceptions import (
    ErrorCode,
    CusdFactoryError,
    RpcError,
    DerivationFailure,
    EncodingFailure,
    InvalidArgument,
    StateFetchFailure,
    RemoteRejection,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "CusdFactoryError",
    "RpcError",
    "DerivationFailure",
    "EncodingFailure",
    "InvalidArgument",
    "StateFetchFailure",
    "RemoteRejection",
    "ConfigurationError",
]
