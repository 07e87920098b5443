"""
Exception definitions for the CUSD factory client
"""

from enum import Enum
from typing import Any, List, Optional


class ErrorCode(Enum):
    """
    Unified error codes for factory operations

    1xxx - RPC errors
    2xxx - Transaction errors
    3xxx - Address derivation errors
    4xxx - Encoding errors
    5xxx - Argument errors
    6xxx - Account state errors
    9xxx - Configuration errors
    """
    # RPC errors (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"

    # Transaction errors
    TX_REJECTED = "2001"

    # Derivation errors
    DERIVATION_ON_CURVE = "3001"
    DERIVATION_NO_VALID_ADDRESS = "3002"

    # Encoding errors
    ENCODING_INVALID_VALUE = "4001"
    ENCODING_INVALID_SEED = "4002"
    ENCODING_DECODE_FAILED = "4003"
    ENCODING_UNKNOWN_KIND = "4004"

    # Argument errors
    ARGUMENT_INVALID = "5001"
    ARGUMENT_TOO_MANY_TOKENS = "5002"

    # Account state errors
    STATE_NOT_FOUND = "6001"
    STATE_FETCH_FAILED = "6002"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class CusdFactoryError(Exception):
    """
    Base exception for all factory client errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class RpcError(CusdFactoryError):
    """
    RPC-related errors - typically recoverable

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - Invalid response received
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )

    @classmethod
    def invalid_response(cls, endpoint: str, reason: str) -> "RpcError":
        return cls(
            f"Invalid RPC response: {reason}",
            ErrorCode.RPC_INVALID_RESPONSE,
            endpoint=endpoint,
        )


class DerivationFailure(CusdFactoryError):
    """
    Program address derivation failed

    Raised when:
    - The hashed seeds land on the ed25519 curve
    - No bump seed in 255..0 yields an off-curve address
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DERIVATION_NO_VALID_ADDRESS,
        program_id: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"program_id": program_id},
        )
        self.program_id = program_id

    @classmethod
    def on_curve(cls, program_id: str) -> "DerivationFailure":
        return cls(
            "Derived address lies on the ed25519 curve",
            ErrorCode.DERIVATION_ON_CURVE,
            program_id=program_id,
        )

    @classmethod
    def no_valid_address(cls, program_id: str) -> "DerivationFailure":
        return cls(
            f"Unable to find a viable program address bump seed for {program_id}",
            ErrorCode.DERIVATION_NO_VALID_ADDRESS,
            program_id=program_id,
        )


class EncodingFailure(CusdFactoryError):
    """
    Binary encoding or decoding failed

    Raised when:
    - A field value does not fit its wire type
    - A seed is too long or has the wrong length
    - Instruction or account data is malformed
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENCODING_INVALID_VALUE,
        field: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"field": field} if field else None,
        )
        self.field = field

    @classmethod
    def invalid_value(cls, field: str, type_name: str, value: Any) -> "EncodingFailure":
        return cls(
            f"Value {value!r} is not a valid {type_name} for field '{field}'",
            ErrorCode.ENCODING_INVALID_VALUE,
            field=field,
        )

    @classmethod
    def invalid_seed(cls, reason: str) -> "EncodingFailure":
        return cls(f"Invalid derivation seed: {reason}", ErrorCode.ENCODING_INVALID_SEED)

    @classmethod
    def decode_failed(cls, kind: str, reason: str, error: Exception = None) -> "EncodingFailure":
        return cls(
            f"Failed to decode {kind}: {reason}",
            ErrorCode.ENCODING_DECODE_FAILED,
            original_error=error,
        )

    @classmethod
    def unknown_kind(cls, kind: str) -> "EncodingFailure":
        return cls(f"Unknown layout: {kind}", ErrorCode.ENCODING_UNKNOWN_KIND)


class InvalidArgument(CusdFactoryError):
    """
    Caller supplied arguments that cannot form a valid instruction

    Raised when:
    - More currencies are given than a Minter can hold
    - A required name or path is empty
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ARGUMENT_INVALID,
        argument: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"argument": argument},
        )
        self.argument = argument

    @classmethod
    def too_many_tokens(cls, count: int, limit: int) -> "InvalidArgument":
        return cls(
            f"Too many input tokens: got {count}, limit is {limit}",
            ErrorCode.ARGUMENT_TOO_MANY_TOKENS,
            argument="input_tokens",
        )

    @classmethod
    def empty(cls, argument: str) -> "InvalidArgument":
        return cls(f"Argument '{argument}' must not be empty", argument=argument)


class StateFetchFailure(CusdFactoryError):
    """
    Reading program account state failed

    Raised when:
    - The account does not exist
    - The account read failed in transport
    """

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        code: ErrorCode = ErrorCode.STATE_FETCH_FAILED,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"address": address},
        )
        self.address = address

    @classmethod
    def not_found(cls, kind: str, address: str) -> "StateFetchFailure":
        return cls(
            f"{kind} account not found: {address}",
            address=address,
            code=ErrorCode.STATE_NOT_FOUND,
        )

    @classmethod
    def read_failed(cls, kind: str, address: str, error: Exception) -> "StateFetchFailure":
        return cls(
            f"Failed to read {kind} account {address}: {error}",
            address=address,
            code=ErrorCode.STATE_FETCH_FAILED,
            recoverable=getattr(error, "recoverable", False),
            original_error=error,
        )


class RemoteRejection(CusdFactoryError):
    """
    The program or cluster rejected a submitted batch

    The rejection reason is carried verbatim and is never interpreted here.
    """

    def __init__(
        self,
        message: str,
        signature: Optional[str] = None,
        logs: Optional[List[str]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            ErrorCode.TX_REJECTED,
            recoverable=False,
            original_error=original_error,
            details={"signature": signature, "logs": logs},
        )
        self.signature = signature
        self.logs = logs or []


class ConfigurationError(CusdFactoryError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
