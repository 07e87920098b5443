"""
Test Errors Module

Tests for cusd_factory.errors package.
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_error_code():
    """Test ErrorCode enum"""
    from cusd_factory.errors import ErrorCode

    print("Testing ErrorCode...")

    assert ErrorCode.RPC_CONNECTION_FAILED.value == "1001"
    assert ErrorCode.TX_REJECTED.value == "2001"
    assert ErrorCode.DERIVATION_NO_VALID_ADDRESS.value == "3002"
    assert ErrorCode.ENCODING_INVALID_VALUE.value == "4001"
    assert ErrorCode.ARGUMENT_TOO_MANY_TOKENS.value == "5002"
    assert ErrorCode.STATE_NOT_FOUND.value == "6001"

    print("  ErrorCode: PASSED")


def test_base_error():
    """Test CusdFactoryError base class"""
    from cusd_factory.errors import CusdFactoryError, ErrorCode

    print("Testing CusdFactoryError...")

    error = CusdFactoryError(
        message="Test error",
        code=ErrorCode.RPC_CONNECTION_FAILED,
        recoverable=True,
    )

    assert "[1001] Test error" == str(error)
    assert repr(error) == "CusdFactoryError(code=1001, message='Test error')"
    assert error.should_retry
    assert error.details == {}

    print("  CusdFactoryError: PASSED")


def test_rpc_error():
    """Test RpcError factories"""
    from cusd_factory.errors import RpcError, ErrorCode

    print("Testing RpcError...")

    cause = OSError("refused")
    error = RpcError.connection_failed("https://rpc.example.com", cause)
    assert error.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error.recoverable
    assert error.original_error is cause
    assert error.details["endpoint"] == "https://rpc.example.com"

    error = RpcError.timeout("https://rpc.example.com", 30.0)
    assert error.code == ErrorCode.RPC_TIMEOUT
    assert "30.0s" in str(error)

    assert RpcError.rate_limited("x").code == ErrorCode.RPC_RATE_LIMITED
    assert RpcError.invalid_response("x", "bad").code == ErrorCode.RPC_INVALID_RESPONSE

    print("  RpcError: PASSED")


def test_domain_errors_not_recoverable():
    """Derivation, encoding, argument and rejection errors never retry"""
    from cusd_factory.errors import (
        DerivationFailure,
        EncodingFailure,
        InvalidArgument,
        RemoteRejection,
        ErrorCode,
    )

    print("Testing domain errors...")

    errors = [
        DerivationFailure.no_valid_address("Prog111"),
        DerivationFailure.on_curve("Prog111"),
        EncodingFailure.invalid_value("fee_percent", "u16", 70000),
        EncodingFailure.invalid_seed("too long"),
        EncodingFailure.decode_failed("Minter", "short"),
        InvalidArgument.too_many_tokens(9, 8),
        InvalidArgument.empty("name"),
        RemoteRejection("custom program error: 0x1772", signature="sig", logs=["log"]),
    ]
    for error in errors:
        assert not error.should_retry, repr(error)

    assert errors[2].field == "fee_percent"
    assert "70000" in str(errors[2])
    assert errors[5].code == ErrorCode.ARGUMENT_TOO_MANY_TOKENS
    assert errors[7].code == ErrorCode.TX_REJECTED
    assert errors[7].logs == ["log"]
    assert str(errors[7]) == "[2001] custom program error: 0x1772"

    print("  Domain errors: PASSED")


def test_state_fetch_failure():
    """Test StateFetchFailure factories"""
    from cusd_factory.errors import StateFetchFailure, RpcError, ErrorCode

    print("Testing StateFetchFailure...")

    error = StateFetchFailure.not_found("Minter", "Addr111")
    assert error.code == ErrorCode.STATE_NOT_FOUND
    assert not error.recoverable
    assert error.address == "Addr111"

    cause = RpcError.timeout("x", 1.0)
    error = StateFetchFailure.read_failed("Minter", "Addr111", cause)
    assert error.code == ErrorCode.STATE_FETCH_FAILED
    assert error.recoverable
    assert error.original_error is cause

    print("  StateFetchFailure: PASSED")


def test_configuration_error():
    """Test ConfigurationError factories"""
    from cusd_factory.errors import ConfigurationError, ErrorCode

    print("Testing ConfigurationError...")

    assert ConfigurationError.missing("SOLANA_RPC_URL").code == ErrorCode.CONFIG_MISSING
    error = ConfigurationError.invalid("max_retries", "must be at least 1")
    assert error.code == ErrorCode.CONFIG_INVALID
    assert "max_retries" in str(error)

    print("  ConfigurationError: PASSED")


def test_error_hierarchy():
    """All errors derive from CusdFactoryError"""
    from cusd_factory import errors

    print("Testing error hierarchy...")

    for name in errors.__all__:
        obj = getattr(errors, name)
        if name in ("ErrorCode", "CusdFactoryError"):
            continue
        assert issubclass(obj, errors.CusdFactoryError), name

    print("  Error hierarchy: PASSED")
