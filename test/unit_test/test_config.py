"""
Test Configuration

Environment overrides, cluster selection and logging setup.
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cusd_factory.config import (
    LoggingConfig,
    ProgramConfig,
    RpcConfig,
    reload_config,
    setup_logging,
)
from cusd_factory.program.constants import (
    CLUSTER_DEVNET,
    CLUSTER_MAINNET,
    CUSD_FACTORY_PROGRAM_IDS,
    CHAINLINK_PROGRAM_IDS,
    CUSD_TOKEN_MINTS,
    MAX_INPUT_TOKENS,
)


def test_rpc_config_from_env(monkeypatch):
    print("Testing RpcConfig env overrides...")

    monkeypatch.setenv("SOLANA_RPC_URL", "http://localhost:8899")
    monkeypatch.setenv("RPC_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("RPC_MAX_RETRIES", "7")
    monkeypatch.setenv("RPC_COMMITMENT", "finalized")

    rpc = RpcConfig()
    assert rpc.url == "http://localhost:8899"
    assert rpc.timeout_seconds == 12.5
    assert rpc.max_retries == 7
    assert rpc.commitment == "finalized"

    print("  RpcConfig env overrides: PASSED")


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("RPC_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("CUSD_MAX_INPUT_TOKENS", "many")
    assert RpcConfig().timeout_seconds == 30.0
    assert ProgramConfig().max_input_tokens == MAX_INPUT_TOKENS


def test_program_config_cluster_defaults(monkeypatch):
    for key in ("CUSD_FACTORY_PROGRAM_ID", "CUSD_TOKEN_MINT", "CHAINLINK_PROGRAM_ID"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CUSD_CLUSTER", CLUSTER_DEVNET)

    program = ProgramConfig()
    assert program.cluster == CLUSTER_DEVNET
    assert program.program_id == CUSD_FACTORY_PROGRAM_IDS[CLUSTER_DEVNET]
    assert program.cusd_mint == CUSD_TOKEN_MINTS[CLUSTER_DEVNET]
    assert program.chainlink_program_id == CHAINLINK_PROGRAM_IDS[CLUSTER_DEVNET]


def test_program_config_overrides(monkeypatch):
    override = "11111111111111111111111111111111"
    monkeypatch.setenv("CUSD_CLUSTER", CLUSTER_DEVNET)
    monkeypatch.setenv("CUSD_FACTORY_PROGRAM_ID", override)
    monkeypatch.setenv("CUSD_MAX_INPUT_TOKENS", "4")
    monkeypatch.delenv("CUSD_TOKEN_MINT", raising=False)

    program = ProgramConfig()
    assert program.program_id == override
    assert program.cusd_mint == CUSD_TOKEN_MINTS[CLUSTER_DEVNET]
    assert program.max_input_tokens == 4


def test_unknown_cluster_falls_back_to_mainnet(monkeypatch):
    monkeypatch.setenv("CUSD_CLUSTER", "testnet-42")
    assert ProgramConfig().cluster == CLUSTER_MAINNET


def test_reload_config(monkeypatch):
    import cusd_factory.config as config_module

    monkeypatch.setenv("SOLANA_RPC_URL", "http://reloaded:8899")
    previous = config_module.config
    try:
        reloaded = reload_config()
        assert reloaded.rpc.url == "http://reloaded:8899"
        assert config_module.get_config() is reloaded
    finally:
        config_module.config = previous


def test_log_level():
    assert LoggingConfig(log_level="debug").level == logging.DEBUG
    assert LoggingConfig(log_level="nonsense").level == logging.INFO


def test_setup_logging_writes_file(tmp_path):
    print("Testing setup_logging...")

    log_file = tmp_path / "nested" / "factory.log"
    log_config = LoggingConfig(
        log_file=str(log_file),
        log_level="DEBUG",
        console_output=False,
    )
    logger = setup_logging(log_config, logger_name="cusd_factory_test")
    try:
        logging.getLogger("cusd_factory_test.modules").debug("child message")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Logging initialized" in content
        assert "child message" in content
        assert logging.getLogger("cusd_factory_test.program").level == logging.DEBUG
    finally:
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    print("  setup_logging: PASSED")


def test_setup_logging_replaces_handlers():
    log_config = LoggingConfig(log_file="", console_output=True)
    logger = setup_logging(log_config, logger_name="cusd_factory_test_console")
    setup_logging(log_config, logger_name="cusd_factory_test_console")
    try:
        assert len(logger.handlers) == 1
    finally:
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)


def test_package_config_attribute_is_module():
    import types

    import cusd_factory

    assert isinstance(cusd_factory.config, types.ModuleType)
    assert cusd_factory.get_config() is cusd_factory.config.get_config()
