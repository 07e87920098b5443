"""
CUSD factory client

Client-side protocol layer for the CUSD mint/burn program on Solana:
program address derivation, instruction encoding, account list assembly
and transaction orchestration.

Usage:
    from cusd_factory import FactoryModule, RpcClient, Pubkey

    async with RpcClient() as rpc:
        factory = FactoryModule(rpc, submitter)
        minter = factory.find_minter_address("USDC-Minter")
        state = await factory.get_minter(minter)
"""

__version__ = "0.1.0"

from .config import get_config, reload_config, setup_logging, enable_file_logging
from .errors import (
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
from .types import (
    Pubkey,
    ProgramAddress,
    AccountMeta,
    Instruction,
    InstructionDescriptor,
    InputTokenParams,
    OutputTokenParams,
    InputTokenPair,
    OutputTokenPair,
)
from .program import Codec, InstructionBuilder, AccountListAssembler
from .infra import AccountFetcher, TransactionSubmitter, RpcClient, RpcClientConfig
from .modules import FactoryModule

__all__ = [
    "get_config",
    "reload_config",
    "setup_logging",
    "enable_file_logging",
    "ErrorCode",
    "CusdFactoryError",
    "RpcError",
    "DerivationFailure",
    "EncodingFailure",
    "InvalidArgument",
    "StateFetchFailure",
    "RemoteRejection",
    "ConfigurationError",
    "Pubkey",
    "ProgramAddress",
    "AccountMeta",
    "Instruction",
    "InstructionDescriptor",
    "InputTokenParams",
    "OutputTokenParams",
    "InputTokenPair",
    "OutputTokenPair",
    "Codec",
    "InstructionBuilder",
    "AccountListAssembler",
    "AccountFetcher",
    "TransactionSubmitter",
    "RpcClient",
    "RpcClientConfig",
    "FactoryModule",
]
