"""
Type definitions for the CUSD factory client
"""

from .common import (
    PUBKEY_LENGTH,
    Pubkey,
    ProgramAddress,
    AccountMeta,
    Instruction,
    InstructionDescriptor,
)
from .tokens import (
    InputTokenParams,
    OutputTokenParams,
    InputTokenPair,
    OutputTokenPair,
    TokenAccount,
)

__all__ = [
    "PUBKEY_LENGTH",
    "Pubkey",
    "ProgramAddress",
    "AccountMeta",
    "Instruction",
    "InstructionDescriptor",
    "InputTokenParams",
    "OutputTokenParams",
    "InputTokenPair",
    "OutputTokenPair",
    "TokenAccount",
]
