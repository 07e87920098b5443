"""
Common type definitions

Addresses, account metas and instructions are the solders types; this module
adds the program-address pair.
"""

from typing import NamedTuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey


PUBKEY_LENGTH = 32

# Program call ready for inclusion in a transaction
InstructionDescriptor = Instruction


class ProgramAddress(NamedTuple):
    """Program-derived address and the bump seed that produced it"""
    address: Pubkey
    bump: int


__all__ = [
    "PUBKEY_LENGTH",
    "Pubkey",
    "AccountMeta",
    "Instruction",
    "InstructionDescriptor",
    "ProgramAddress",
]
