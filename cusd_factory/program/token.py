"""
SPL token helpers

Associated token account derivation, the idempotent ATA-create instruction
and token account parsing.
"""

import struct
from typing import Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..errors import EncodingFailure
from ..types import TokenAccount
from .constants import ASSOCIATED_TOKEN_PROGRAM_ID, SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID
from .pda import find_program_address

# SPL token account layout
TOKEN_ACCOUNT_MINT_OFFSET = 0
TOKEN_ACCOUNT_OWNER_OFFSET = 32
TOKEN_ACCOUNT_AMOUNT_OFFSET = 64
TOKEN_ACCOUNT_MIN_LEN = 72

# AssociatedTokenAccountInstruction::CreateIdempotent
CREATE_IDEMPOTENT = 1


def get_associated_token_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program: Optional[Pubkey] = None,
) -> Pubkey:
    """
    Get associated token account address.

    Args:
        owner: Wallet owner (may itself be a program address)
        mint: Token mint
        token_program: Token program (defaults to Tokenkeg)

    Returns:
        ATA address
    """
    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    seeds = [
        bytes(owner),
        bytes(token_program),
        bytes(mint),
    ]
    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    return find_program_address(seeds, ata_program).address


def build_create_ata_idempotent_instruction(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """
    Build create_associated_token_account_idempotent instruction.

    Creates the ATA if it doesn't exist, or does nothing if it does.
    """
    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    ata_address = get_associated_token_address(owner, mint, token_program)

    accounts = [
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(ata_address, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(Pubkey.from_string(SYSTEM_PROGRAM_ID), is_signer=False, is_writable=False),
        AccountMeta(token_program, is_signer=False, is_writable=False),
    ]

    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    return Instruction(ata_program, bytes([CREATE_IDEMPOTENT]), accounts)


def parse_token_account(address: Pubkey, data: bytes) -> TokenAccount:
    """Parse the mint, owner and amount of an SPL token account"""
    if len(data) < TOKEN_ACCOUNT_MIN_LEN:
        raise EncodingFailure.decode_failed(
            "token account", f"expected at least {TOKEN_ACCOUNT_MIN_LEN} bytes, got {len(data)}"
        )
    mint = Pubkey(data[TOKEN_ACCOUNT_MINT_OFFSET:TOKEN_ACCOUNT_MINT_OFFSET + 32])
    owner = Pubkey(data[TOKEN_ACCOUNT_OWNER_OFFSET:TOKEN_ACCOUNT_OWNER_OFFSET + 32])
    amount = struct.unpack_from("<Q", data, TOKEN_ACCOUNT_AMOUNT_OFFSET)[0]
    return TokenAccount(address=address, mint=mint, owner=owner, amount=amount)
