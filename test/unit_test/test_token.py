"""
Test SPL Token Helpers
"""

import struct
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from conftest import pk

from cusd_factory.errors import EncodingFailure
from cusd_factory.program.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from cusd_factory.program.pda import find_program_address, is_on_curve
from cusd_factory.program.token import (
    build_create_ata_idempotent_instruction,
    get_associated_token_address,
    parse_token_account,
)
from cusd_factory.types import Pubkey

TOKEN = Pubkey.from_string(TOKEN_PROGRAM_ID)
ATA_PROGRAM = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)


def test_associated_token_address():
    print("Testing get_associated_token_address...")

    owner, mint = pk(1), pk(2)
    ata = get_associated_token_address(owner, mint)

    expected, _ = find_program_address([bytes(owner), bytes(TOKEN), bytes(mint)], ATA_PROGRAM)
    assert ata == expected
    assert not is_on_curve(bytes(ata))
    assert get_associated_token_address(owner, mint, TOKEN) == ata
    assert get_associated_token_address(owner, pk(3)) != ata
    assert get_associated_token_address(pk(4), mint) != ata

    print("  get_associated_token_address: PASSED")


def test_create_ata_idempotent_instruction():
    payer, owner, mint = pk(1), pk(2), pk(3)
    ix = build_create_ata_idempotent_instruction(payer, owner, mint)

    assert ix.program_id == ATA_PROGRAM
    assert ix.data == b"\x01"
    assert [(m.pubkey, m.is_signer, m.is_writable) for m in ix.accounts] == [
        (payer, True, True),
        (get_associated_token_address(owner, mint), False, True),
        (owner, False, False),
        (mint, False, False),
        (Pubkey.from_string(SYSTEM_PROGRAM_ID), False, False),
        (TOKEN, False, False),
    ]
    assert [m.pubkey for m in ix.accounts if m.is_signer] == [payer]


def test_parse_token_account():
    print("Testing parse_token_account...")

    data = bytes(pk(5)) + bytes(pk(6)) + struct.pack("<Q", 123_456) + bytes(93)
    account = parse_token_account(pk(7), data)

    assert account.address == pk(7)
    assert account.mint == pk(5)
    assert account.owner == pk(6)
    assert account.amount == 123_456

    print("  parse_token_account: PASSED")


def test_parse_token_account_too_short():
    with pytest.raises(EncodingFailure):
        parse_token_account(pk(7), bytes(71))
