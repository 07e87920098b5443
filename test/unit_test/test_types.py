"""
Test Types Module

Tests for the solders address and instruction types as the client uses them.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cusd_factory.program.constants import (
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    CUSD_FACTORY_PROGRAM_IDS,
    CHAINLINK_PROGRAM_IDS,
    CUSD_TOKEN_MINTS,
)
from cusd_factory.types import (
    AccountMeta,
    Instruction,
    InstructionDescriptor,
    ProgramAddress,
    Pubkey,
)


def test_system_program_is_zero_key():
    key = Pubkey.from_string(SYSTEM_PROGRAM_ID)
    assert bytes(key) == bytes(32)
    assert key == Pubkey.default()
    assert str(key) == SYSTEM_PROGRAM_ID


@pytest.mark.parametrize(
    "address",
    [TOKEN_PROGRAM_ID, ASSOCIATED_TOKEN_PROGRAM_ID]
    + list(CUSD_FACTORY_PROGRAM_IDS.values())
    + list(CHAINLINK_PROGRAM_IDS.values())
    + list(CUSD_TOKEN_MINTS.values()),
)
def test_known_addresses_parse(address):
    key = Pubkey.from_string(address)
    assert len(bytes(key)) == 32
    assert str(key) == address


def test_pubkey_equality_is_bytewise():
    a = Pubkey(bytes([7]) * 32)
    b = Pubkey(bytes(bytearray([7]) * 32))
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert Pubkey.from_string(str(a)) == a


def test_program_address_unpacks():
    key = Pubkey(bytes([3]) * 32)
    derived = ProgramAddress(key, 254)
    address, bump = derived
    assert address == key
    assert bump == 254
    assert derived == (key, 254)


def test_instruction_descriptor_is_solders_instruction():
    key = Pubkey(bytes([1]) * 32)
    ix = InstructionDescriptor(key, b"\x01\x02", [AccountMeta(key, is_signer=True, is_writable=True)])
    assert isinstance(ix, Instruction)
    assert ix.program_id == key
    assert ix.data == b"\x01\x02"
    assert [(m.pubkey, m.is_signer, m.is_writable) for m in ix.accounts] == [(key, True, True)]
    assert ix == Instruction(key, b"\x01\x02", [AccountMeta(key, True, True)])
