"""
Test Program Address Derivation

Tests for seed constants, bump search and the fixed factory derivations.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from conftest import PROGRAM_ID, pk


def test_seed_constants_match_program():
    """Name seeds are the first 8 bytes of sha256(name)"""
    from cusd_factory.program import constants

    print("Testing seed constants...")

    assert constants.MINTER_SEED == bytes.fromhex("792c7beba6af408e")
    assert constants.BURNER_SEED == bytes.fromhex("f070bbfa5e7ebc4a")
    assert constants.PROGRAM_SEED == bytes.fromhex("90920d93e2c7e632")
    assert constants.APP_DATA_SEED == bytes.fromhex("0f51ad6a69cbfd63")
    assert constants.SIGNER_SEED == bytes.fromhex("0297e535f44de507")
    assert constants.ROOT_SEED == bytes.fromhex("44cb005ee2e65d9c")

    print("  Seed constants: PASSED")


def test_name_seed():
    from cusd_factory.program.pda import name_seed, derivation_path
    from cusd_factory.errors import InvalidArgument

    print("Testing name_seed...")

    assert name_seed("USDC-Minter") == bytes.fromhex("aaaf7bc477967fd4")
    assert derivation_path("USDC-Minter") == bytes.fromhex("aaaf7bc477967fd4")
    assert len(name_seed("a much longer name than eight bytes")) == 8

    with pytest.raises(InvalidArgument):
        name_seed("")

    print("  name_seed: PASSED")


def test_derivation_path_rejects_wrong_length():
    from cusd_factory.program.pda import derivation_path
    from cusd_factory.errors import EncodingFailure

    assert derivation_path(b"\x01" * 8) == b"\x01" * 8
    for bad in (b"", b"\x01" * 7, b"\x01" * 9):
        with pytest.raises(EncodingFailure):
            derivation_path(bad)


def test_derivation_path_rejects_non_bytes():
    from cusd_factory.program.pda import derivation_path
    from cusd_factory.errors import EncodingFailure

    # bytes(8) would silently be eight zero bytes
    for bad in (8, None, [1] * 8):
        with pytest.raises(EncodingFailure):
            derivation_path(bad)
    assert derivation_path(bytearray(b"\x02" * 8)) == b"\x02" * 8


def test_is_on_curve():
    from solders.pubkey import Pubkey
    from cusd_factory.program.pda import is_on_curve

    print("Testing is_on_curve...")

    # ed25519 base point
    base_point = bytes.fromhex("58" + "66" * 31)
    assert is_on_curve(base_point)
    # identity (y = 1)
    assert is_on_curve(b"\x01" + bytes(31))
    # the system program address is a valid point, never a PDA
    assert is_on_curve(bytes(32))
    assert is_on_curve(Pubkey.default())

    print("  is_on_curve: PASSED")


def test_find_program_address_properties():
    """Result is off-curve and reproducible from seeds + bump"""
    from cusd_factory.program.pda import (
        find_program_address,
        create_program_address,
        is_on_curve,
    )
    from cusd_factory.errors import DerivationFailure

    print("Testing find_program_address...")

    seeds = [b"seed", bytes(pk(9))]
    address, bump = find_program_address(seeds, PROGRAM_ID)

    assert 0 <= bump <= 255
    assert not is_on_curve(bytes(address))
    assert create_program_address(seeds + [bytes([bump])], PROGRAM_ID) == address
    assert find_program_address(seeds, PROGRAM_ID) == (address, bump)

    # every higher bump lands on the curve
    for higher in range(bump + 1, 256):
        with pytest.raises(DerivationFailure):
            create_program_address(seeds + [bytes([higher])], PROGRAM_ID)

    print("  find_program_address: PASSED")


class OnCurvePubkey:
    """Pubkey stand-in whose every hash lands on the curve"""

    calls = 0

    @staticmethod
    def create_program_address(seeds, program_id):
        OnCurvePubkey.calls += 1
        raise ValueError("Provided seeds do not result in a valid address")


def test_create_program_address_on_curve_fails(monkeypatch):
    from cusd_factory.program import pda
    from cusd_factory.errors import DerivationFailure, ErrorCode

    monkeypatch.setattr(pda, "Pubkey", OnCurvePubkey)
    with pytest.raises(DerivationFailure) as exc_info:
        pda.create_program_address([b"x"], PROGRAM_ID)
    assert exc_info.value.code == ErrorCode.DERIVATION_ON_CURVE
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_find_program_address_exhausted(monkeypatch):
    from cusd_factory.program import pda
    from cusd_factory.errors import DerivationFailure, ErrorCode

    OnCurvePubkey.calls = 0
    monkeypatch.setattr(pda, "Pubkey", OnCurvePubkey)
    with pytest.raises(DerivationFailure) as exc_info:
        pda.find_program_address([b"x"], PROGRAM_ID)
    assert exc_info.value.code == ErrorCode.DERIVATION_NO_VALID_ADDRESS
    # every bump from 255 down to 0 was tried
    assert OnCurvePubkey.calls == 256


def test_find_program_address_matches_solders():
    from solders.pubkey import Pubkey
    from cusd_factory.program.constants import MINTER_SEED, SIGNER_SEED, ROOT_SEED
    from cusd_factory.program.pda import find_program_address, name_seed

    for seeds in (
        [SIGNER_SEED, ROOT_SEED],
        [MINTER_SEED, name_seed("USDC-Minter")],
        [b"", bytes(pk(7))],
    ):
        assert find_program_address(seeds, PROGRAM_ID) == Pubkey.find_program_address(seeds, PROGRAM_ID)


def test_seed_limits():
    from cusd_factory.program.pda import find_program_address, create_program_address
    from cusd_factory.errors import EncodingFailure

    with pytest.raises(EncodingFailure):
        find_program_address([b"x" * 33], PROGRAM_ID)
    with pytest.raises(EncodingFailure):
        create_program_address([b"x" * 33], PROGRAM_ID)
    # 16 seeds leave no room for the bump
    with pytest.raises(EncodingFailure):
        find_program_address([b"x"] * 16, PROGRAM_ID)
    find_program_address([b"x" * 32] * 15, PROGRAM_ID)
    with pytest.raises(EncodingFailure):
        create_program_address(["Minter"], PROGRAM_ID)


def test_minter_name_and_path_agree():
    from cusd_factory.program.pda import find_minter_address, find_burner_address, name_seed

    print("Testing minter derivation...")

    by_name = find_minter_address("USDC-Minter", PROGRAM_ID)
    by_path = find_minter_address(name_seed("USDC-Minter"), PROGRAM_ID)
    assert by_name == by_path
    assert find_minter_address("USDC-Minter", PROGRAM_ID) == by_name

    burner = find_burner_address("USDC-Minter", PROGRAM_ID)
    assert burner.address != by_name.address
    assert find_minter_address("USDT-Minter", PROGRAM_ID).address != by_name.address

    print("  Minter derivation: PASSED")


def test_fixed_addresses_depend_on_program():
    from cusd_factory.program.pda import find_app_data_address, find_root_signer_address

    app_data = find_app_data_address(PROGRAM_ID)
    root_signer = find_root_signer_address(PROGRAM_ID)
    assert app_data.address != root_signer.address
    assert find_app_data_address(pk(3)).address != app_data.address
    assert find_root_signer_address(pk(3)).address != root_signer.address
