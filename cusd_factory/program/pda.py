"""
Program derived address derivation

Addresses are recomputed on every call; the results depend only on the
seeds and the program ID. Hashing and the curve check are done by solders.
"""

import logging
from typing import List, Sequence, Union

from solders.pubkey import Pubkey

from ..errors import DerivationFailure, EncodingFailure, InvalidArgument
from ..types import ProgramAddress
from .constants import (
    MINTER_SEED,
    BURNER_SEED,
    PROGRAM_SEED,
    APP_DATA_SEED,
    SIGNER_SEED,
    ROOT_SEED,
    DERIVATION_PATH_LEN,
    name_hash,
)

logger = logging.getLogger(__name__)

MAX_SEED_LEN = 32
MAX_SEEDS = 16


def is_on_curve(key: Union[Pubkey, bytes]) -> bool:
    """Check whether an address is a point on the ed25519 curve"""
    if not isinstance(key, Pubkey):
        key = Pubkey(bytes(key))
    return key.is_on_curve()


def _check_seeds(seeds: Sequence[bytes], reserved: int = 0) -> List[bytes]:
    if len(seeds) + reserved > MAX_SEEDS:
        raise EncodingFailure.invalid_seed(f"at most {MAX_SEEDS} seeds allowed, got {len(seeds)}")
    checked = []
    for seed in seeds:
        if not isinstance(seed, (bytes, bytearray)):
            raise EncodingFailure.invalid_seed(f"seed must be bytes, got {type(seed).__name__}")
        if len(seed) > MAX_SEED_LEN:
            raise EncodingFailure.invalid_seed(
                f"seed of {len(seed)} bytes exceeds {MAX_SEED_LEN}"
            )
        checked.append(bytes(seed))
    return checked


def _create(seeds: List[bytes], program_id: Pubkey) -> Pubkey:
    try:
        return Pubkey.create_program_address(seeds, program_id)
    except Exception as e:
        # seeds are already validated, so the only rejection left is an on-curve hash
        raise DerivationFailure.on_curve(str(program_id)) from e


def create_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Pubkey:
    """
    Hash seeds into a program address without searching for a bump

    Raises:
        EncodingFailure: A seed is longer than 32 bytes or there are too many seeds
        DerivationFailure: The hash is a valid curve point
    """
    return _create(_check_seeds(seeds), program_id)


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> ProgramAddress:
    """
    Find the canonical program address for seeds

    Tries bump seeds 255 down to 0 and returns the first off-curve result,
    the same address Pubkey.find_program_address returns.

    Args:
        seeds: Seed byte strings, each at most 32 bytes
        program_id: Owning program

    Returns:
        ProgramAddress with the address and its bump

    Raises:
        EncodingFailure: Invalid seeds
        DerivationFailure: No bump yields an off-curve address
    """
    # one slot is reserved for the bump
    seeds = _check_seeds(seeds, reserved=1)
    for bump in range(255, -1, -1):
        try:
            return ProgramAddress(_create(seeds + [bytes([bump])], program_id), bump)
        except DerivationFailure:
            continue
    logger.error(f"No viable bump for program {program_id}")
    raise DerivationFailure.no_valid_address(str(program_id))


def name_seed(name: str) -> bytes:
    """8-byte seed component for a human-readable name"""
    if not name:
        raise InvalidArgument.empty("name")
    return name_hash(name)


def derivation_path(name_or_path: Union[str, bytes]) -> bytes:
    """
    Resolve a Minter/Burner derivation path

    A string is hashed to its 8-byte name seed. Raw bytes are used as given
    and must be exactly 8 bytes long.
    """
    if isinstance(name_or_path, str):
        return name_seed(name_or_path)
    if not isinstance(name_or_path, (bytes, bytearray)):
        raise EncodingFailure.invalid_seed(
            f"derivation path must be a name or bytes, got {type(name_or_path).__name__}"
        )
    if len(name_or_path) != DERIVATION_PATH_LEN:
        raise EncodingFailure.invalid_seed(
            f"derivation path must be {DERIVATION_PATH_LEN} bytes, got {len(name_or_path)}"
        )
    return bytes(name_or_path)


def find_root_signer_address(program_id: Pubkey) -> ProgramAddress:
    """Signer PDA that owns the pool token accounts and mint authority"""
    return find_program_address([SIGNER_SEED, ROOT_SEED], program_id)


def find_app_data_address(program_id: Pubkey) -> ProgramAddress:
    return find_program_address([PROGRAM_SEED, APP_DATA_SEED], program_id)


def find_minter_address(name_or_path: Union[str, bytes], program_id: Pubkey) -> ProgramAddress:
    return find_program_address([MINTER_SEED, derivation_path(name_or_path)], program_id)


def find_burner_address(name_or_path: Union[str, bytes], program_id: Pubkey) -> ProgramAddress:
    return find_program_address([BURNER_SEED, derivation_path(name_or_path)], program_id)
