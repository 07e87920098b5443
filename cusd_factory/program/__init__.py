"""
CUSD factory program interface

Address derivation, binary codec, account list assembly and instruction
builders. Pure functions and values; no I/O.
"""

from .codec import Codec
from .instructions import InstructionBuilder
from .accounts import (
    AccountListAssembler,
    assemble_input_accounts,
    output_token_accounts,
    merge_account_metas,
)
from .pda import (
    create_program_address,
    find_program_address,
    is_on_curve,
    name_seed,
    derivation_path,
    find_root_signer_address,
    find_app_data_address,
    find_minter_address,
    find_burner_address,
)
from .requests import (
    InstructionRequest,
    CreateMinter,
    SetMinter,
    CreateBurner,
    SetBurner,
    Mint,
    Burn,
    WithdrawToken,
    UnlockTokenMint,
    CreateAppData,
    SetAppData,
)
from .state import AccountState, AppData, Minter, Burner
from .token import (
    get_associated_token_address,
    build_create_ata_idempotent_instruction,
    parse_token_account,
)

__all__ = [
    "Codec",
    "InstructionBuilder",
    "AccountListAssembler",
    "assemble_input_accounts",
    "output_token_accounts",
    "merge_account_metas",
    "create_program_address",
    "find_program_address",
    "is_on_curve",
    "name_seed",
    "derivation_path",
    "find_root_signer_address",
    "find_app_data_address",
    "find_minter_address",
    "find_burner_address",
    "InstructionRequest",
    "CreateMinter",
    "SetMinter",
    "CreateBurner",
    "SetBurner",
    "Mint",
    "Burn",
    "WithdrawToken",
    "UnlockTokenMint",
    "CreateAppData",
    "SetAppData",
    "AccountState",
    "AppData",
    "Minter",
    "Burner",
    "get_associated_token_address",
    "build_create_ata_idempotent_instruction",
    "parse_token_account",
]
