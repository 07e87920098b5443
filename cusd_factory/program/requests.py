"""
Instruction argument variants

One frozen dataclass per program instruction, carrying exactly the fields
that instruction takes, in wire order.
"""

from dataclasses import dataclass
from typing import Tuple

from ..errors import InvalidArgument
from ..types import Pubkey, InputTokenParams, OutputTokenParams
from .borsh import WireStruct
from .constants import (
    IX_CREATE_MINTER,
    IX_SET_MINTER,
    IX_CREATE_BURNER,
    IX_SET_BURNER,
    IX_MINT,
    IX_BURN,
    IX_WITHDRAW_TOKEN,
    IX_UNLOCK_TOKEN_MINT,
    IX_CREATE_APP_DATA,
    IX_SET_APP_DATA,
)


class InstructionRequest(WireStruct):
    """Base for instruction argument variants"""


@dataclass(frozen=True)
class CreateMinter(InstructionRequest):
    NAME = IX_CREATE_MINTER
    LAYOUT = (("derivation_path", "bytes"),)

    derivation_path: bytes


@dataclass(frozen=True)
class SetMinter(InstructionRequest):
    """Configure a Minter; the four input lists are parallel arrays"""
    NAME = IX_SET_MINTER
    LAYOUT = (
        ("is_active", "bool"),
        ("input_tokens", "vec<pubkey>"),
        ("input_decimals", "vec<u16>"),
        ("input_percentages", "vec<u16>"),
        ("input_price_feeds", "vec<pubkey>"),
        ("fee_percent", "u16"),
        ("total_minted_limit", "u64"),
        ("per_period_minted_limit", "u64"),
        ("min_amount", "u64"),
    )

    is_active: bool
    input_tokens: Tuple[Pubkey, ...]
    input_decimals: Tuple[int, ...]
    input_percentages: Tuple[int, ...]
    input_price_feeds: Tuple[Pubkey, ...]
    fee_percent: int
    total_minted_limit: int
    per_period_minted_limit: int
    min_amount: int = 0

    def __post_init__(self):
        super().__post_init__()
        lengths = {
            len(self.input_tokens),
            len(self.input_decimals),
            len(self.input_percentages),
            len(self.input_price_feeds),
        }
        if len(lengths) != 1:
            raise InvalidArgument(
                "input_tokens, input_decimals, input_percentages and input_price_feeds "
                "must have the same length",
                argument="input_tokens",
            )

    @classmethod
    def from_params(
        cls,
        is_active: bool,
        input_params,
        fee_percent: int,
        total_minted_limit: int,
        per_period_minted_limit: int,
        min_amount: int = 0,
    ) -> "SetMinter":
        params: Tuple[InputTokenParams, ...] = tuple(input_params)
        return cls(
            is_active=is_active,
            input_tokens=tuple(p.token for p in params),
            input_decimals=tuple(p.decimals for p in params),
            input_percentages=tuple(p.percentage for p in params),
            input_price_feeds=tuple(p.price_feed for p in params),
            fee_percent=fee_percent,
            total_minted_limit=total_minted_limit,
            per_period_minted_limit=per_period_minted_limit,
            min_amount=min_amount,
        )

    @property
    def input_params(self) -> Tuple[InputTokenParams, ...]:
        return tuple(
            InputTokenParams(token, decimals, percentage, feed)
            for token, decimals, percentage, feed in zip(
                self.input_tokens,
                self.input_decimals,
                self.input_percentages,
                self.input_price_feeds,
            )
        )


@dataclass(frozen=True)
class CreateBurner(InstructionRequest):
    NAME = IX_CREATE_BURNER
    LAYOUT = (("derivation_path", "bytes"),)

    derivation_path: bytes


@dataclass(frozen=True)
class SetBurner(InstructionRequest):
    NAME = IX_SET_BURNER
    LAYOUT = (
        ("is_active", "bool"),
        ("output_token", "pubkey"),
        ("output_decimals", "u16"),
        ("output_price_feed", "pubkey"),
        ("fee_percent", "u16"),
        ("total_burned_limit", "u64"),
        ("per_period_burned_limit", "u64"),
        ("min_amount", "u64"),
    )

    is_active: bool
    output_token: Pubkey
    output_decimals: int
    output_price_feed: Pubkey
    fee_percent: int
    total_burned_limit: int
    per_period_burned_limit: int
    min_amount: int = 0

    @classmethod
    def from_params(
        cls,
        is_active: bool,
        output_params: OutputTokenParams,
        fee_percent: int,
        total_burned_limit: int,
        per_period_burned_limit: int,
        min_amount: int = 0,
    ) -> "SetBurner":
        return cls(
            is_active=is_active,
            output_token=output_params.token,
            output_decimals=output_params.decimals,
            output_price_feed=output_params.price_feed,
            fee_percent=fee_percent,
            total_burned_limit=total_burned_limit,
            per_period_burned_limit=per_period_burned_limit,
            min_amount=min_amount,
        )


@dataclass(frozen=True)
class Mint(InstructionRequest):
    """
    Mint CUSD against the Minter's input basket

    extra_instructions holds one u8 index per (price feed, user token, pool
    token) role into the trailing account list.
    """
    NAME = IX_MINT
    LAYOUT = (("amount", "u64"), ("extra_instructions", "bytes"))

    amount: int
    extra_instructions: bytes = b""


@dataclass(frozen=True)
class Burn(InstructionRequest):
    NAME = IX_BURN
    LAYOUT = (("amount", "u64"),)

    amount: int


@dataclass(frozen=True)
class WithdrawToken(InstructionRequest):
    NAME = IX_WITHDRAW_TOKEN
    LAYOUT = (("amount", "u64"),)

    amount: int


@dataclass(frozen=True)
class UnlockTokenMint(InstructionRequest):
    NAME = IX_UNLOCK_TOKEN_MINT
    LAYOUT = ()


@dataclass(frozen=True)
class CreateAppData(InstructionRequest):
    NAME = IX_CREATE_APP_DATA
    LAYOUT = ()


@dataclass(frozen=True)
class SetAppData(InstructionRequest):
    NAME = IX_SET_APP_DATA
    LAYOUT = (("limit", "u32"),)

    limit: int


INSTRUCTION_TYPES = (
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
