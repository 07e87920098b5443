"""
Persisted account layouts of the CUSD factory program
"""

from dataclasses import dataclass
from typing import Tuple

from ..types import Pubkey, InputTokenParams, OutputTokenParams
from .borsh import WireStruct
from .constants import ACCOUNT_APP_DATA, ACCOUNT_MINTER, ACCOUNT_BURNER, NO_PRICE_FEED


class AccountState(WireStruct):
    """Base for decoded program accounts"""


@dataclass(frozen=True)
class AppData(AccountState):
    """
    Program-wide settings

    Attributes:
        nonce: Bump of the AppData address
        signer_nonce: Bump of the root signer address
        limit: Mint/burn period length in hours
    """
    NAME = ACCOUNT_APP_DATA
    LAYOUT = (
        ("nonce", "u8"),
        ("signer_nonce", "u8"),
        ("limit", "u32"),
    )

    nonce: int
    signer_nonce: int
    limit: int


@dataclass(frozen=True)
class Minter(AccountState):
    NAME = ACCOUNT_MINTER
    LAYOUT = (
        ("nonce", "u8"),
        ("is_active", "bool"),
        ("input_tokens", "vec<pubkey>"),
        ("input_decimals", "vec<u16>"),
        ("input_percentages", "vec<u16>"),
        ("input_price_feeds", "vec<pubkey>"),
        ("fee_percent", "u16"),
        ("accumulated_fee", "u64"),
        ("total_minted_amount", "u64"),
        ("total_minted_limit", "u64"),
        ("per_period_minted_amount", "u64"),
        ("per_period_minted_limit", "u64"),
        ("last_period_timestamp", "i64"),
        ("min_amount", "u64"),
    )

    nonce: int
    is_active: bool
    input_tokens: Tuple[Pubkey, ...]
    input_decimals: Tuple[int, ...]
    input_percentages: Tuple[int, ...]
    input_price_feeds: Tuple[Pubkey, ...]
    fee_percent: int
    accumulated_fee: int
    total_minted_amount: int
    total_minted_limit: int
    per_period_minted_amount: int
    per_period_minted_limit: int
    last_period_timestamp: int
    min_amount: int

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
class Burner(AccountState):
    NAME = ACCOUNT_BURNER
    LAYOUT = (
        ("nonce", "u8"),
        ("is_active", "bool"),
        ("output_token", "pubkey"),
        ("output_decimals", "u16"),
        ("output_price_feed", "pubkey"),
        ("fee_percent", "u16"),
        ("accumulated_fee", "u64"),
        ("total_burned_amount", "u64"),
        ("total_burned_limit", "u64"),
        ("per_period_burned_amount", "u64"),
        ("per_period_burned_limit", "u64"),
        ("last_period_timestamp", "i64"),
        ("min_amount", "u64"),
    )

    nonce: int
    is_active: bool
    output_token: Pubkey
    output_decimals: int
    output_price_feed: Pubkey
    fee_percent: int
    accumulated_fee: int
    total_burned_amount: int
    total_burned_limit: int
    per_period_burned_amount: int
    per_period_burned_limit: int
    last_period_timestamp: int
    min_amount: int

    @property
    def output_params(self) -> OutputTokenParams:
        return OutputTokenParams(self.output_token, self.output_decimals, self.output_price_feed)

    @property
    def has_price_feed(self) -> bool:
        return str(self.output_price_feed) != NO_PRICE_FEED


ACCOUNT_TYPES = (AppData, Minter, Burner)
