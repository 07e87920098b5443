"""
Currency descriptions used by Minter and Burner instructions
"""

from dataclasses import dataclass

from .common import Pubkey


@dataclass(frozen=True)
class InputTokenParams:
    """
    One accepted input currency of a Minter

    Attributes:
        token: Token mint
        decimals: Mint decimals
        percentage: Share of the basket in basis points
        price_feed: Chainlink feed, or the system program for none
    """
    token: Pubkey
    decimals: int
    percentage: int
    price_feed: Pubkey


@dataclass(frozen=True)
class OutputTokenParams:
    """The single output currency of a Burner"""
    token: Pubkey
    decimals: int
    price_feed: Pubkey


@dataclass(frozen=True)
class InputTokenPair:
    """Resolved accounts for one input currency of a mint call"""
    price_feed: Pubkey
    pool_token: Pubkey
    user_token: Pubkey


@dataclass(frozen=True)
class OutputTokenPair:
    """Resolved accounts for the output currency of a burn call"""
    price_feed: Pubkey
    pool_token: Pubkey
    user_token: Pubkey


@dataclass(frozen=True)
class TokenAccount:
    """SPL token account fields read by the client"""
    address: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: int
