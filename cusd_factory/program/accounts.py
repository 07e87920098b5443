"""
Account list assembly

The mint instruction takes a variable set of per-currency accounts after its
fixed accounts. Each address appears once in that list; an index array in
the payload tells the program which entry plays which role.
"""

from typing import Dict, List, Sequence, Tuple

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from ..types import InputTokenPair, OutputTokenPair


class AccountListAssembler:
    """
    Deduplicating account list builder

    Every add() call records the position of its address; repeated addresses
    share one entry whose signer/writable flags are the most permissive seen.
    """

    def __init__(self):
        self._pubkeys: List[Pubkey] = []
        self._signer: List[bool] = []
        self._writable: List[bool] = []
        self._positions: Dict[Pubkey, int] = {}
        self._indices: List[int] = []

    def add(self, pubkey: Pubkey, is_signer: bool = False, is_writable: bool = False) -> int:
        position = self._positions.get(pubkey)
        if position is None:
            position = len(self._pubkeys)
            self._positions[pubkey] = position
            self._pubkeys.append(pubkey)
            self._signer.append(is_signer)
            self._writable.append(is_writable)
        else:
            self._signer[position] = self._signer[position] or is_signer
            self._writable[position] = self._writable[position] or is_writable
        self._indices.append(position)
        return position

    def extend(self, metas: Sequence[AccountMeta]) -> None:
        for meta in metas:
            self.add(meta.pubkey, meta.is_signer, meta.is_writable)

    @property
    def account_metas(self) -> List[AccountMeta]:
        return [
            AccountMeta(pubkey, is_signer=signer, is_writable=writable)
            for pubkey, signer, writable in zip(self._pubkeys, self._signer, self._writable)
        ]

    @property
    def indices(self) -> List[int]:
        return list(self._indices)

    def __len__(self) -> int:
        return len(self._pubkeys)


def assemble_input_accounts(pairs: Sequence[InputTokenPair]) -> Tuple[List[AccountMeta], List[int]]:
    """
    Lay out the per-currency accounts of a mint call

    For each currency in caller order the roles are: price feed (read-only),
    user token account (writable), pool token account (writable).

    Returns:
        (deduplicated account metas, 3 * len(pairs) indices)
    """
    assembler = AccountListAssembler()
    for pair in pairs:
        assembler.add(pair.price_feed)
        assembler.add(pair.user_token, is_writable=True)
        assembler.add(pair.pool_token, is_writable=True)
    return assembler.account_metas, assembler.indices


def output_token_accounts(pair: OutputTokenPair) -> List[AccountMeta]:
    """Burn reads its output accounts by fixed position, so they are not deduplicated"""
    return [
        AccountMeta(pair.price_feed, is_signer=False, is_writable=False),
        AccountMeta(pair.pool_token, is_signer=False, is_writable=True),
        AccountMeta(pair.user_token, is_signer=False, is_writable=True),
    ]


def merge_account_metas(metas: Sequence[AccountMeta]) -> List[AccountMeta]:
    """Collapse repeated addresses, keeping first-seen order and the most permissive flags"""
    assembler = AccountListAssembler()
    assembler.extend(metas)
    return assembler.account_metas
