"""
External collaborator interfaces

The orchestrator reads account state and submits transactions only through
these protocols. Signing, serialization and confirmation live behind
TransactionSubmitter.
"""

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from solders.instruction import Instruction
from solders.pubkey import Pubkey


@runtime_checkable
class AccountFetcher(Protocol):
    """Reads raw account data"""

    async def fetch_account_bytes(self, address: Pubkey) -> Optional[bytes]:
        """Raw account data, or None when the account does not exist"""
        ...

    async def address_exists(self, address: Pubkey) -> bool:
        ...


@runtime_checkable
class TransactionSubmitter(Protocol):
    """
    Signs, submits and confirms one atomic batch of instructions

    Implementations raise RpcError for transport failures and
    RemoteRejection when the cluster or program rejects the batch.
    """

    async def submit_signed(
        self,
        instructions: Sequence[Instruction],
        signers: Sequence[Any],
    ) -> str:
        """Submit the batch and return its transaction signature"""
        ...
