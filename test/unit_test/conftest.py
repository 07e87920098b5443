"""
Shared fixtures for unit tests.

Provides in-memory stand-ins for the account fetcher and transaction
submitter so orchestration can be tested without a cluster.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cusd_factory.program.constants import (  # noqa: E402
    CLUSTER_LOCALHOST,
    CUSD_FACTORY_PROGRAM_IDS,
    CHAINLINK_PROGRAM_IDS,
    CUSD_TOKEN_MINTS,
)
from cusd_factory.types import Pubkey  # noqa: E402


def pk(n: int) -> Pubkey:
    """Deterministic test address filled with byte n"""
    return Pubkey(bytes([n]) * 32)


PROGRAM_ID = Pubkey.from_string(CUSD_FACTORY_PROGRAM_IDS[CLUSTER_LOCALHOST])
CHAINLINK_ID = Pubkey.from_string(CHAINLINK_PROGRAM_IDS[CLUSTER_LOCALHOST])
CUSD_MINT = Pubkey.from_string(CUSD_TOKEN_MINTS[CLUSTER_LOCALHOST])


class FakeFetcher:
    """AccountFetcher over a dict of address -> bytes"""

    def __init__(self, accounts=None):
        self.accounts = dict(accounts or {})
        self.error = None
        self.fetched = []

    async def fetch_account_bytes(self, address):
        self.fetched.append(address)
        if self.error is not None:
            raise self.error
        return self.accounts.get(address)

    async def address_exists(self, address):
        if self.error is not None:
            raise self.error
        return address in self.accounts


class FakeSubmitter:
    """TransactionSubmitter that records every batch"""

    def __init__(self):
        self.batches = []
        self.error = None

    async def submit_signed(self, instructions, signers):
        if self.error is not None:
            raise self.error
        self.batches.append((list(instructions), list(signers)))
        return f"sig{len(self.batches)}"


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def submitter():
    return FakeSubmitter()


@pytest.fixture
def builder():
    from cusd_factory.program import InstructionBuilder
    return InstructionBuilder(PROGRAM_ID, chainlink_program_id=CHAINLINK_ID)


@pytest.fixture
def factory(fetcher, submitter, builder):
    from cusd_factory.modules import FactoryModule
    return FactoryModule(fetcher, submitter, builder=builder, cusd_mint=CUSD_MINT)
