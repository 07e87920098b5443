"""
Factory Module

Sequences CUSD factory instructions into atomic batches and submits them.

Supports:
- Minter and Burner creation and configuration
- Minting and burning CUSD against configured currencies
- Pool token withdrawal and mint authority unlock
- Program settings (AppData) initialization
- Reading Minter, Burner and AppData state
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from ..config import config as global_config
from ..errors import RpcError, StateFetchFailure, CusdFactoryError
from ..infra.correlation import CorrelationContext, log_with_correlation
from ..infra.interfaces import AccountFetcher, TransactionSubmitter
from ..program.constants import ACCOUNT_APP_DATA, ACCOUNT_BURNER, ACCOUNT_MINTER
from ..program.instructions import InstructionBuilder
from ..program.state import AppData, Burner, Minter
from ..program.token import (
    build_create_ata_idempotent_instruction,
    get_associated_token_address,
    parse_token_account,
)
from ..types import (
    InputTokenPair,
    InputTokenParams,
    OutputTokenPair,
    OutputTokenParams,
    TokenAccount,
)

logger = logging.getLogger(__name__)

NameOrPath = Union[str, bytes]


class FactoryModule:
    """
    CUSD factory operations

    Reads go through an AccountFetcher; every batch is handed to a
    TransactionSubmitter, which signs, sends and confirms it. Nothing here
    retries: failures propagate to the caller.

    Usage:
        factory = FactoryModule(rpc, submitter)

        minter = await factory.create_minter(
            root, [root_keypair], "USDC-Minter",
            is_active=True,
            input_params=[InputTokenParams(usdc, 6, 10000, usdc_feed)],
            fee_percent=10,
            total_minted_limit=10**12,
            per_period_minted_limit=10**10,
        )
        signature = await factory.mint(user, [user_keypair], minter, 1_000_000, user_cusd)
    """

    def __init__(
        self,
        fetcher: AccountFetcher,
        submitter: TransactionSubmitter,
        builder: Optional[InstructionBuilder] = None,
        cusd_mint: Optional[Pubkey] = None,
    ):
        self._fetcher = fetcher
        self._submitter = submitter
        self._builder = builder or InstructionBuilder.from_config()
        self._cusd_mint = cusd_mint or Pubkey.from_string(global_config.program.cusd_mint)

    @property
    def builder(self) -> InstructionBuilder:
        return self._builder

    @property
    def program_id(self) -> Pubkey:
        return self._builder.program_id

    @property
    def cusd_mint(self) -> Pubkey:
        return self._cusd_mint

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def find_minter_address(self, name_or_path: NameOrPath) -> Pubkey:
        """Minter address for a name or raw 8-byte derivation path"""
        return self._builder.find_minter_address(name_or_path).address

    def find_burner_address(self, name_or_path: NameOrPath) -> Pubkey:
        return self._builder.find_burner_address(name_or_path).address

    def find_app_data_address(self) -> Pubkey:
        return self._builder.find_app_data_address().address

    def find_root_signer_address(self) -> Pubkey:
        return self._builder.find_root_signer_address().address

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    async def _fetch_bytes(self, kind: str, address: Pubkey) -> bytes:
        try:
            data = await self._fetcher.fetch_account_bytes(address)
        except RpcError as e:
            raise StateFetchFailure.read_failed(kind, str(address), e) from e
        if data is None:
            raise StateFetchFailure.not_found(kind, str(address))
        return data

    async def _fetch_state(self, kind: str, address: Pubkey):
        data = await self._fetch_bytes(kind, address)
        return self._builder.codec.decode_account(kind, data)

    async def _exists(self, kind: str, address: Pubkey) -> bool:
        try:
            return await self._fetcher.address_exists(address)
        except RpcError as e:
            raise StateFetchFailure.read_failed(kind, str(address), e) from e

    async def get_app_data(self) -> AppData:
        return await self._fetch_state(ACCOUNT_APP_DATA, self.find_app_data_address())

    async def get_minter(self, minter: Pubkey) -> Minter:
        """
        Fetch and decode a Minter account

        Raises:
            StateFetchFailure: The account is missing or could not be read
            EncodingFailure: The account data is not a Minter
        """
        return await self._fetch_state(ACCOUNT_MINTER, minter)

    async def get_burner(self, burner: Pubkey) -> Burner:
        return await self._fetch_state(ACCOUNT_BURNER, burner)

    async def get_token_account(self, address: Pubkey) -> TokenAccount:
        data = await self._fetch_bytes("Token", address)
        return parse_token_account(address, data)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def _submit(
        self,
        operation: str,
        instructions: List[Instruction],
        signers: Sequence[Any],
    ) -> str:
        log_with_correlation(
            logger, logging.DEBUG,
            f"Submitting {len(instructions)} instruction(s)",
            operation,
        )
        try:
            signature = await self._submitter.submit_signed(instructions, signers)
        except CusdFactoryError as e:
            log_with_correlation(logger, logging.ERROR, f"Submission failed: {e}", operation)
            raise
        log_with_correlation(logger, logging.INFO, f"Confirmed --- {signature}", operation)
        return signature

    # ------------------------------------------------------------------
    # Minter
    # ------------------------------------------------------------------

    def build_create_minter(
        self,
        root: Pubkey,
        name_or_path: NameOrPath,
        is_active: bool,
        input_params: Sequence[InputTokenParams],
        fee_percent: int,
        total_minted_limit: int,
        per_period_minted_limit: int,
        min_amount: int = 0,
    ) -> List[Instruction]:
        """create_minter followed by set_minter, so a Minter is never left unconfigured"""
        minter = self.find_minter_address(name_or_path)
        return [
            self._builder.create_minter(root, name_or_path),
            self._builder.set_minter(
                root, minter, is_active, input_params, fee_percent,
                total_minted_limit, per_period_minted_limit, min_amount,
            ),
        ]

    async def create_minter(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        name_or_path: NameOrPath,
        is_active: bool,
        input_params: Sequence[InputTokenParams],
        fee_percent: int,
        total_minted_limit: int,
        per_period_minted_limit: int,
        min_amount: int = 0,
    ) -> Pubkey:
        """
        Create and configure a Minter in one transaction.

        Args:
            root: Program authority, pays for the account
            signers: Signers handed to the submitter
            name_or_path: Minter name or raw 8-byte derivation path
            is_active: Whether minting is enabled
            input_params: Accepted input currencies
            fee_percent: Fee in basis points
            total_minted_limit: Lifetime mint cap
            per_period_minted_limit: Per-period mint cap
            min_amount: Smallest accepted mint amount

        Returns:
            Minter address
        """
        with CorrelationContext("create_minter"):
            instructions = self.build_create_minter(
                root, name_or_path, is_active, input_params, fee_percent,
                total_minted_limit, per_period_minted_limit, min_amount,
            )
            minter = self.find_minter_address(name_or_path)
            await self._submit("create_minter", instructions, signers)
            log_with_correlation(logger, logging.INFO, f"Created Minter {minter}", "create_minter")
            return minter

    async def set_minter(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        minter: Pubkey,
        is_active: bool,
        input_params: Sequence[InputTokenParams],
        fee_percent: int,
        total_minted_limit: int,
        per_period_minted_limit: int,
        min_amount: int = 0,
    ) -> str:
        with CorrelationContext("set_minter"):
            instruction = self._builder.set_minter(
                root, minter, is_active, input_params, fee_percent,
                total_minted_limit, per_period_minted_limit, min_amount,
            )
            return await self._submit("set_minter", [instruction], signers)

    async def build_mint(
        self,
        user: Pubkey,
        minter: Pubkey,
        amount: int,
        user_cusd_token: Pubkey,
    ) -> List[Instruction]:
        """
        Build a mint batch from the Minter's current configuration.

        Each input currency is paid from the user's associated token account
        into the root signer's associated token account.
        """
        state = await self.get_minter(minter)
        root_signer = self.find_root_signer_address()
        token_program = self._builder.token_program_id
        pairs = [
            InputTokenPair(
                price_feed=feed,
                pool_token=get_associated_token_address(root_signer, token, token_program),
                user_token=get_associated_token_address(user, token, token_program),
            )
            for token, feed in zip(state.input_tokens, state.input_price_feeds)
        ]
        return [
            self._builder.mint(user, minter, self._cusd_mint, user_cusd_token, amount, pairs),
        ]

    async def mint(
        self,
        user: Pubkey,
        signers: Sequence[Any],
        minter: Pubkey,
        amount: int,
        user_cusd_token: Pubkey,
    ) -> str:
        """
        Mint CUSD through a Minter.

        Args:
            user: Paying wallet
            signers: Signers handed to the submitter
            minter: Minter address
            amount: CUSD amount in base units
            user_cusd_token: Token account receiving the CUSD

        Returns:
            Transaction signature
        """
        with CorrelationContext("mint"):
            instructions = await self.build_mint(user, minter, amount, user_cusd_token)
            signature = await self._submit("mint", instructions, signers)
            log_with_correlation(logger, logging.INFO, f"Minted {amount} CUSD via {minter}", "mint")
            return signature

    # ------------------------------------------------------------------
    # Burner
    # ------------------------------------------------------------------

    def build_create_burner(
        self,
        root: Pubkey,
        name_or_path: NameOrPath,
        is_active: bool,
        output_params: OutputTokenParams,
        fee_percent: int,
        total_burned_limit: int,
        per_period_burned_limit: int,
        min_amount: int = 0,
    ) -> List[Instruction]:
        burner = self.find_burner_address(name_or_path)
        return [
            self._builder.create_burner(root, name_or_path),
            self._builder.set_burner(
                root, burner, is_active, output_params, fee_percent,
                total_burned_limit, per_period_burned_limit, min_amount,
            ),
        ]

    async def create_burner(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        name_or_path: NameOrPath,
        is_active: bool,
        output_params: OutputTokenParams,
        fee_percent: int,
        total_burned_limit: int,
        per_period_burned_limit: int,
        min_amount: int = 0,
    ) -> Pubkey:
        """Create and configure a Burner in one transaction; returns the Burner address"""
        with CorrelationContext("create_burner"):
            instructions = self.build_create_burner(
                root, name_or_path, is_active, output_params, fee_percent,
                total_burned_limit, per_period_burned_limit, min_amount,
            )
            burner = self.find_burner_address(name_or_path)
            await self._submit("create_burner", instructions, signers)
            log_with_correlation(logger, logging.INFO, f"Created Burner {burner}", "create_burner")
            return burner

    async def set_burner(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        burner: Pubkey,
        is_active: bool,
        output_params: OutputTokenParams,
        fee_percent: int,
        total_burned_limit: int,
        per_period_burned_limit: int,
        min_amount: int = 0,
    ) -> str:
        with CorrelationContext("set_burner"):
            instruction = self._builder.set_burner(
                root, burner, is_active, output_params, fee_percent,
                total_burned_limit, per_period_burned_limit, min_amount,
            )
            return await self._submit("set_burner", [instruction], signers)

    async def build_burn(
        self,
        user: Pubkey,
        burner: Pubkey,
        amount: int,
        user_cusd_token: Pubkey,
        user_token: Optional[Pubkey] = None,
    ) -> List[Instruction]:
        """
        Build a burn batch from the Burner's current configuration.

        The output currency is paid from the root signer's associated token
        account into user_token (the user's associated token account by default).
        """
        state = await self.get_burner(burner)
        root_signer = self.find_root_signer_address()
        token_program = self._builder.token_program_id
        if user_token is None:
            user_token = get_associated_token_address(user, state.output_token, token_program)
        pair = OutputTokenPair(
            price_feed=state.output_price_feed,
            pool_token=get_associated_token_address(root_signer, state.output_token, token_program),
            user_token=user_token,
        )
        return [
            self._builder.burn(user, burner, self._cusd_mint, user_cusd_token, amount, pair),
        ]

    async def burn(
        self,
        user: Pubkey,
        signers: Sequence[Any],
        burner: Pubkey,
        amount: int,
        user_cusd_token: Pubkey,
        user_token: Optional[Pubkey] = None,
    ) -> str:
        with CorrelationContext("burn"):
            instructions = await self.build_burn(user, burner, amount, user_cusd_token, user_token)
            signature = await self._submit("burn", instructions, signers)
            log_with_correlation(logger, logging.INFO, f"Burned {amount} CUSD via {burner}", "burn")
            return signature

    # ------------------------------------------------------------------
    # Pool administration
    # ------------------------------------------------------------------

    async def find_recipient_token_address(
        self,
        payer: Pubkey,
        recipient: Pubkey,
        mint: Pubkey,
    ) -> Tuple[Pubkey, Optional[Instruction]]:
        """
        Recipient's associated token account, plus a create instruction when it does not exist yet
        """
        token_program = self._builder.token_program_id
        ata = get_associated_token_address(recipient, mint, token_program)
        if await self._exists("Token", ata):
            return ata, None
        logger.debug(f"Recipient token account {ata} missing, adding create instruction")
        return ata, build_create_ata_idempotent_instruction(payer, recipient, mint, token_program)

    async def build_withdraw_token(
        self,
        root: Pubkey,
        pool_token: Pubkey,
        recipient: Pubkey,
        amount: int,
    ) -> List[Instruction]:
        pool_account = await self.get_token_account(pool_token)
        recipient_token, create_ix = await self.find_recipient_token_address(
            root, recipient, pool_account.mint
        )
        instructions = []
        if create_ix is not None:
            instructions.append(create_ix)
        instructions.append(self._builder.withdraw_token(root, pool_token, recipient_token, amount))
        return instructions

    async def withdraw_token(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        pool_token: Pubkey,
        recipient: Pubkey,
        amount: int,
    ) -> str:
        """
        Withdraw tokens held by the root signer to a recipient wallet.

        Args:
            root: Program authority
            signers: Signers handed to the submitter
            pool_token: Token account owned by the root signer
            recipient: Wallet receiving the tokens
            amount: Token amount in base units

        Returns:
            Transaction signature
        """
        with CorrelationContext("withdraw_token"):
            instructions = await self.build_withdraw_token(root, pool_token, recipient, amount)
            signature = await self._submit("withdraw_token", instructions, signers)
            log_with_correlation(
                logger, logging.INFO, f"Withdrew {amount} tokens to {recipient}", "withdraw_token"
            )
            return signature

    async def unlock_token_mint(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        token_mint: Pubkey,
    ) -> str:
        with CorrelationContext("unlock_token_mint"):
            instruction = self._builder.unlock_token_mint(root, token_mint)
            return await self._submit("unlock_token_mint", [instruction], signers)

    async def build_init_app_data(self, root: Pubkey, limit: int) -> List[Instruction]:
        """set_app_data, preceded by create_app_data only if the account does not exist yet"""
        instructions = []
        app_data = self.find_app_data_address()
        if not await self._exists(ACCOUNT_APP_DATA, app_data):
            instructions.append(self._builder.create_app_data(root))
        instructions.append(self._builder.set_app_data(root, limit))
        return instructions

    async def init_app_data(
        self,
        root: Pubkey,
        signers: Sequence[Any],
        limit: int,
    ) -> str:
        """
        Create (if needed) and set the program settings.

        Args:
            root: Program authority
            signers: Signers handed to the submitter
            limit: Mint/burn period length in hours

        Returns:
            Transaction signature
        """
        with CorrelationContext("init_app_data"):
            instructions = await self.build_init_app_data(root, limit)
            return await self._submit("init_app_data", instructions, signers)
