"""
CUSD factory instruction builders

Each builder returns one solders Instruction with the account order and
payload the program expects. Nothing here performs I/O.
"""

import logging
from typing import List, Optional, Sequence, Union

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..errors import InvalidArgument
from ..types import (
    InputTokenParams,
    InputTokenPair,
    OutputTokenParams,
    OutputTokenPair,
    ProgramAddress,
)
from .accounts import assemble_input_accounts, output_token_accounts
from .codec import Codec
from .constants import (
    CHAINLINK_PROGRAM_IDS,
    CLUSTER_MAINNET,
    MAX_INPUT_TOKENS,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .pda import (
    derivation_path,
    find_app_data_address,
    find_burner_address,
    find_minter_address,
    find_root_signer_address,
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
from .token import get_associated_token_address

logger = logging.getLogger(__name__)


class InstructionBuilder:
    """
    Builds CUSD factory instructions for one program deployment

    Usage:
        builder = InstructionBuilder(Pubkey.from_string(program_id))
        ix = builder.set_app_data(root, limit=24)
    """

    def __init__(
        self,
        program_id: Pubkey,
        chainlink_program_id: Optional[Pubkey] = None,
        codec: Optional[Codec] = None,
        max_input_tokens: int = MAX_INPUT_TOKENS,
        token_program_id: Optional[Pubkey] = None,
    ):
        self.program_id = program_id
        self.chainlink_program_id = chainlink_program_id or Pubkey.from_string(
            CHAINLINK_PROGRAM_IDS[CLUSTER_MAINNET]
        )
        self.codec = codec or Codec()
        self.max_input_tokens = max_input_tokens
        self.token_program_id = token_program_id or Pubkey.from_string(TOKEN_PROGRAM_ID)
        self.system_program_id = Pubkey.from_string(SYSTEM_PROGRAM_ID)

    @classmethod
    def from_config(cls, program_config=None) -> "InstructionBuilder":
        """Create a builder for the configured cluster"""
        if program_config is None:
            from ..config import config
            program_config = config.program
        return cls(
            Pubkey.from_string(program_config.program_id),
            chainlink_program_id=Pubkey.from_string(program_config.chainlink_program_id),
            max_input_tokens=program_config.max_input_tokens,
        )

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def find_root_signer_address(self) -> ProgramAddress:
        return find_root_signer_address(self.program_id)

    def find_app_data_address(self) -> ProgramAddress:
        return find_app_data_address(self.program_id)

    def find_minter_address(self, name_or_path: Union[str, bytes]) -> ProgramAddress:
        return find_minter_address(name_or_path, self.program_id)

    def find_burner_address(self, name_or_path: Union[str, bytes]) -> ProgramAddress:
        return find_burner_address(name_or_path, self.program_id)

    def _instruction(
        self,
        accounts: List[AccountMeta],
        request: InstructionRequest,
    ) -> Instruction:
        data = self.codec.encode_instruction(request)
        logger.debug(f"Built {request.NAME}: {len(accounts)} accounts, {len(data)} bytes")
        return Instruction(self.program_id, data, accounts)

    def _check_token_count(self, count: int) -> None:
        if count > self.max_input_tokens:
            raise InvalidArgument.too_many_tokens(count, self.max_input_tokens)

    # ------------------------------------------------------------------
    # Minter
    # ------------------------------------------------------------------

    def create_minter(self, root: Pubkey, name_or_path: Union[str, bytes]) -> Instruction:
        """
        Build create_minter.

        Args:
            root: Program authority, pays for the new account
            name_or_path: Minter name or its raw 8-byte derivation path
        """
        path = derivation_path(name_or_path)
        minter = find_minter_address(path, self.program_id).address
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=True),  # 0: root
            AccountMeta(minter, is_signer=False, is_writable=True),  # 1: minter
            AccountMeta(self.system_program_id, is_signer=False, is_writable=False),  # 2: system program
        ]
        return self._instruction(accounts, CreateMinter(derivation_path=path))

    def set_minter(
        self,
        root: Pubkey,
        minter: Pubkey,
        is_active: bool,
        input_params: Sequence[InputTokenParams],
        fee_percent: int,
        total_minted_limit: int,
        per_period_minted_limit: int,
        min_amount: int = 0,
    ) -> Instruction:
        """
        Build set_minter.

        Args:
            root: Program authority
            minter: Minter account address
            is_active: Whether minting is enabled
            input_params: Accepted input currencies, in basket order
            fee_percent: Fee in basis points
            total_minted_limit: Lifetime mint cap (CUSD base units)
            per_period_minted_limit: Per-period mint cap (CUSD base units)
            min_amount: Smallest accepted mint amount

        Raises:
            InvalidArgument: More currencies than a Minter can hold
        """
        input_params = list(input_params)
        self._check_token_count(len(input_params))
        request = SetMinter.from_params(
            is_active,
            input_params,
            fee_percent,
            total_minted_limit,
            per_period_minted_limit,
            min_amount,
        )
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=False),  # 0: root
            AccountMeta(minter, is_signer=False, is_writable=True),  # 1: minter
        ]
        return self._instruction(accounts, request)

    def mint(
        self,
        user: Pubkey,
        minter: Pubkey,
        cusd_mint: Pubkey,
        user_cusd_token: Pubkey,
        amount: int,
        input_tokens: Sequence[InputTokenPair],
    ) -> Instruction:
        """
        Build mint.

        The per-currency accounts follow the fixed accounts, deduplicated,
        and the payload carries one index per (price feed, user token, pool
        token) role.

        Args:
            user: Minting wallet (signer)
            minter: Minter account address
            cusd_mint: CUSD token mint
            user_cusd_token: Token account receiving the minted CUSD
            amount: CUSD amount in base units
            input_tokens: Resolved accounts for each input currency, in basket order

        Raises:
            InvalidArgument: More currencies than a Minter can hold
        """
        input_tokens = list(input_tokens)
        self._check_token_count(len(input_tokens))

        extra_accounts, indices = assemble_input_accounts(input_tokens)

        app_data = self.find_app_data_address().address
        root_signer = self.find_root_signer_address().address

        accounts = [
            AccountMeta(user, is_signer=True, is_writable=False),  # 0: user
            AccountMeta(app_data, is_signer=False, is_writable=False),  # 1: app data
            AccountMeta(root_signer, is_signer=False, is_writable=False),  # 2: root signer
            AccountMeta(cusd_mint, is_signer=False, is_writable=True),  # 3: cusd mint
            AccountMeta(minter, is_signer=False, is_writable=True),  # 4: minter
            AccountMeta(user_cusd_token, is_signer=False, is_writable=True),  # 5: recipient
            AccountMeta(self.chainlink_program_id, is_signer=False, is_writable=False),  # 6: chainlink
            AccountMeta(self.token_program_id, is_signer=False, is_writable=False),  # 7: token program
        ]
        accounts.extend(extra_accounts)

        request = Mint(amount=amount, extra_instructions=indices)
        return self._instruction(accounts, request)

    # ------------------------------------------------------------------
    # Burner
    # ------------------------------------------------------------------

    def create_burner(self, root: Pubkey, name_or_path: Union[str, bytes]) -> Instruction:
        path = derivation_path(name_or_path)
        burner = find_burner_address(path, self.program_id).address
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=True),  # 0: root
            AccountMeta(burner, is_signer=False, is_writable=True),  # 1: burner
            AccountMeta(self.system_program_id, is_signer=False, is_writable=False),  # 2: system program
        ]
        return self._instruction(accounts, CreateBurner(derivation_path=path))

    def set_burner(
        self,
        root: Pubkey,
        burner: Pubkey,
        is_active: bool,
        output_params: OutputTokenParams,
        fee_percent: int,
        total_burned_limit: int,
        per_period_burned_limit: int,
        min_amount: int = 0,
    ) -> Instruction:
        request = SetBurner.from_params(
            is_active,
            output_params,
            fee_percent,
            total_burned_limit,
            per_period_burned_limit,
            min_amount,
        )
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=False),  # 0: root
            AccountMeta(burner, is_signer=False, is_writable=True),  # 1: burner
        ]
        return self._instruction(accounts, request)

    def burn(
        self,
        user: Pubkey,
        burner: Pubkey,
        cusd_mint: Pubkey,
        user_cusd_token: Pubkey,
        amount: int,
        output_token: OutputTokenPair,
    ) -> Instruction:
        """
        Build burn.

        Args:
            user: Burning wallet (signer)
            burner: Burner account address
            cusd_mint: CUSD token mint
            user_cusd_token: Token account the CUSD is burned from
            amount: CUSD amount in base units
            output_token: Resolved accounts of the output currency
        """
        app_data = self.find_app_data_address().address
        root_signer = self.find_root_signer_address().address
        pool_cusd_token = get_associated_token_address(root_signer, cusd_mint, self.token_program_id)

        accounts = [
            AccountMeta(user, is_signer=True, is_writable=False),  # 0: user
            AccountMeta(app_data, is_signer=False, is_writable=False),  # 1: app data
            AccountMeta(root_signer, is_signer=False, is_writable=False),  # 2: root signer
            AccountMeta(cusd_mint, is_signer=False, is_writable=True),  # 3: cusd mint
            AccountMeta(burner, is_signer=False, is_writable=True),  # 4: burner
            AccountMeta(pool_cusd_token, is_signer=False, is_writable=True),  # 5: pool cusd
            AccountMeta(user_cusd_token, is_signer=False, is_writable=True),  # 6: user cusd
            AccountMeta(self.chainlink_program_id, is_signer=False, is_writable=False),  # 7: chainlink
            AccountMeta(self.token_program_id, is_signer=False, is_writable=False),  # 8: token program
        ]
        # 9..11: price feed, pool token, user token
        accounts.extend(output_token_accounts(output_token))

        return self._instruction(accounts, Burn(amount=amount))

    # ------------------------------------------------------------------
    # Pool administration
    # ------------------------------------------------------------------

    def withdraw_token(
        self,
        root: Pubkey,
        pool_token: Pubkey,
        recipient_token: Pubkey,
        amount: int,
    ) -> Instruction:
        app_data = self.find_app_data_address().address
        root_signer = self.find_root_signer_address().address
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=False),  # 0: root
            AccountMeta(app_data, is_signer=False, is_writable=False),  # 1: app data
            AccountMeta(root_signer, is_signer=False, is_writable=False),  # 2: root signer
            AccountMeta(pool_token, is_signer=False, is_writable=True),  # 3: pool token
            AccountMeta(recipient_token, is_signer=False, is_writable=True),  # 4: recipient token
            AccountMeta(self.token_program_id, is_signer=False, is_writable=False),  # 5: token program
        ]
        return self._instruction(accounts, WithdrawToken(amount=amount))

    def unlock_token_mint(self, root: Pubkey, token_mint: Pubkey) -> Instruction:
        """Hand the mint authority of token_mint back from the root signer to root"""
        app_data = self.find_app_data_address().address
        root_signer = self.find_root_signer_address().address
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=False),  # 0: root
            AccountMeta(app_data, is_signer=False, is_writable=False),  # 1: app data
            AccountMeta(root_signer, is_signer=False, is_writable=False),  # 2: root signer
            AccountMeta(token_mint, is_signer=False, is_writable=True),  # 3: token mint
            AccountMeta(self.token_program_id, is_signer=False, is_writable=False),  # 4: token program
        ]
        return self._instruction(accounts, UnlockTokenMint())

    def create_app_data(self, root: Pubkey) -> Instruction:
        app_data = self.find_app_data_address().address
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=True),  # 0: root
            AccountMeta(app_data, is_signer=False, is_writable=True),  # 1: app data
            AccountMeta(self.system_program_id, is_signer=False, is_writable=False),  # 2: system program
        ]
        return self._instruction(accounts, CreateAppData())

    def set_app_data(self, root: Pubkey, limit: int) -> Instruction:
        """
        Build set_app_data.

        Args:
            root: Program authority
            limit: Mint/burn period length in hours
        """
        app_data = self.find_app_data_address().address
        accounts = [
            AccountMeta(root, is_signer=True, is_writable=False),  # 0: root
            AccountMeta(app_data, is_signer=False, is_writable=True),  # 1: app data
        ]
        return self._instruction(accounts, SetAppData(limit=limit))
