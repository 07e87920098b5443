"""
Instruction and account codec

Maps instruction variants and account records to the program's binary
format: an 8-byte Anchor discriminator followed by Borsh-encoded fields.
"""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple, Type

from ..errors import EncodingFailure, InvalidArgument
from .borsh import Reader
from .constants import anchor_discriminator
from .requests import InstructionRequest, INSTRUCTION_TYPES
from .state import AccountState, ACCOUNT_TYPES

logger = logging.getLogger(__name__)

DISCRIMINATOR_LEN = 8


class Codec:
    """
    Immutable encoder/decoder for one program interface

    Each InstructionBuilder owns its own Codec; there is no shared instance.

    Usage:
        codec = Codec()
        data = codec.encode_instruction(SetAppData(limit=24))
        request = codec.decode_instruction(data)
    """

    __slots__ = (
        "_instructions",
        "_instruction_discriminators",
        "_instruction_tags",
        "_accounts",
        "_account_tags",
    )

    def __init__(
        self,
        instruction_types: Iterable[Type[InstructionRequest]] = INSTRUCTION_TYPES,
        account_types: Iterable[Type[AccountState]] = ACCOUNT_TYPES,
    ):
        instructions = {cls.NAME: cls for cls in instruction_types}
        accounts = {cls.NAME: cls for cls in account_types}
        discriminators = {name: anchor_discriminator("global", name) for name in instructions}
        object.__setattr__(self, "_instructions", MappingProxyType(instructions))
        object.__setattr__(self, "_instruction_discriminators", MappingProxyType(discriminators))
        object.__setattr__(self, "_instruction_tags", MappingProxyType({
            tag: instructions[name] for name, tag in discriminators.items()
        }))
        object.__setattr__(self, "_accounts", MappingProxyType(accounts))
        object.__setattr__(self, "_account_tags", MappingProxyType({
            name: anchor_discriminator("account", name) for name in accounts
        }))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Codec is immutable")

    @property
    def instruction_names(self) -> Tuple[str, ...]:
        return tuple(self._instructions)

    @property
    def account_names(self) -> Tuple[str, ...]:
        return tuple(self._accounts)

    def instruction_discriminator(self, name: str) -> bytes:
        try:
            return self._instruction_discriminators[name]
        except KeyError:
            raise EncodingFailure.unknown_kind(name)

    def account_discriminator(self, kind: str) -> bytes:
        try:
            return self._account_tags[kind]
        except KeyError:
            raise EncodingFailure.unknown_kind(kind)

    def encode_instruction(self, request: InstructionRequest) -> bytes:
        """
        Encode an instruction variant

        Args:
            request: Instruction argument variant

        Returns:
            Discriminator followed by the encoded fields

        Raises:
            EncodingFailure: The variant is not part of this interface
        """
        name = request.NAME
        if self._instructions.get(name) is not type(request):
            raise EncodingFailure.unknown_kind(name or type(request).__name__)
        return self.instruction_discriminator(name) + request.encode_fields()

    def encode(self, name: str, args: Optional[Mapping[str, Any]] = None) -> bytes:
        """Build the variant for an instruction name from an argument mapping and encode it"""
        cls = self._instructions.get(name)
        if cls is None:
            raise EncodingFailure.unknown_kind(name)
        try:
            request = cls(**dict(args or {}))
        except TypeError as e:
            raise InvalidArgument(f"Invalid arguments for {name}: {e}", argument=name)
        return self.encode_instruction(request)

    def decode_instruction(self, data: bytes) -> InstructionRequest:
        """
        Decode instruction data back into its variant

        Raises:
            EncodingFailure: Unknown discriminator, truncated or trailing data
        """
        data = bytes(data)
        if len(data) < DISCRIMINATOR_LEN:
            raise EncodingFailure.decode_failed("instruction", f"only {len(data)} bytes")
        cls = self._instruction_tags.get(data[:DISCRIMINATOR_LEN])
        if cls is None:
            raise EncodingFailure.decode_failed(
                "instruction", f"unknown discriminator {data[:DISCRIMINATOR_LEN].hex()}"
            )
        reader = Reader(data, DISCRIMINATOR_LEN, kind=cls.NAME)
        request = cls.read_fields(reader)
        if reader.remaining:
            raise EncodingFailure.decode_failed(cls.NAME, f"{reader.remaining} trailing bytes")
        return request

    def encode_account(self, record: AccountState) -> bytes:
        """Encode an account record with its discriminator (no space padding)"""
        kind = record.NAME
        if self._accounts.get(kind) is not type(record):
            raise EncodingFailure.unknown_kind(kind or type(record).__name__)
        return self.account_discriminator(kind) + record.encode_fields()

    def decode_account(self, kind: str, data: bytes) -> AccountState:
        """
        Decode raw account data

        Bytes after the last field are allocation padding and are ignored.

        Args:
            kind: Account type name ("AppData", "Minter", "Burner")
            data: Raw account data

        Raises:
            EncodingFailure: Unknown kind, wrong discriminator or truncated data
        """
        cls = self._accounts.get(kind)
        if cls is None:
            raise EncodingFailure.unknown_kind(kind)
        data = bytes(data)
        expected = self._account_tags[kind]
        if data[:DISCRIMINATOR_LEN] != expected:
            raise EncodingFailure.decode_failed(
                kind,
                f"discriminator {data[:DISCRIMINATOR_LEN].hex()} != {expected.hex()}",
            )
        record = cls.read_fields(Reader(data, DISCRIMINATOR_LEN, kind=kind))
        logger.debug(f"Decoded {kind} account ({len(data)} bytes)")
        return record
