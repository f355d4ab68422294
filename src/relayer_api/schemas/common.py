"""
Records shared by tasks and events.

Wire keys are lower camel case. Python attributes are snake_case; keys whose
camel form does not follow to_camel (``messageID``, ``txID``, ...) carry an
explicit alias. Binary fields travel as padded base64 strings.
"""

import base64
import binascii
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PlainValidator
from pydantic.alias_generators import to_camel

W = TypeVar("W", bound="WireModel")


def _decode_base64(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 data: {e}") from e
    raise ValueError(f"expected base64 string, got {type(value).__name__}")


def _encode_base64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


WireBytes = Annotated[
    bytes,
    PlainValidator(_decode_base64),
    PlainSerializer(_encode_base64, return_type=str, when_used="json"),
]


class WireModel(BaseModel):
    """Base for every wire record.

    Python construction accepts wire keys or attribute names. JSON decoding
    through from_wire_json() accepts wire keys only. Output always uses wire
    keys and omits None values.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, validate_by_alias=True, validate_by_name=True
    )

    @classmethod
    def from_wire_json(cls: Type[W], data: Union[str, bytes, bytearray]) -> W:
        """Decode wire JSON. Attribute names are not accepted as keys.

        Raises:
            pydantic.ValidationError: If data does not parse as this model
        """
        return cls.model_validate_json(data, by_alias=True, by_name=False)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict with wire keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_wire_json(self) -> str:
        """Serialize to compact JSON text with wire keys."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class Token(WireModel):
    """An amount of a token. A missing token_id means the chain's native token."""

    amount: str = Field(..., description="Integer amount as a decimal string")
    token_id: Optional[str] = Field(default=None, alias="tokenID")


class Message(WireModel):
    message_id: str = Field(..., alias="messageID")
    source_chain: str
    source_address: str
    destination_address: str
    payload_hash: WireBytes


class CrossChainID(WireModel):
    """Globally unique message identifier: source chain plus message ID."""

    source_chain: str
    message_id: str = Field(..., alias="messageID")


class WasmEventAttribute(WireModel):
    key: str
    value: str


class WasmEvent(WireModel):
    type: str
    attributes: List[WasmEventAttribute] = Field(default_factory=list)


class InterchainTokenDefinition(WireModel):
    id: str
    name: str
    symbol: str
    decimals: int = Field(..., ge=0)


class DestinationChainTaskMetadata(WireModel):
    scoped_messages: Optional[List[CrossChainID]] = None


# =============================================================================
# Event metadata
# =============================================================================


class EventMetadata(WireModel):
    tx_id: Optional[str] = Field(default=None, alias="txID")
    timestamp: Optional[datetime] = None
    from_address: Optional[str] = None
    finalized: Optional[bool] = None


class CallEventMetadata(EventMetadata):
    parent_message_id: Optional[str] = Field(default=None, alias="parentMessageID")
    parent_source_chain: Optional[str] = None
    source_context: Optional[Dict[str, str]] = None


class MessageApprovedEventMetadata(EventMetadata):
    command_id: Optional[str] = Field(default=None, alias="commandID")


class MessageExecutedEventMetadata(EventMetadata):
    command_id: Optional[str] = Field(default=None, alias="commandID")
    child_message_ids: Optional[List[str]] = Field(
        default=None, alias="childMessageIDs"
    )
    revert_reason: Optional[str] = None


class CannotExecuteMessageEventV2Metadata(EventMetadata):
    task_item_id: Optional[str] = Field(default=None, alias="taskItemID")


class SignersRotatedEventMetadata(EventMetadata):
    signers_hash: Optional[WireBytes] = None
    epoch: Optional[int] = None


# =============================================================================
# Enums
# =============================================================================


class MessageExecutionStatus(str, Enum):
    SUCCESSFUL = "SUCCESSFUL"
    REVERTED = "REVERTED"


class CannotExecuteMessageReason(str, Enum):
    INSUFFICIENT_GAS = "INSUFFICIENT_GAS"
    ERROR = "ERROR"


class CannotRouteMessageReason(str, Enum):
    CUSTOM = "CUSTOM"
    ERROR = "ERROR"


class TokenManagerType(str, Enum):
    """Token manager kinds of the interchain token service."""

    NATIVE_INTERCHAIN_TOKEN = "nativeInterchainToken"
    MINT_BURN_FROM = "mintBurnFrom"
    LOCK_UNLOCK = "lockUnlock"
    LOCK_UNLOCK_FEE = "lockUnlockFee"
    MINT_BURN = "mintBurn"

    @classmethod
    def from_solidity_enum(cls, value: int) -> "TokenManagerType":
        """Convert the on-chain uint8 TokenManagerType to the API value.

        Raises:
            ValueError: If value is outside the on-chain enum
        """
        try:
            return _SOLIDITY_TOKEN_MANAGER_TYPES[value]
        except (KeyError, TypeError):
            raise ValueError(f"invalid TokenManagerType: {value}") from None


# Order as declared in ITokenManagerType.sol
_SOLIDITY_TOKEN_MANAGER_TYPES = {
    0: TokenManagerType.NATIVE_INTERCHAIN_TOKEN,
    1: TokenManagerType.MINT_BURN_FROM,
    2: TokenManagerType.LOCK_UNLOCK,
    3: TokenManagerType.LOCK_UNLOCK_FEE,
    4: TokenManagerType.MINT_BURN,
}
