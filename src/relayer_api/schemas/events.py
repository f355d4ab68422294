"""
Event message schemas.

Events are notifications a chain integration publishes back to the relayer.
On the wire an Event is a flat JSON object: the ``type`` tag next to the
variant's own fields.

Cost-bearing events (GAS_REFUNDED, MESSAGE_APPROVED, MESSAGE_EXECUTED,
MESSAGE_EXECUTED/V2, CANNOT_EXECUTE_TASK) expose get_fees(), and
Event.validate() enforces their cost rules without decoding the full
variant.
"""

import logging
from enum import Enum
from typing import ClassVar, FrozenSet, Literal, Optional, Protocol

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from relayer_api.common.exceptions import (
    CostValidationError,
    DecodeError,
    MissingCostError,
)
from relayer_api.common.logging import get_logger, log_exception
from relayer_api.schemas.common import (
    CallEventMetadata,
    CannotExecuteMessageEventV2Metadata,
    CannotExecuteMessageReason,
    CannotRouteMessageReason,
    CrossChainID,
    EventMetadata,
    InterchainTokenDefinition,
    Message,
    MessageApprovedEventMetadata,
    MessageExecutedEventMetadata,
    MessageExecutionStatus,
    SignersRotatedEventMetadata,
    Token,
    TokenManagerType,
    WireBytes,
    WireModel,
)
from relayer_api.schemas.cost import Cost, Fees, create_fees
from relayer_api.schemas.union import UnionContainer, VariantRegistry

logger = get_logger(__name__)


class EventType(str, Enum):
    GAS_CREDIT = "GAS_CREDIT"
    GAS_REFUNDED = "GAS_REFUNDED"
    CALL = "CALL"
    MESSAGE_APPROVED = "MESSAGE_APPROVED"
    MESSAGE_EXECUTED = "MESSAGE_EXECUTED"
    MESSAGE_EXECUTED_V2 = "MESSAGE_EXECUTED/V2"
    CANNOT_EXECUTE_MESSAGE = "CANNOT_EXECUTE_MESSAGE"
    CANNOT_EXECUTE_MESSAGE_V2 = "CANNOT_EXECUTE_MESSAGE/V2"
    CANNOT_ROUTE_MESSAGE = "CANNOT_ROUTE_MESSAGE"
    CANNOT_EXECUTE_TASK = "CANNOT_EXECUTE_TASK"
    SIGNERS_ROTATED = "SIGNERS_ROTATED"
    ITS_INTERCHAIN_TOKEN_DEPLOYMENT_STARTED = "ITS/INTERCHAIN_TOKEN_DEPLOYMENT_STARTED"
    ITS_INTERCHAIN_TRANSFER = "ITS/INTERCHAIN_TRANSFER"
    ITS_LINK_TOKEN_STARTED = "ITS/LINK_TOKEN_STARTED"
    ITS_TOKEN_METADATA_REGISTERED = "ITS/TOKEN_METADATA_REGISTERED"
    APP_INTERCHAIN_TRANSFER_SENT = "APP/INTERCHAIN_TRANSFER_SENT"
    APP_INTERCHAIN_TRANSFER_RECEIVED = "APP/INTERCHAIN_TRANSFER_RECEIVED"


class EventVariant(WireModel):
    """Common base of every event variant."""

    event_id: str = Field(..., alias="eventID")
    meta: Optional[EventMetadata] = None


class CostBearingEvent(EventVariant):
    """Base for events that carry a Cost."""

    cost: Optional[Cost] = None

    def get_fees(self) -> Fees:
        """Return the cost as Fees.

        A Token cost becomes one Fee with this event's ID and txID.
        """
        return create_fees(self)


# =============================================================================
# Gas events
# =============================================================================


class GasCreditEvent(EventVariant):
    type: Literal["GAS_CREDIT"] = "GAS_CREDIT"
    message_id: str = Field(..., alias="messageID")
    refund_address: str
    payment: Token


class GasRefundedEvent(CostBearingEvent):
    type: Literal["GAS_REFUNDED"] = "GAS_REFUNDED"
    message_id: str = Field(..., alias="messageID")
    recipient_address: str
    refunded_amount: Token
    cost: Cost


# =============================================================================
# Message lifecycle events
# =============================================================================


class CallEvent(EventVariant):
    type: Literal["CALL"] = "CALL"
    meta: Optional[CallEventMetadata] = None
    message: Message
    destination_chain: str
    payload: WireBytes
    with_token: Optional[Token] = None


class MessageApprovedEvent(CostBearingEvent):
    type: Literal["MESSAGE_APPROVED"] = "MESSAGE_APPROVED"
    meta: Optional[MessageApprovedEventMetadata] = None
    message: Message
    cost: Cost


class MessageExecutedEvent(CostBearingEvent):
    type: Literal["MESSAGE_EXECUTED"] = "MESSAGE_EXECUTED"
    meta: Optional[MessageExecutedEventMetadata] = None
    message_id: str = Field(..., alias="messageID")
    source_chain: str
    status: MessageExecutionStatus
    cost: Cost

    @property
    def cross_chain_id(self) -> CrossChainID:
        return CrossChainID(source_chain=self.source_chain, message_id=self.message_id)


class MessageExecutedEventV2(CostBearingEvent):
    """Successful execution, identified by a CrossChainID."""

    type: Literal["MESSAGE_EXECUTED/V2"] = "MESSAGE_EXECUTED/V2"
    meta: Optional[MessageExecutedEventMetadata] = None
    cross_chain_id: CrossChainID = Field(..., alias="crossChainID")
    cost: Cost

    @property
    def status(self) -> MessageExecutionStatus:
        return MessageExecutionStatus.SUCCESSFUL


class GeneralizedMessageExecutedEvent(Protocol):
    """Read access shared by MessageExecutedEvent and MessageExecutedEventV2."""

    @property
    def event_id(self) -> str: ...

    @property
    def cross_chain_id(self) -> CrossChainID: ...

    @property
    def status(self) -> MessageExecutionStatus: ...

    @property
    def meta(self) -> Optional[MessageExecutedEventMetadata]: ...

    def get_fees(self) -> Fees: ...


class CannotExecuteMessageEvent(EventVariant):
    type: Literal["CANNOT_EXECUTE_MESSAGE"] = "CANNOT_EXECUTE_MESSAGE"
    task_item_id: str = Field(..., alias="taskItemID")
    reason: CannotExecuteMessageReason
    details: str


class CannotExecuteMessageEventV2(EventVariant):
    type: Literal["CANNOT_EXECUTE_MESSAGE/V2"] = "CANNOT_EXECUTE_MESSAGE/V2"
    meta: Optional[CannotExecuteMessageEventV2Metadata] = None
    message_id: str = Field(..., alias="messageID")
    source_chain: str
    reason: CannotExecuteMessageReason
    details: str


class CannotRouteMessageEvent(EventVariant):
    type: Literal["CANNOT_ROUTE_MESSAGE"] = "CANNOT_ROUTE_MESSAGE"
    message_id: str = Field(..., alias="messageID")
    source_chain: str
    reason: CannotRouteMessageReason
    details: str


class CannotExecuteTaskEvent(CostBearingEvent):
    """A task could not be executed. Cost is optional here."""

    type: Literal["CANNOT_EXECUTE_TASK"] = "CANNOT_EXECUTE_TASK"
    task_item_id: str = Field(..., alias="taskItemID")
    reason: str
    details: str


class SignersRotatedEvent(EventVariant):
    type: Literal["SIGNERS_ROTATED"] = "SIGNERS_ROTATED"
    meta: Optional[SignersRotatedEventMetadata] = None
    message_id: str = Field(..., alias="messageID")
    source_chain: str


# =============================================================================
# Interchain token service and app events
# =============================================================================


class ITSInterchainTokenDeploymentStartedEvent(EventVariant):
    type: Literal["ITS/INTERCHAIN_TOKEN_DEPLOYMENT_STARTED"] = (
        "ITS/INTERCHAIN_TOKEN_DEPLOYMENT_STARTED"
    )
    message_id: str = Field(..., alias="messageID")
    destination_chain: str
    token: InterchainTokenDefinition


class ITSInterchainTransferEvent(EventVariant):
    type: Literal["ITS/INTERCHAIN_TRANSFER"] = "ITS/INTERCHAIN_TRANSFER"
    message_id: str = Field(..., alias="messageID")
    destination_chain: str
    token_spent: Token
    source_address: str
    destination_address: str
    data_hash: WireBytes


class ITSLinkTokenStartedEvent(EventVariant):
    type: Literal["ITS/LINK_TOKEN_STARTED"] = "ITS/LINK_TOKEN_STARTED"
    message_id: str = Field(..., alias="messageID")
    destination_chain: str
    token_id: str = Field(..., alias="tokenID")
    source_token_address: str
    destination_token_address: str
    token_manager_type: TokenManagerType


class ITSTokenMetadataRegisteredEvent(EventVariant):
    type: Literal["ITS/TOKEN_METADATA_REGISTERED"] = "ITS/TOKEN_METADATA_REGISTERED"
    message_id: str = Field(..., alias="messageID")
    address: str
    decimals: int = Field(..., ge=0)


class AppInterchainTransferSentEvent(EventVariant):
    type: Literal["APP/INTERCHAIN_TRANSFER_SENT"] = "APP/INTERCHAIN_TRANSFER_SENT"
    message_id: str = Field(..., alias="messageID")
    destination_chain: str
    sender: str
    recipient: str
    token: Token


class AppInterchainTransferReceivedEvent(EventVariant):
    type: Literal["APP/INTERCHAIN_TRANSFER_RECEIVED"] = (
        "APP/INTERCHAIN_TRANSFER_RECEIVED"
    )
    message_id: str = Field(..., alias="messageID")
    source_chain: str
    sender: str
    recipient: str
    token: Token


EVENT_VARIANTS: VariantRegistry[EventVariant] = VariantRegistry(
    "Event",
    GasCreditEvent,
    GasRefundedEvent,
    CallEvent,
    MessageApprovedEvent,
    MessageExecutedEvent,
    MessageExecutedEventV2,
    CannotExecuteMessageEvent,
    CannotExecuteMessageEventV2,
    CannotRouteMessageEvent,
    CannotExecuteTaskEvent,
    SignersRotatedEvent,
    ITSInterchainTokenDeploymentStartedEvent,
    ITSInterchainTransferEvent,
    ITSLinkTokenStartedEvent,
    ITSTokenMetadataRegisteredEvent,
    AppInterchainTransferSentEvent,
    AppInterchainTransferReceivedEvent,
)

# Cost rules by event type
OPTIONAL_COST_EVENT_TYPES: FrozenSet[str] = frozenset(
    {EventType.CANNOT_EXECUTE_TASK.value}
)
MANDATORY_COST_EVENT_TYPES: FrozenSet[str] = frozenset(
    {
        EventType.GAS_REFUNDED.value,
        EventType.MESSAGE_APPROVED.value,
        EventType.MESSAGE_EXECUTED.value,
        EventType.MESSAGE_EXECUTED_V2.value,
    }
)


class _EventIDProbe(BaseModel):
    event_id: str = Field("", alias="eventID")


class _CostProbe(BaseModel):
    cost: Optional[Cost] = None


class Event(UnionContainer[EventVariant]):
    """A flat event union: ``{"type": ..., <variant fields>}``."""

    __slots__ = ()

    registry: ClassVar[VariantRegistry] = EVENT_VARIANTS

    def event_id(self) -> str:
        """Read ``eventID`` without decoding the full variant.

        Raises:
            EmptyUnionError: If no variant was ever set
            DecodeError: If the payload has a non-string eventID
        """
        self.discriminator()
        try:
            return _EventIDProbe.model_validate_json(self._raw).event_id
        except PydanticValidationError as e:
            raise DecodeError("invalid eventID field", cause=e) from e

    def validate(self) -> None:
        """
        Enforce the cost rules of the held event type.

        CANNOT_EXECUTE_TASK may omit cost. GAS_REFUNDED, MESSAGE_APPROVED,
        MESSAGE_EXECUTED and MESSAGE_EXECUTED/V2 require it. A present cost
        must pass Cost.validate(). Other event types are not checked.

        Raises:
            EmptyUnionError: If no variant was ever set
            MissingCostError: If a required cost is absent
            CostValidationError: If the cost is malformed
            DecodeError: If the payload cannot be read
        """
        event_type = self.discriminator()
        if event_type in MANDATORY_COST_EVENT_TYPES:
            mandatory = True
        elif event_type in OPTIONAL_COST_EVENT_TYPES:
            mandatory = False
        else:
            return

        try:
            self._validate_cost(mandatory)
        except CostValidationError as e:
            log_exception(
                logger,
                e,
                "Event failed validation",
                level=logging.DEBUG,
                include_traceback=False,
                event_type=event_type,
            )
            raise

    def _validate_cost(self, mandatory: bool) -> None:
        try:
            cost = _CostProbe.model_validate_json(self._raw).cost
        except PydanticValidationError as e:
            raise DecodeError("invalid cost field", cause=e) from e

        if cost is None:
            if mandatory:
                raise MissingCostError("cost is required")
            return

        cost.validate()
