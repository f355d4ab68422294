"""
Task message schemas.

Tasks are work units the relayer sends to a chain integration. On the wire
a Task is a flat JSON object: the ``type`` tag next to the variant's own
fields.

Schemas:
    ConstructProofTask, ExecuteTask, GatewayTransactionTask,
    ReactToExpiredSigningSessionTask, ReactToWasmEventTask, RefundTask,
    VerifyTask, ReactToRetriablePollTask

Container:
    Task - holds exactly one of the above
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Optional

from pydantic import Field

from relayer_api.schemas.common import Message, Token, WasmEvent, WireBytes, WireModel
from relayer_api.schemas.union import UnionContainer, VariantRegistry


class TaskType(str, Enum):
    CONSTRUCT_PROOF = "CONSTRUCT_PROOF"
    EXECUTE = "EXECUTE"
    GATEWAY_TRANSACTION = "GATEWAY_TX"
    REACT_TO_EXPIRED_SIGNING_SESSION = "REACT_TO_EXPIRED_SIGNING_SESSION"
    REACT_TO_WASM_EVENT = "REACT_TO_WASM_EVENT"
    REFUND = "REFUND"
    VERIFY = "VERIFY"
    REACT_TO_RETRIABLE_POLL = "REACT_TO_RETRIABLE_POLL"


class TaskVariant(WireModel):
    """Common base of every task variant."""


class ConstructProofTask(TaskVariant):
    """Build a proof for an approved message on the destination chain."""

    type: Literal["CONSTRUCT_PROOF"] = "CONSTRUCT_PROOF"
    message: Message
    payload: WireBytes


class ExecuteTask(TaskVariant):
    """Execute an approved message on the destination chain.

    Example:
        >>> task = ExecuteTask(
        ...     message=Message(
        ...         message_id="0xabc-1",
        ...         source_chain="ethereum",
        ...         source_address="0x123",
        ...         destination_address="0x456",
        ...         payload_hash=b"hash",
        ...     ),
        ...     payload=b"payload",
        ...     available_gas_balance=Token(amount="1000"),
        ... )
    """

    type: Literal["EXECUTE"] = "EXECUTE"
    message: Message
    payload: WireBytes
    available_gas_balance: Token


class GatewayTransactionTask(TaskVariant):
    """Submit pre-built execute data to the chain's gateway."""

    type: Literal["GATEWAY_TX"] = "GATEWAY_TX"
    execute_data: WireBytes


class ReactToExpiredSigningSessionTask(TaskVariant):
    type: Literal["REACT_TO_EXPIRED_SIGNING_SESSION"] = (
        "REACT_TO_EXPIRED_SIGNING_SESSION"
    )
    session_id: int = Field(..., alias="sessionID", ge=0)
    broadcast_id: str = Field(..., alias="broadcastID")
    invoked_contract_address: str
    request_payload: WireBytes


class ReactToWasmEventTask(TaskVariant):
    type: Literal["REACT_TO_WASM_EVENT"] = "REACT_TO_WASM_EVENT"
    event: WasmEvent
    height: int = Field(..., ge=0)


class RefundTask(TaskVariant):
    """Refund unused gas to the recipient of a message."""

    type: Literal["REFUND"] = "REFUND"
    message: Message
    refund_recipient_address: str
    remaining_gas_balance: Token


class VerifyTask(TaskVariant):
    type: Literal["VERIFY"] = "VERIFY"
    message: Message
    payload: WireBytes
    destination_chain: str


class ReactToRetriablePollTask(TaskVariant):
    type: Literal["REACT_TO_RETRIABLE_POLL"] = "REACT_TO_RETRIABLE_POLL"
    poll_id: int = Field(..., alias="pollID", ge=0)
    broadcast_id: str = Field(..., alias="broadcastID")
    invoked_contract_address: str
    request_payload: WireBytes
    quorum_reached_events: Optional[List[Dict[str, Any]]] = None


TASK_VARIANTS: VariantRegistry[TaskVariant] = VariantRegistry(
    "Task",
    ConstructProofTask,
    ExecuteTask,
    GatewayTransactionTask,
    ReactToExpiredSigningSessionTask,
    ReactToWasmEventTask,
    RefundTask,
    VerifyTask,
    ReactToRetriablePollTask,
)


class Task(UnionContainer[TaskVariant]):
    """A flat task union: ``{"type": ..., <variant fields>}``.

    Example:
        >>> task = Task.from_variant(GatewayTransactionTask(execute_data=b"data"))
        >>> task.discriminator()
        'GATEWAY_TX'
        >>> task.as_variant(GatewayTransactionTask).execute_data
        b'data'
    """

    __slots__ = ()

    registry: ClassVar[VariantRegistry] = TASK_VARIANTS
