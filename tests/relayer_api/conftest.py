"""
Shared fixtures for relayer_api tests.

Provides one sample instance of every task, task item and event variant.
"""

from datetime import datetime, timezone
from typing import List

import pytest

from relayer_api.schemas.common import (
    CannotExecuteMessageReason,
    CannotRouteMessageReason,
    CrossChainID,
    DestinationChainTaskMetadata,
    EventMetadata,
    InterchainTokenDefinition,
    Message,
    MessageExecutionStatus,
    Token,
    TokenManagerType,
    WasmEvent,
    WasmEventAttribute,
)
from relayer_api.schemas.cost import Cost, Fee
from relayer_api.schemas.events import (
    AppInterchainTransferReceivedEvent,
    AppInterchainTransferSentEvent,
    CallEvent,
    CannotExecuteMessageEvent,
    CannotExecuteMessageEventV2,
    CannotExecuteTaskEvent,
    CannotRouteMessageEvent,
    EventVariant,
    GasCreditEvent,
    GasRefundedEvent,
    ITSInterchainTokenDeploymentStartedEvent,
    ITSInterchainTransferEvent,
    ITSLinkTokenStartedEvent,
    ITSTokenMetadataRegisteredEvent,
    MessageApprovedEvent,
    MessageExecutedEvent,
    MessageExecutedEventV2,
    SignersRotatedEvent,
)
from relayer_api.schemas.task_items import (
    ConstructProofTaskItem,
    ExecuteTaskItem,
    GatewayTransactionTaskItem,
    ReactToExpiredSigningSessionTaskItem,
    ReactToRetriablePollTaskItem,
    ReactToWasmEventTaskItem,
    RefundTaskItem,
    TaskItemVariant,
    VerifyTaskItem,
)
from relayer_api.schemas.tasks import (
    ConstructProofTask,
    ExecuteTask,
    GatewayTransactionTask,
    ReactToExpiredSigningSessionTask,
    ReactToRetriablePollTask,
    ReactToWasmEventTask,
    RefundTask,
    TaskVariant,
    VerifyTask,
)


@pytest.fixture
def message() -> Message:
    return Message(
        message_id="0xabc-1",
        source_chain="ethereum",
        source_address="0x123",
        destination_address="0x456",
        payload_hash=b"hash",
    )


@pytest.fixture
def token_cost() -> Cost:
    return Cost.from_token(Token(amount="123"))


@pytest.fixture
def fees_cost() -> Cost:
    return Cost.from_fees(
        [
            Fee(id="fee1", token=Token(amount="123")),
            Fee(id="fee2", token=Token(amount="456", token_id="uaxl")),
        ]
    )


@pytest.fixture
def duplicate_fees_cost() -> Cost:
    return Cost.from_fees(
        [
            Fee(id="same_fee", token=Token(amount="123")),
            Fee(id="same_fee", token=Token(amount="456")),
        ]
    )


@pytest.fixture
def all_tasks(message) -> List[TaskVariant]:
    """One instance of every task variant."""
    return [
        ConstructProofTask(message=message, payload=b"payload"),
        ExecuteTask(
            message=message,
            payload=b"payload",
            available_gas_balance=Token(amount="1000"),
        ),
        GatewayTransactionTask(execute_data=b"execute data"),
        ReactToExpiredSigningSessionTask(
            session_id=7,
            broadcast_id="broadcast-1",
            invoked_contract_address="axelar1contract",
            request_payload=b'{"sign":{}}',
        ),
        ReactToWasmEventTask(
            event=WasmEvent(
                type="wasm-messages_poll_started",
                attributes=[WasmEventAttribute(key="poll_id", value="3")],
            ),
            height=120,
        ),
        RefundTask(
            message=message,
            refund_recipient_address="0x789",
            remaining_gas_balance=Token(amount="50"),
        ),
        VerifyTask(message=message, payload=b"payload", destination_chain="avalanche"),
        ReactToRetriablePollTask(
            poll_id=3,
            broadcast_id="broadcast-2",
            invoked_contract_address="axelar1voting",
            request_payload=b'{"vote":{}}',
            quorum_reached_events=[{"status": "succeeded_on_chain"}],
        ),
    ]


@pytest.fixture
def all_task_items(all_tasks) -> List[TaskItemVariant]:
    """One instance of every task item variant, in all_tasks order."""
    item_types = [
        ConstructProofTaskItem,
        ExecuteTaskItem,
        GatewayTransactionTaskItem,
        ReactToExpiredSigningSessionTaskItem,
        ReactToWasmEventTaskItem,
        RefundTaskItem,
        VerifyTaskItem,
        ReactToRetriablePollTaskItem,
    ]
    meta = DestinationChainTaskMetadata(
        scoped_messages=[CrossChainID(source_chain="ethereum", message_id="0xabc-1")]
    )
    return [
        item_type(task=task, meta=meta)
        for item_type, task in zip(item_types, all_tasks)
    ]


@pytest.fixture
def all_events(message, token_cost, fees_cost) -> List[EventVariant]:
    """One instance of every event variant."""
    meta = EventMetadata(
        tx_id="0xtx",
        timestamp=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        finalized=True,
    )
    return [
        GasCreditEvent(
            event_id="e-gas-credit",
            meta=meta,
            message_id="0xabc-1",
            refund_address="0x999",
            payment=Token(amount="1000"),
        ),
        GasRefundedEvent(
            event_id="e-gas-refunded",
            message_id="0xabc-1",
            recipient_address="0x999",
            refunded_amount=Token(amount="10"),
            cost=token_cost,
        ),
        CallEvent(
            event_id="e-call",
            message=message,
            destination_chain="avalanche",
            payload=b"payload",
        ),
        MessageApprovedEvent(event_id="e-approved", message=message, cost=fees_cost),
        MessageExecutedEvent(
            event_id="e-executed",
            message_id="0xabc-1",
            source_chain="ethereum",
            status=MessageExecutionStatus.REVERTED,
            cost=token_cost,
        ),
        MessageExecutedEventV2(
            event_id="e-executed-v2",
            cross_chain_id=CrossChainID(source_chain="ethereum", message_id="0xabc-1"),
            cost=token_cost,
        ),
        CannotExecuteMessageEvent(
            event_id="e-cannot-execute",
            task_item_id="task-1",
            reason=CannotExecuteMessageReason.INSUFFICIENT_GAS,
            details="not enough gas",
        ),
        CannotExecuteMessageEventV2(
            event_id="e-cannot-execute-v2",
            message_id="0xabc-1",
            source_chain="ethereum",
            reason=CannotExecuteMessageReason.ERROR,
            details="reverted",
        ),
        CannotRouteMessageEvent(
            event_id="e-cannot-route",
            message_id="0xabc-1",
            source_chain="ethereum",
            reason=CannotRouteMessageReason.CUSTOM,
            details="unsupported destination",
        ),
        CannotExecuteTaskEvent(
            event_id="e-cannot-execute-task",
            task_item_id="task-2",
            reason="ERROR",
            details="rpc unavailable",
        ),
        SignersRotatedEvent(
            event_id="e-rotated",
            message_id="0xabc-2",
            source_chain="ethereum",
        ),
        ITSInterchainTokenDeploymentStartedEvent(
            event_id="e-its-deploy",
            message_id="0xabc-3",
            destination_chain="avalanche",
            token=InterchainTokenDefinition(
                id="0xtoken", name="Token", symbol="TKN", decimals=18
            ),
        ),
        ITSInterchainTransferEvent(
            event_id="e-its-transfer",
            message_id="0xabc-4",
            destination_chain="avalanche",
            token_spent=Token(amount="5", token_id="0xtoken"),
            source_address="0x123",
            destination_address="0x456",
            data_hash=b"\x00" * 32,
        ),
        ITSLinkTokenStartedEvent(
            event_id="e-its-link",
            message_id="0xabc-5",
            destination_chain="avalanche",
            token_id="0xtoken",
            source_token_address="0xsrc",
            destination_token_address="0xdst",
            token_manager_type=TokenManagerType.LOCK_UNLOCK,
        ),
        ITSTokenMetadataRegisteredEvent(
            event_id="e-its-metadata",
            message_id="0xabc-6",
            address="0xtoken",
            decimals=6,
        ),
        AppInterchainTransferSentEvent(
            event_id="e-app-sent",
            message_id="0xabc-7",
            destination_chain="avalanche",
            sender="0x123",
            recipient="0x456",
            token=Token(amount="1"),
        ),
        AppInterchainTransferReceivedEvent(
            event_id="e-app-received",
            message_id="0xabc-8",
            source_chain="ethereum",
            sender="0x123",
            recipient="0x456",
            token=Token(amount="1"),
        ),
    ]
