"""
Wire schemas for the relayer task/event API.

Pydantic models for every task and event variant, plus the union containers
that carry exactly one variant and its ``type`` tag.

Schemas:
    common.py     - Token, Message, CrossChainID, metadata records, enums
    union.py      - RawJSON, VariantRegistry, UnionContainer
    cost.py       - Cost (Token or Fees), Fee, create_fees
    tasks.py      - Task variants and the flat Task union
    task_items.py - TaskItem variants and the nested TaskItem union
    events.py     - Event variants, the flat Event union, cost validation
    api.py        - TaskEnvelope, GetTasksResult, publish request/result

Design Decisions:
    - The variant set is closed; tags map to classes through static registries
    - Containers keep payload bytes as received, so unknown fields survive
    - Optional fields are omitted on the wire, never sent as null
"""

from relayer_api.schemas.api import (
    GetTasksResult,
    PublishEventResult,
    PublishEventResultStatus,
    PublishEventsRequest,
    PublishEventsResult,
    TaskEnvelope,
)
from relayer_api.schemas.common import (
    CrossChainID,
    DestinationChainTaskMetadata,
    EventMetadata,
    Message,
    MessageExecutionStatus,
    Token,
    TokenManagerType,
)
from relayer_api.schemas.cost import Cost, Fee, FeeMetadata, Fees, cost_from_token, create_fees
from relayer_api.schemas.events import Event, EventType, EventVariant
from relayer_api.schemas.task_items import TaskItem, TaskItemVariant
from relayer_api.schemas.tasks import Task, TaskType, TaskVariant

__all__ = [
    # Containers
    "Task",
    "TaskItem",
    "Event",
    "Cost",
    # Variant bases and tags
    "TaskVariant",
    "TaskItemVariant",
    "EventVariant",
    "TaskType",
    "EventType",
    # Shared records
    "Token",
    "Message",
    "CrossChainID",
    "EventMetadata",
    "DestinationChainTaskMetadata",
    "MessageExecutionStatus",
    "TokenManagerType",
    "Fee",
    "FeeMetadata",
    "Fees",
    "cost_from_token",
    "create_fees",
    # Request/response bodies
    "TaskEnvelope",
    "GetTasksResult",
    "PublishEventsRequest",
    "PublishEventResult",
    "PublishEventResultStatus",
    "PublishEventsResult",
]
