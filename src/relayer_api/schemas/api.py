"""
Request and response bodies that carry the unions.

These are the outer shapes the transport exchanges: task envelopes handed
out to chain integrations and event batches published back.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Union
from uuid import UUID

from pydantic import Field

from relayer_api.common.exceptions import RelayerApiError
from relayer_api.common.logging import get_logger, log_exception
from relayer_api.config import RelayerApiConfig
from relayer_api.schemas.common import WireModel
from relayer_api.schemas.events import Event, EventVariant
from relayer_api.schemas.task_items import TaskItem
from relayer_api.schemas.tasks import TaskType

logger = get_logger(__name__)


class TaskEnvelope(WireModel):
    """A task item addressed to one chain.

    Attributes:
        id: Task item ID, unique across the relayer
        chain: Chain the task is for
        timestamp: When the task was created
        task: The task item union
    """

    id: UUID
    chain: str = Field(..., min_length=1)
    timestamp: datetime
    task: TaskItem

    @property
    def task_item_id(self) -> UUID:
        return self.id

    @property
    def task_type(self) -> TaskType:
        return self.task.task_type()


class GetTasksResult(WireModel):
    tasks: List[TaskEnvelope] = Field(default_factory=list)


class PublishEventsRequest(WireModel):
    """A batch of events published by a chain integration."""

    events: List[Event] = Field(default_factory=list)

    @classmethod
    def from_events(
        cls,
        events: Iterable[Union[Event, EventVariant]],
        config: Optional[RelayerApiConfig] = None,
    ) -> "PublishEventsRequest":
        """
        Build a request from event containers or bare event variants.

        When config.validate_events is set (the default), every event is
        checked with Event.validate() before the request is returned.

        Raises:
            CostValidationError: If an event breaks its cost rules
            EncodeError: If a variant cannot be serialized
        """
        config = config or RelayerApiConfig()
        containers = [
            e if isinstance(e, Event) else Event.from_variant(e) for e in events
        ]
        request = cls(events=containers)
        if config.validate_events:
            request.validate_events()
        return request

    def validate_events(self) -> None:
        """Validate every event, reporting the index of the first failure."""
        for index, event in enumerate(self.events):
            try:
                event.validate()
            except RelayerApiError as e:
                e.context["index"] = index
                log_exception(
                    logger,
                    e,
                    "Event rejected from publish request",
                    level=logging.WARNING,
                    include_traceback=False,
                )
                raise


class PublishEventResultStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    ERROR = "ERROR"


class PublishEventResult(WireModel):
    index: int = Field(..., ge=0)
    status: PublishEventResultStatus
    error: Optional[str] = None
    retriable: Optional[bool] = None


class PublishEventsResult(WireModel):
    results: List[PublishEventResult] = Field(default_factory=list)

    def failed(self) -> List[PublishEventResult]:
        return [r for r in self.results if r.status != PublishEventResultStatus.ACCEPTED]
