"""
Task item schemas.

A task item wraps a task with optional metadata. Unlike Task, the variant
payload is nested: ``{"type": ..., "task": {...}, "meta": {...}}``.
"""

import logging
from typing import ClassVar, Literal, Optional, Type, Union

from pydantic import ValidationError as PydanticValidationError

from relayer_api.common.exceptions import DecodeError, UnknownTaskTypeError
from relayer_api.common.logging import get_logger, log_with_context
from relayer_api.schemas.common import DestinationChainTaskMetadata, WireModel
from relayer_api.schemas.tasks import (
    ConstructProofTask,
    ExecuteTask,
    GatewayTransactionTask,
    ReactToExpiredSigningSessionTask,
    ReactToRetriablePollTask,
    ReactToWasmEventTask,
    RefundTask,
    TaskType,
    TaskVariant,
    VerifyTask,
)
from relayer_api.schemas.union import UnionContainer, VariantRegistry

logger = get_logger(__name__)


class TaskItemVariant(WireModel):
    """Common base of every task item variant."""

    meta: Optional[DestinationChainTaskMetadata] = None

    @classmethod
    def task_model(cls) -> Type[TaskVariant]:
        """Return the task class nested under ``task``."""
        return cls.model_fields["task"].annotation  # type: ignore[return-value]


class ConstructProofTaskItem(TaskItemVariant):
    type: Literal["CONSTRUCT_PROOF"] = "CONSTRUCT_PROOF"
    task: ConstructProofTask


class ExecuteTaskItem(TaskItemVariant):
    type: Literal["EXECUTE"] = "EXECUTE"
    task: ExecuteTask


class GatewayTransactionTaskItem(TaskItemVariant):
    type: Literal["GATEWAY_TX"] = "GATEWAY_TX"
    task: GatewayTransactionTask


class ReactToExpiredSigningSessionTaskItem(TaskItemVariant):
    type: Literal["REACT_TO_EXPIRED_SIGNING_SESSION"] = (
        "REACT_TO_EXPIRED_SIGNING_SESSION"
    )
    task: ReactToExpiredSigningSessionTask


class ReactToWasmEventTaskItem(TaskItemVariant):
    type: Literal["REACT_TO_WASM_EVENT"] = "REACT_TO_WASM_EVENT"
    task: ReactToWasmEventTask


class RefundTaskItem(TaskItemVariant):
    type: Literal["REFUND"] = "REFUND"
    task: RefundTask


class VerifyTaskItem(TaskItemVariant):
    type: Literal["VERIFY"] = "VERIFY"
    task: VerifyTask


class ReactToRetriablePollTaskItem(TaskItemVariant):
    type: Literal["REACT_TO_RETRIABLE_POLL"] = "REACT_TO_RETRIABLE_POLL"
    task: ReactToRetriablePollTask


TASK_ITEM_VARIANTS: VariantRegistry[TaskItemVariant] = VariantRegistry(
    "TaskItem",
    ConstructProofTaskItem,
    ExecuteTaskItem,
    GatewayTransactionTaskItem,
    ReactToExpiredSigningSessionTaskItem,
    ReactToWasmEventTaskItem,
    RefundTaskItem,
    VerifyTaskItem,
    ReactToRetriablePollTaskItem,
)


class TaskItem(UnionContainer[TaskItemVariant]):
    """A nested task union: ``{"type": ..., "task": {...}, "meta"?: {...}}``."""

    __slots__ = ()

    registry: ClassVar[VariantRegistry] = TASK_ITEM_VARIANTS

    def task_type(self) -> TaskType:
        """Return the held task type.

        Raises:
            EmptyUnionError: If no variant was ever set
            UnknownTaskTypeError: If the tag is not a registered task type
        """
        tag = self.discriminator()
        if tag not in self.registry:
            raise UnknownTaskTypeError(tag)
        return TaskType(tag)

    def set_task_from_json(
        self, task_type: Union[TaskType, str], task_json: Union[str, bytes]
    ) -> None:
        """
        Decode ``task_json`` as the task named by ``task_type`` and hold it.

        The type comes from outside the payload. Any ``meta`` already held
        by this item is kept.

        Raises:
            UnknownTaskTypeError: If task_type is not a registered task type
            DecodeError: If task_json does not parse as that task
        """
        tag = getattr(task_type, "value", task_type)
        if tag not in self.registry:
            raise UnknownTaskTypeError(str(tag))

        item_model = self.registry.variant_for(tag)
        task_model = item_model.task_model()
        try:
            task = task_model.from_wire_json(task_json)
        except PydanticValidationError as e:
            raise DecodeError(
                f"task JSON does not parse as {task_model.__name__}",
                cause=e,
                context={"task_type": tag},
            ) from e

        self.merge_variant(item_model(task=task))
        log_with_context(
            logger, logging.DEBUG, "Task set from JSON", task_type=tag
        )
