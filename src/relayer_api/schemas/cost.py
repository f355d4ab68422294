"""
Cost of handling a message: a single Token or an itemized list of Fees.

Cost has no wrapper key on the wire. A Token is a bare JSON object, Fees is
a bare JSON array, and readers try both shapes.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from relayer_api.common.exceptions import (
    CostValidationError,
    EncodeError,
    ShapeMismatchError,
)
from relayer_api.common.logging import get_logger, log_with_context
from relayer_api.schemas.common import EventMetadata, Token, WireModel
from relayer_api.schemas.union import RawJSON, dumps_compact, encode_variant

logger = get_logger(__name__)


class FeeMetadata(WireModel):
    tx_id: Optional[str] = Field(default=None, alias="txID")


class Fee(WireModel):
    """One itemized charge. IDs are unique within a Fees list."""

    id: str
    token: Token
    description: Optional[str] = None
    meta: Optional[FeeMetadata] = None


Fees = List[Fee]

_FEES_ADAPTER = TypeAdapter(Fees)


class Cost(RawJSON):
    """Either a Token or Fees, stored as raw JSON.

    Constructors do not validate; call validate() before trusting the value.
    """

    __slots__ = ()

    @classmethod
    def from_token(cls, token: Token) -> "Cost":
        """Build a Token-shaped cost.

        Raises:
            EncodeError: If the token cannot be serialized
        """
        return cls(dumps_compact(encode_variant(token)))

    @classmethod
    def from_fees(cls, fees: Sequence[Fee]) -> "Cost":
        """Build a Fees-shaped cost.

        Raises:
            EncodeError: If any fee cannot be serialized
        """
        return cls(dumps_compact([encode_variant(fee) for fee in fees]))

    def as_token(self) -> Token:
        """Decode as a Token.

        Raises:
            ShapeMismatchError: If the stored JSON is not a Token object
        """
        try:
            return Token.from_wire_json(self._raw)
        except PydanticValidationError as e:
            raise ShapeMismatchError("cost is not a Token", cause=e) from e

    def as_fees(self) -> Fees:
        """Decode as Fees.

        Raises:
            ShapeMismatchError: If the stored JSON is not an array of Fee
        """
        try:
            return _FEES_ADAPTER.validate_json(
                self._raw, by_alias=True, by_name=False
            )
        except PydanticValidationError as e:
            raise ShapeMismatchError("cost is not Fees", cause=e) from e

    def validate(self) -> None:
        """Check that the cost is a Token, or Fees with unique IDs.

        Raises:
            CostValidationError: If neither shape decodes or a fee ID repeats
        """
        try:
            self.as_token()
            return
        except ShapeMismatchError as e:
            token_error = e

        try:
            fees = self.as_fees()
        except ShapeMismatchError as e:
            raise CostValidationError(
                "cost is neither Fees nor Token",
                cause=e,
                context={"token_error": str(token_error.cause)},
            ) from e

        seen = set()
        for fee in fees:
            if fee.id in seen:
                raise CostValidationError(
                    f"duplicate fee ID: {fee.id}", context={"fee_id": fee.id}
                )
            seen.add(fee.id)


def cost_from_token(token: Token) -> Cost:
    """Build a Token-shaped cost from a well-formed token.

    A Token always serializes, so failure here is a defect, not bad input.
    """
    try:
        return Cost.from_token(token)
    except EncodeError as e:
        raise RuntimeError(f"failed to create cost from token: {e}") from e


class EventWithCost(Protocol):
    """What create_fees needs from an event."""

    event_id: str
    cost: Optional[Cost]
    meta: Optional[EventMetadata]


def create_fees(event: EventWithCost) -> Fees:
    """
    Normalize an event's cost into a Fees list.

    A Token becomes a single Fee whose ID is the event ID and whose
    meta.txID is the event's meta.txID, if any. Fees are returned unchanged.
    A missing cost gives an empty list.

    Raises:
        ShapeMismatchError: If the cost is neither a Token nor Fees
    """
    cost = event.cost
    if cost is None:
        return []

    try:
        token: Optional[Token] = cost.as_token()
    except ShapeMismatchError:
        token = None

    if token is not None:
        fee = Fee(id=event.event_id, token=token)
        tx_id = event.meta.tx_id if event.meta is not None else None
        if tx_id is not None:
            fee.meta = FeeMetadata(tx_id=tx_id)
        return [fee]

    try:
        fees = cost.as_fees()
    except ShapeMismatchError as e:
        raise ShapeMismatchError(
            "failed to get fees: cost is neither Token nor Fees",
            cause=e,
            context={"event_id": event.event_id},
        ) from e

    log_with_context(
        logger,
        logging.DEBUG,
        "Itemized fees read from cost",
        event_id=event.event_id,
        fee_count=len(fees),
    )
    return fees
