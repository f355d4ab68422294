"""Tests for publish request and result bodies."""

import json
import logging

import pytest
from pydantic import ValidationError

from relayer_api.common.exceptions import CostValidationError, MissingCostError
from relayer_api.config import RelayerApiConfig
from relayer_api.schemas.api import (
    PublishEventResult,
    PublishEventResultStatus,
    PublishEventsRequest,
    PublishEventsResult,
)
from relayer_api.schemas.events import Event


class TestPublishEventsRequest:
    """Test building and validating event batches."""

    def test_from_variants(self, all_events):
        request = PublishEventsRequest.from_events(all_events)

        assert len(request.events) == len(all_events)
        assert all(isinstance(e, Event) for e in request.events)
        assert [e.event_id() for e in request.events] == [
            v.event_id for v in all_events
        ]

    def test_containers_pass_through(self, all_events):
        container = Event.from_variant(all_events[0])

        request = PublishEventsRequest.from_events([container])

        assert request.events[0] is container

    def test_invalid_event_reports_index(self, all_events, caplog):
        bad = Event.from_json('{"type":"MESSAGE_APPROVED","eventID":"e-bad"}')
        events = [all_events[0], bad]

        with caplog.at_level(logging.WARNING, logger="relayer_api"):
            with pytest.raises(MissingCostError) as exc_info:
                PublishEventsRequest.from_events(events)

        assert exc_info.value.context["index"] == 1
        assert "Event rejected from publish request" in caplog.text
        assert caplog.records[-1].error_category == "validation"

    def test_validation_can_be_disabled(self):
        bad = Event.from_json('{"type":"MESSAGE_APPROVED","cost":"value"}')

        request = PublishEventsRequest.from_events(
            [bad], config=RelayerApiConfig(validate_events=False)
        )

        assert request.events == [bad]
        with pytest.raises(CostValidationError):
            request.validate_events()

    def test_wire_form(self, all_events):
        request = PublishEventsRequest.from_events(all_events[:2])

        wire = json.loads(request.to_wire_json())

        assert [e["type"] for e in wire["events"]] == ["GAS_CREDIT", "GAS_REFUNDED"]
        assert wire["events"][1]["cost"] == {"amount": "123"}

    def test_decode_from_wire(self):
        request = PublishEventsRequest.model_validate_json(
            '{"events":[{"type":"CALL","eventID":"e-1"},{"type":"GAS_CREDIT"}]}'
        )

        assert [e.discriminator() for e in request.events] == ["CALL", "GAS_CREDIT"]

    def test_decode_rejects_non_object_event(self):
        with pytest.raises(ValidationError):
            PublishEventsRequest.model_validate_json('{"events":["CALL"]}')


class TestPublishEventsResult:
    def test_failed(self):
        result = PublishEventsResult.model_validate_json(
            json.dumps(
                {
                    "results": [
                        {"index": 0, "status": "ACCEPTED"},
                        {
                            "index": 1,
                            "status": "ERROR",
                            "error": "duplicate event",
                            "retriable": False,
                        },
                    ]
                }
            )
        )

        failed = result.failed()

        assert [r.index for r in failed] == [1]
        assert failed[0].status == PublishEventResultStatus.ERROR
        assert failed[0].retriable is False

    def test_accepted_omits_error(self):
        result = PublishEventResult(index=0, status=PublishEventResultStatus.ACCEPTED)

        assert result.to_wire() == {"index": 0, "status": "ACCEPTED"}

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            PublishEventResult(index=-1, status="ACCEPTED")
