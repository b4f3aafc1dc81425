"""Unit tests for IAM CreateUser event parsing."""

import json

import pytest

from iam_provisioning_common.events import (
    extract_user_name,
    parse_creation_event,
)
from iam_provisioning_common.exceptions import MalformedEventError
from tests.fixtures.creation_events import (
    CREATE_USER_EVENT,
    MALFORMED_EVENTS,
    MINIMAL_EVENT,
    make_event,
)


class TestExtractUserName:
    """Tests for extract_user_name()"""

    def test_full_event(self):
        assert extract_user_name(CREATE_USER_EVENT) == "s3-user"

    def test_minimal_event(self):
        assert extract_user_name(MINIMAL_EVENT) == "s3-user"

    def test_json_string_event(self):
        assert extract_user_name(json.dumps(make_event("ec2-user"))) == "ec2-user"

    def test_json_bytes_event(self):
        assert extract_user_name(json.dumps(MINIMAL_EVENT).encode("utf-8")) == "s3-user"

    def test_user_name_returned_verbatim(self):
        """Names are not normalized or stripped."""
        assert extract_user_name(make_event("Dev.User+1")) == "Dev.User+1"

    @pytest.mark.parametrize("event", MALFORMED_EVENTS)
    def test_malformed_events(self, event):
        with pytest.raises(MalformedEventError):
            extract_user_name(event)

    def test_missing_path_message(self):
        with pytest.raises(MalformedEventError, match="detail.requestParameters.userName"):
            extract_user_name({"detail": {"requestParameters": {}}})

    def test_malformed_event_is_not_lookup_error(self):
        with pytest.raises(MalformedEventError) as exc_info:
            extract_user_name({})
        assert not isinstance(exc_info.value, LookupError)


class TestParseCreationEvent:
    """Tests for parse_creation_event()"""

    def test_envelope_fields(self):
        event = parse_creation_event(CREATE_USER_EVENT)

        assert event.user_name == "s3-user"
        assert event.event_id == CREATE_USER_EVENT["id"]
        assert event.source == "aws.iam"
        assert event.detail_type == "AWS API Call via CloudTrail"
        assert event.event_name == "CreateUser"
        assert event.event_time == "2024-05-14T09:21:07Z"

    def test_minimal_event_leaves_optional_fields_empty(self):
        event = parse_creation_event(MINIMAL_EVENT)

        assert event.user_name == "s3-user"
        assert event.event_id is None
        assert event.source is None
        assert event.event_name is None

    def test_does_not_mutate_input(self):
        event = make_event()
        snapshot = json.dumps(event, sort_keys=True)

        parse_creation_event(event)

        assert json.dumps(event, sort_keys=True) == snapshot

    def test_malformed(self):
        with pytest.raises(MalformedEventError):
            parse_creation_event({"detail": {}})

    def test_json_string_event(self):
        event = parse_creation_event(json.dumps(make_event("ec2-user")))

        assert event.user_name == "ec2-user"
        assert event.event_name == "CreateUser"
