"""
Parsing for IAM user creation events.

EventBridge delivers CloudTrail-backed events shaped like:

    {
        "source": "aws.iam",
        "detail-type": "AWS API Call via CloudTrail",
        "detail": {
            "eventSource": "iam.amazonaws.com",
            "eventName": "CreateUser",
            "requestParameters": {"userName": "s3-user"}
        }
    }
"""

import json
from typing import Any

from iam_provisioning_common.exceptions import MalformedEventError
from iam_provisioning_common.models import CreationEvent

USER_NAME_PATH = ("detail", "requestParameters", "userName")


def _load_event(event: Any) -> dict:
    if isinstance(event, (str, bytes)):
        try:
            event = json.loads(event)
        except ValueError as e:
            raise MalformedEventError(f"Event is not valid JSON: {e}") from e

    if not isinstance(event, dict):
        raise MalformedEventError(f"Event must be an object, got {type(event).__name__}")

    return event


def extract_user_name(event: Any) -> str:
    """
    Read detail.requestParameters.userName from an event.

    Args:
        event: Event payload as a dict or JSON string

    Returns:
        The user name

    Raises:
        MalformedEventError: If the event can't be parsed or the user name
            is missing, not a string, or empty
    """
    node = _load_event(event)

    for key in USER_NAME_PATH:
        if not isinstance(node, dict) or key not in node:
            raise MalformedEventError(f"Event is missing '{'.'.join(USER_NAME_PATH)}'")
        node = node[key]

    if not isinstance(node, str) or not node.strip():
        raise MalformedEventError("Event userName must be a non-empty string")

    return node


def parse_creation_event(event: Any) -> CreationEvent:
    """Build a CreationEvent from a raw EventBridge payload."""
    payload = _load_event(event)
    user_name = extract_user_name(payload)

    detail = payload.get("detail") or {}
    return CreationEvent(
        user_name=user_name,
        event_id=payload.get("id"),
        source=payload.get("source"),
        detail_type=payload.get("detail-type"),
        event_name=detail.get("eventName"),
        event_time=payload.get("time"),
    )

