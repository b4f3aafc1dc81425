"""
User creation notifier.

Turns one IAM CreateUser event into one log line:

    User: s3-user, Email: s3-user@example.com, Temporary Password: Ab12Cd34Ef56

or, when anything goes wrong,

    Error processing event: <error>

The notifier is stateless. Each call does its own two lookups and writes
exactly one record; failures never propagate to the caller.
"""

import logging
from typing import Any, Optional

from iam_provisioning_common.events import parse_creation_event
from iam_provisioning_common.exceptions import IdentityNotificationError
from iam_provisioning_common.metadata_store import MetadataStore
from iam_provisioning_common.models import NotificationResult, UserCredentials

logger = logging.getLogger(__name__)


def resolve_credentials(event: Any, store: MetadataStore) -> NotificationResult:
    """
    Resolve the email and temporary password for the user in an event.

    Args:
        event: Raw EventBridge payload (dict or JSON string)
        store: Metadata store to read from

    Returns:
        NotificationResult carrying credentials, or the
        IdentityNotificationError that stopped resolution
    """
    try:
        creation_event = parse_creation_event(event)
        email = store.get_user_email(creation_event.user_name)
        password = store.get_temporary_password()
    except IdentityNotificationError as e:
        return NotificationResult.failure(e)

    return NotificationResult.success(UserCredentials(creation_event.user_name, email, password))


def emit(result: NotificationResult, log: Optional[logging.Logger] = None) -> None:
    """Write the single log record for a result."""
    log = log or logger
    if result.ok:
        log.info(result.to_log_message())
    else:
        log.error(result.to_log_message())


def handle(
    event: Any,
    store: Optional[MetadataStore] = None,
    log: Optional[logging.Logger] = None,
) -> None:
    """
    Process one user creation event.

    Args:
        event: Raw EventBridge payload
        store: Metadata store; built from the environment when omitted
        log: Logger to write the record to (default: this module's logger)
    """
    try:
        result = resolve_credentials(event, store or MetadataStore())
    except Exception as e:
        # Anything outside the lookup taxonomy (bad settings, client bugs)
        result = NotificationResult.failure(e)

    emit(result, log)
