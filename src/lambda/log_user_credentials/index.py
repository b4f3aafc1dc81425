"""Log User Credentials Lambda

Triggered by the IAMUserCreationRule EventBridge rule whenever CloudTrail
records an IAM CreateUser call. Looks up the new user's email in SSM
Parameter Store and the shared temporary password in Secrets Manager,
then writes one log line to CloudWatch Logs.

Environment variables:
    TEMPORARY_PASSWORD_SECRET_ID: Secret holding {"password": ...}
    USER_EMAIL_PARAMETER_PREFIX: Prefix of the /users/{userName}/email parameters
    LOG_LEVEL: Logging level (default: INFO)
"""

import logging
import os

from iam_provisioning_common.metadata_store import MetadataStore
from iam_provisioning_common.notifier import handle

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))


def lambda_handler(event, context):
    """
    Log the email and temporary password of a newly created IAM user.

    Never raises: EventBridge does not act on the result, and a bad event
    must not block the ones after it.
    """
    try:
        handle(event, MetadataStore(), logger)
    except Exception as e:
        logger.error(f"Error processing event: {str(e)}")
