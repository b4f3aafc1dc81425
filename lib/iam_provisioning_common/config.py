"""Runtime settings for the user creation notifier.

Settings come from the Lambda environment and are read on every call so
that a configuration change takes effect on the next invocation.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from iam_provisioning_common import constants


@dataclass(frozen=True)
class NotifierSettings:
    """
    Names of the external resources the notifier reads.

    Attributes:
        secret_id: Secrets Manager id of the temporary password secret
        email_parameter_prefix: SSM prefix under which user emails live
        region: AWS region for clients, None to use the boto3 default
    """

    secret_id: str = constants.TEMPORARY_PASSWORD_SECRET_ID
    email_parameter_prefix: str = constants.USER_EMAIL_PARAMETER_PREFIX
    region: Optional[str] = None

    def __post_init__(self):
        if not self.secret_id:
            raise ValueError("Temporary password secret id cannot be empty")
        if not self.email_parameter_prefix.startswith('/'):
            raise ValueError(
                f"Email parameter prefix must start with '/': {self.email_parameter_prefix}"
            )
        if not self.email_parameter_prefix.strip('/'):
            raise ValueError(
                f"Email parameter prefix needs a path segment: {self.email_parameter_prefix}"
            )

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "NotifierSettings":
        """
        Build settings from environment variables.

        Environment variables:
            TEMPORARY_PASSWORD_SECRET_ID: Secret id (default: TemporaryUserPassword)
            USER_EMAIL_PARAMETER_PREFIX: Parameter prefix (default: /users)
            AWS_REGION: Region for the AWS clients

        Raises:
            ValueError: If a configured value is invalid
        """
        environ = os.environ if environ is None else environ

        prefix = environ.get('USER_EMAIL_PARAMETER_PREFIX') or constants.USER_EMAIL_PARAMETER_PREFIX
        return cls(
            secret_id=environ.get('TEMPORARY_PASSWORD_SECRET_ID') or constants.TEMPORARY_PASSWORD_SECRET_ID,
            email_parameter_prefix=prefix.rstrip('/') or prefix,
            region=environ.get('AWS_REGION') or None,
        )

    def email_parameter_name(self, user_name: str) -> str:
        """SSM parameter name holding the email for user_name."""
        prefix = self.email_parameter_prefix.rstrip('/')
        return constants.USER_EMAIL_PARAMETER_TEMPLATE.format(prefix=prefix, user_name=user_name)
