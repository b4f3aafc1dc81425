"""
Read-only access to the user metadata kept outside the Lambda.

- Per-user email addresses live in SSM Parameter Store under
  /users/{userName}/email.
- The shared temporary password lives in Secrets Manager as a JSON
  secret string: {"password": "..."}.

Both lookups are single synchronous calls with no retries beyond the
botocore defaults. Failures are translated into CredentialLookupError
subclasses so callers deal with one taxonomy.
"""

import json
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from iam_provisioning_common.config import NotifierSettings
from iam_provisioning_common.constants import PASSWORD_SECRET_KEY
from iam_provisioning_common.exceptions import EmailNotFoundError, TemporaryPasswordError


def _error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', '')


class MetadataStore:
    """
    Looks up user emails and the temporary password.

    Usage:
        store = MetadataStore()
        email = store.get_user_email('s3-user')
        password = store.get_temporary_password()

    Clients are created on first use unless injected. Nothing is cached
    between lookups; every call goes to the service.
    """

    def __init__(
        self,
        settings: Optional[NotifierSettings] = None,
        ssm_client=None,
        secrets_client=None,
    ):
        self.settings = settings or NotifierSettings.from_environment()
        self._ssm = ssm_client
        self._secrets = secrets_client

    @property
    def ssm(self):
        """Get or create SSM client."""
        if self._ssm is None:
            self._ssm = boto3.client('ssm', region_name=self.settings.region)
        return self._ssm

    @property
    def secrets(self):
        """Get or create Secrets Manager client."""
        if self._secrets is None:
            self._secrets = boto3.client('secretsmanager', region_name=self.settings.region)
        return self._secrets

    def get_user_email(self, user_name: str) -> str:
        """
        Read the email address recorded for a user.

        Args:
            user_name: IAM user name

        Returns:
            Email address stored in the user's parameter

        Raises:
            EmailNotFoundError: If the parameter doesn't exist or can't be read
        """
        name = self.settings.email_parameter_name(user_name)

        try:
            response = self.ssm.get_parameter(Name=name)
        except ClientError as e:
            if _error_code(e) == 'ParameterNotFound':
                raise EmailNotFoundError(f"No email parameter found at {name}") from e
            raise EmailNotFoundError(f"Failed to read email parameter {name}: {e}") from e
        except BotoCoreError as e:
            raise EmailNotFoundError(f"Failed to read email parameter {name}: {e}") from e

        value = response.get('Parameter', {}).get('Value')
        if not isinstance(value, str):
            raise EmailNotFoundError(f"Email parameter {name} has no value")

        return value

    def get_temporary_password(self) -> str:
        """
        Read the shared temporary password.

        Returns:
            Password taken from the secret's JSON "password" field

        Raises:
            TemporaryPasswordError: If the secret is missing, unreadable,
                not JSON, or has no string password field
        """
        secret_id = self.settings.secret_id

        try:
            response = self.secrets.get_secret_value(SecretId=secret_id)
        except ClientError as e:
            if _error_code(e) == 'ResourceNotFoundException':
                raise TemporaryPasswordError(f"Secret {secret_id} not found") from e
            raise TemporaryPasswordError(f"Failed to read secret {secret_id}: {e}") from e
        except BotoCoreError as e:
            raise TemporaryPasswordError(f"Failed to read secret {secret_id}: {e}") from e

        secret_string = response.get('SecretString')
        if secret_string is None:
            raise TemporaryPasswordError(f"Secret {secret_id} has no string value")

        try:
            payload = json.loads(secret_string)
        except ValueError as e:
            raise TemporaryPasswordError(f"Secret {secret_id} is not valid JSON") from e

        password = payload.get(PASSWORD_SECRET_KEY) if isinstance(payload, dict) else None
        if not isinstance(password, str):
            raise TemporaryPasswordError(
                f"Secret {secret_id} has no '{PASSWORD_SECRET_KEY}' field"
            )

        return password
