"""
Core data models for the user creation notifier.

These models represent one notification as it flows through the handler:
event -> lookups -> log record
"""

from dataclasses import dataclass

from iam_provisioning_common.constants import ERROR_LOG_FORMAT, SUCCESS_LOG_FORMAT


@dataclass(frozen=True)
class CreationEvent:
    """
    An IAM CreateUser call delivered by EventBridge.

    Attributes:
        user_name: Name of the created user (detail.requestParameters.userName)
        event_id: EventBridge event id, if present
        source: Event source (e.g. "aws.iam")
        detail_type: Event detail-type
        event_name: CloudTrail API name (e.g. "CreateUser")
        event_time: Event timestamp as delivered
    """

    user_name: str
    event_id: str | None = None
    source: str | None = None
    detail_type: str | None = None
    event_name: str | None = None
    event_time: str | None = None


@dataclass(frozen=True)
class UserCredentials:
    """Email and temporary password resolved for one user."""

    user_name: str
    email: str
    password: str

    def to_log_message(self) -> str:
        """Render the success log line with values substituted verbatim."""
        return SUCCESS_LOG_FORMAT.format(
            user_name=self.user_name, email=self.email, password=self.password
        )


@dataclass(frozen=True)
class NotificationResult:
    """
    Outcome of resolving one creation event.

    Exactly one of credentials or error is set.
    """

    credentials: UserCredentials | None = None
    error: Exception | None = None

    def __post_init__(self):
        if (self.credentials is None) == (self.error is None):
            raise ValueError("NotificationResult needs exactly one of credentials or error")

    @classmethod
    def success(cls, credentials: UserCredentials) -> "NotificationResult":
        return cls(credentials=credentials)

    @classmethod
    def failure(cls, error: Exception) -> "NotificationResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_log_message(self) -> str:
        """Render the single log line for this outcome."""
        if self.ok:
            return self.credentials.to_log_message()
        return ERROR_LOG_FORMAT.format(error=str(self.error))
