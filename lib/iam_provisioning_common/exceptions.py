"""
Custom exceptions for the user creation notifier.

Every failure the notifier can hit while resolving credentials is one of
these; the Lambda boundary reports them all with the same log shape.
"""


class IdentityNotificationError(Exception):
    """Base exception for creation notification errors."""


class MalformedEventError(IdentityNotificationError):
    """Event is not parseable or lacks detail.requestParameters.userName."""


class CredentialLookupError(IdentityNotificationError, LookupError):
    """A metadata store lookup failed."""


class EmailNotFoundError(CredentialLookupError):
    """No email parameter exists (or is readable) for the user."""


class TemporaryPasswordError(CredentialLookupError):
    """Temporary password secret is absent, inaccessible or malformed."""
