"""Common Library

Shared utilities for the IAM provisioning stack's user creation notifier.
"""

from iam_provisioning_common import constants
from iam_provisioning_common.config import NotifierSettings
from iam_provisioning_common.metadata_store import MetadataStore
from iam_provisioning_common.notifier import handle, resolve_credentials

__all__ = [
    "MetadataStore",
    "NotifierSettings",
    "constants",
    "handle",
    "resolve_credentials",
]
