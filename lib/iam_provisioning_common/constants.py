"""
Constants used throughout the IAM provisioning stack.

Centralizes resource names and key formats shared between the
template, the Lambda function and the deployment script.
"""

# =============================================================================
# Metadata Store
# =============================================================================

# Name of the Secrets Manager secret holding the shared temporary password
TEMPORARY_PASSWORD_SECRET_ID = "TemporaryUserPassword"

# JSON key inside the secret string that carries the password
PASSWORD_SECRET_KEY = "password"

# Length of the generated temporary password (punctuation excluded)
TEMPORARY_PASSWORD_LENGTH = 12

# SSM parameter prefix for per-user metadata
USER_EMAIL_PARAMETER_PREFIX = "/users"

# Per-user email parameter, relative to the prefix
USER_EMAIL_PARAMETER_TEMPLATE = "{prefix}/{user_name}/email"


# =============================================================================
# Log Messages
# =============================================================================

SUCCESS_LOG_FORMAT = "User: {user_name}, Email: {email}, Temporary Password: {password}"
ERROR_LOG_FORMAT = "Error processing event: {error}"
