"""Unit tests for the LogUserCredentials Lambda."""

import importlib.util
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from iam_provisioning_common.exceptions import EmailNotFoundError
from tests.fixtures.creation_events import (
    CREATE_USER_EVENT,
    SAMPLE_EMAIL,
    SAMPLE_PASSWORD,
    SAMPLE_SUCCESS_MESSAGE,
)


def load_log_user_credentials_module():
    """Load the log_user_credentials index module dynamically."""
    module_path = (
        Path(__file__).parent.parent.parent.parent
        / "src" / "lambda" / "log_user_credentials" / "index.py"
    ).resolve()

    spec = importlib.util.spec_from_file_location("log_user_credentials_index", str(module_path))
    module = importlib.util.module_from_spec(spec)
    sys.modules["log_user_credentials_index"] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def lambda_context():
    """Create mock Lambda context."""
    context = MagicMock()
    context.function_name = "LogUserCredentials"
    context.memory_limit_in_mb = 128
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:LogUserCredentials"
    return context


@pytest.fixture
def module():
    return load_log_user_credentials_module()


@pytest.fixture
def root_records(caplog):
    caplog.set_level(logging.INFO)

    def _records():
        return [r for r in caplog.records if r.name == "root"]

    return _records


@pytest.fixture
def mock_store(module):
    store = MagicMock()
    store.get_user_email.return_value = SAMPLE_EMAIL
    store.get_temporary_password.return_value = SAMPLE_PASSWORD
    with patch.object(module, "MetadataStore", return_value=store):
        yield store


class TestLogUserCredentialsLambda:
    """Tests for lambda_handler()"""

    def test_logs_credentials(self, module, mock_store, root_records, lambda_context):
        result = module.lambda_handler(CREATE_USER_EVENT, lambda_context)

        assert result is None
        logged = root_records()
        assert len(logged) == 1
        assert logged[0].levelno == logging.INFO
        assert logged[0].getMessage() == SAMPLE_SUCCESS_MESSAGE

    def test_missing_user_name(self, module, mock_store, root_records, lambda_context):
        module.lambda_handler({"detail": {"requestParameters": {}}}, lambda_context)

        logged = root_records()
        assert len(logged) == 1
        assert logged[0].levelno == logging.ERROR
        assert logged[0].getMessage().startswith("Error processing event: ")
        mock_store.get_user_email.assert_not_called()

    def test_missing_email(self, module, mock_store, root_records, lambda_context):
        mock_store.get_user_email.side_effect = EmailNotFoundError("No email parameter found at /users/s3-user/email")

        module.lambda_handler(CREATE_USER_EVENT, lambda_context)

        assert [r.getMessage() for r in root_records()] == [
            "Error processing event: No email parameter found at /users/s3-user/email"
        ]

    def test_store_construction_failure_is_absorbed(self, module, root_records, lambda_context):
        with patch.object(module, "MetadataStore", side_effect=ValueError("bad settings")):
            module.lambda_handler(CREATE_USER_EVENT, lambda_context)

        assert [r.getMessage() for r in root_records()] == ["Error processing event: bad settings"]

    def test_handle_failure_is_absorbed(self, module, mock_store, root_records, lambda_context):
        with patch.object(module, "handle", side_effect=RuntimeError("unexpected")):
            module.lambda_handler(CREATE_USER_EVENT, lambda_context)

        assert [r.getMessage() for r in root_records()] == ["Error processing event: unexpected"]

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        root = logging.getLogger()
        original = root.level
        try:
            load_log_user_credentials_module()
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original)
