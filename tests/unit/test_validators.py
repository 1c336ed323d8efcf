"""Unit tests for input validators and log redaction."""

import logging
import pytest

from interlinx_bootstrap.utils.logging import TokenRedactingFormatter, setup_logging
from interlinx_bootstrap.utils.validators import (
    validate_repository,
    validate_timeout,
    validate_token,
    validate_version_tag,
)


class TestValidateRepository:
    """Tests for validate_repository."""

    @pytest.mark.parametrize("slug", [
        "interlinx-io/interlinx-controller",
        "interlinx-io/downloads",
        "octo/repo.name_1",
    ])
    def test_valid(self, slug):
        assert validate_repository(slug) == (True, None)

    @pytest.mark.parametrize("slug", ["", "   ", "owner", "owner/", "/repo", "a/b/c", "-owner/repo"])
    def test_invalid(self, slug):
        is_valid, error = validate_repository(slug)
        assert is_valid is False
        assert error

    @pytest.mark.parametrize("slug", [5, None, ["owner/repo"]])
    def test_not_a_string(self, slug):
        assert validate_repository(slug)[0] is False

class TestValidateVersionTag:
    """Tests for validate_version_tag."""

    @pytest.mark.parametrize("tag", ["v1.4.0", "1.0", "v2.0.0-rc.1", "v1.0.0+build.5"])
    def test_valid(self, tag):
        assert validate_version_tag(tag) == (True, None)

    @pytest.mark.parametrize("tag", ["", " ", "v1/../../etc", "..", "v1 0", "-v1", "a/b"])
    def test_invalid(self, tag):
        is_valid, error = validate_version_tag(tag)
        assert is_valid is False
        assert error

    def test_too_long(self):
        is_valid, error = validate_version_tag("v" * 200)
        assert is_valid is False
        assert "too long" in error

    @pytest.mark.parametrize("tag", [5, None, 1.4])
    def test_not_a_string(self, tag):
        assert validate_version_tag(tag)[0] is False


class TestValidateToken:
    """Tests for validate_token."""

    def test_valid(self):
        assert validate_token("ghp_abc123") == (True, None)

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing(self, token):
        assert validate_token(token) == (False, "GitHub token is required")

    def test_whitespace_inside(self):
        is_valid, _ = validate_token("ghp_abc 123")
        assert is_valid is False


class TestValidateTimeout:
    """Tests for validate_timeout."""

    @pytest.mark.parametrize("timeout", [5, 30, "60", 600])
    def test_valid(self, timeout):
        assert validate_timeout(timeout)[0] is True

    @pytest.mark.parametrize("timeout", [0, 4, 601, "soon", None])
    def test_invalid(self, timeout):
        assert validate_timeout(timeout)[0] is False


class TestTokenRedaction:
    """Tests for the redacting log formatter."""

    def _format(self, message: str) -> str:
        formatter = TokenRedactingFormatter(fmt="%(message)s")
        record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
        return formatter.format(record)

    @pytest.mark.parametrize("token", [
        "ghp_" + "a1B2c3D4e5" * 4,
        "gho_" + "Z" * 36,
        "github_pat_" + "11ABCDEFG0" * 5,
    ])
    def test_github_tokens(self, token):
        output = self._format(f"using {token} now")
        assert token not in output
        assert "[REDACTED]" in output

    def test_authorization_header(self):
        output = self._format("headers: {'Authorization': 'token sekrit-value'}")
        assert "sekrit-value" not in output

    def test_key_value_token(self):
        output = self._format("token=sekrit-value")
        assert "sekrit-value" not in output

    def test_plain_messages_untouched(self):
        message = "Invalid GitHub token for interlinx-io/interlinx-controller."
        assert self._format(message) == message


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "bootstrap.log"
        logger = setup_logging(level=logging.INFO, log_file=log_file, console=False)

        logger.getChild("test").debug("token: ghp_" + "x" * 36)
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "[REDACTED]" in content
        assert "ghp_" not in content

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_replaces_handlers(self):
        logger = setup_logging(console=True)
        logger = setup_logging(console=True)
        assert len(logger.handlers) == 1
        logger.handlers.clear()
