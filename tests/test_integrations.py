"""Tests for the integration form and display helpers."""

import json

import pytest

from platform_cli.cli.api.types import Integration
from platform_cli.cli.forms import InvalidValueError, MissingValueError
from platform_cli.cli.integrations import (
    format_integration,
    get_form,
    integration_values,
    is_base64,
    is_numeric,
    is_repository,
    normalize_repository,
)


class TestIntegrationForm:
    """Tests for resolving integration input."""

    def test_github(self):
        """A GitHub integration gets its repository path and boolean defaults."""
        result = get_form().resolve(
            {
                "type": "github",
                "token": "abc123DEF456",
                "repository": "https://github.com/user/repo",
            }
        )
        assert result == {
            "type": "github",
            "token": "abc123DEF456",
            "repository": "user/repo",
            "build_pull_requests": True,
            "fetch_branches": True,
        }

    def test_github_boolean_options(self):
        """Boolean options accept falsy tokens."""
        result = get_form().resolve(
            {
                "type": "github",
                "token": "abc123",
                "repository": "user/repo",
                "build_pull_requests": "no",
            }
        )
        assert result["build_pull_requests"] is False

    def test_webhook(self):
        """A webhook gets array defaults and ignores GitHub-only fields."""
        result = get_form().resolve(
            {
                "type": "webhook",
                "url": "https://example.com/hook",
                "repository": "user/repo",
                "states": "pending, complete",
            }
        )
        assert result == {
            "type": "webhook",
            "url": "https://example.com/hook",
            "events": ["*"],
            "states": ["pending", "complete"],
            "environments": ["*"],
        }

    def test_hipchat(self):
        """A HipChat integration requires a numeric room."""
        result = get_form().resolve({"type": "hipchat", "token": "abc", "room": "123"})
        assert result["room"] == "123"
        assert "environments" not in result

        with pytest.raises(InvalidValueError) as exc_info:
            get_form().resolve({"type": "hipchat", "token": "abc", "room": "lobby"})
        assert exc_info.value.key == "room"

    def test_type_required(self):
        """The type must always be given."""
        with pytest.raises(MissingValueError) as exc_info:
            get_form().resolve({})
        assert exc_info.value.key == "type"

    def test_unknown_type(self):
        """Only known integration types are accepted."""
        with pytest.raises(InvalidValueError):
            get_form().resolve({"type": "slack"})

    def test_invalid_repository(self):
        """Repositories must have exactly one slash."""
        with pytest.raises(InvalidValueError) as exc_info:
            get_form().resolve(
                {"type": "github", "token": "abc", "repository": "user/repo/extra"}
            )
        assert exc_info.value.key == "repository"

    def test_invalid_token(self):
        """Tokens outside the base64 alphabet are rejected."""
        with pytest.raises(InvalidValueError) as exc_info:
            get_form().resolve(
                {"type": "github", "token": "not a token!", "repository": "u/r"}
            )
        assert exc_info.value.key == "token"

    def test_webhook_requires_url(self):
        """The webhook URL is required."""
        with pytest.raises(MissingValueError) as exc_info:
            get_form().resolve({"type": "webhook"})
        assert exc_info.value.key == "url"

    def test_option_names(self):
        """Command-line options use dashes."""
        form = get_form()
        assert form.get_field("build_pull_requests").option_name == "build-pull-requests"


class TestRepositoryHelpers:
    """Tests for repository normalization and validation."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("https://github.com/user/repo", "user/repo"),
            ("http://github.com/user/repo.git", "user/repo"),
            ("user/repo", "user/repo"),
            ("/user/repo", "user/repo"),
        ],
    )
    def test_normalize(self, value, expected):
        """URLs are reduced to their path."""
        assert normalize_repository(value) == expected

    def test_full_url_only_valid_after_normalizing(self):
        """The raw URL fails validation; its normalized form passes."""
        url = "https://github.com/user/repo"
        assert not is_repository(url)
        assert is_repository(normalize_repository(url))

    @pytest.mark.parametrize("value", ["repo", "user/repo/x", "user/", ""])
    def test_invalid(self, value):
        """Anything other than owner/name fails."""
        assert not is_repository(value)

    def test_is_base64(self):
        """Tokens are checked against the base64 alphabet."""
        assert is_base64("dGVzdA==")
        assert is_base64("abc+/123")
        assert not is_base64("abc-123")
        assert not is_base64("")


class TestFormatIntegration:
    """Tests for the property projection."""

    def test_known_and_unknown_properties(self):
        """Known keys use field names, unknown keys are capitalized."""
        integration = Integration.model_validate(
            {
                "id": "int1",
                "type": "webhook",
                "url": "https://example.com/hook",
                "events": ["*"],
                "shared_key": "secret",
                "_links": {"self": {"href": "https://api/int1"}},
            }
        )
        info = format_integration(integration)
        assert list(info) == ["ID", "Type", "URL", "Events to report", "Shared_key"]
        assert info["ID"] == "int1"
        assert info["Events to report"] == json.dumps(["*"])
        assert info["Shared_key"] == "secret"

    def test_hook_url(self):
        """The #hook link is shown as Hook URL."""
        integration = Integration.model_validate(
            {
                "id": "int2",
                "type": "github",
                "repository": "user/repo",
                "build_pull_requests": True,
                "_links": {"#hook": {"href": "https://api/hooks/int2"}},
            }
        )
        info = format_integration(integration)
        assert info["Repository"] == "user/repo"
        assert info["Build pull requests"] == "true"
        assert info["Hook URL"] == "https://api/hooks/int2"

    def test_integration_values(self):
        """Current values include the type and every property."""
        integration = Integration.model_validate(
            {"id": "int3", "type": "hipchat", "room": "42"}
        )
        assert integration_values(integration) == {"type": "hipchat", "room": "42"}


class TestRoomId:
    """Tests for HipChat room ID validation."""

    @pytest.mark.parametrize("value", ["42", "007", " 123 "])
    def test_digits_accepted(self, value):
        """Room IDs are whole numbers."""
        assert is_numeric(value)

    @pytest.mark.parametrize("value", ["nan", "inf", "1e3", "-1", "1.5", "", "²"])
    def test_other_numbers_rejected(self, value):
        """Float syntax, signs and non-ASCII digits are not room IDs."""
        assert not is_numeric(value)

    def test_form_rejects_float_syntax(self):
        """The form refuses a room written in exponent notation."""
        with pytest.raises(InvalidValueError) as exc_info:
            get_form().resolve({"type": "hipchat", "token": "abc", "room": "1e3"})
        assert exc_info.value.key == "room"
