"""Integration form definition and display helpers."""

from __future__ import annotations

import json
import re
from functools import cache
from typing import Any
from urllib.parse import urlparse

from .api.types import Integration
from .forms import ArrayField, BooleanField, Field, Form, OptionsField, UrlField

INTEGRATION_TYPES = ["github", "hipchat", "webhook"]

_BASE64_ALPHABET = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


def is_base64(value: str) -> bool:
    """Check that a token only uses the base64 alphabet."""
    return bool(value) and _BASE64_ALPHABET.match(value) is not None


def is_numeric(value: str) -> bool:
    """Room IDs are plain ASCII digits."""
    value = value.strip()
    return value.isascii() and value.isdigit()


def normalize_repository(value: str) -> str:
    """Reduce a repository URL to its ``owner/name`` path."""
    if re.match(r"^https?://", value):
        value = urlparse(value).path
    value = value.lstrip("/")
    if value.endswith(".git"):
        value = value[: -len(".git")]
    return value


def is_repository(value: str) -> bool:
    """A repository is ``owner/name``: exactly one slash past the first character."""
    return value.count("/", 1) == 1 and not value.endswith("/")


def get_fields() -> dict[str, Field]:
    return {
        "type": OptionsField(
            "Type",
            options=INTEGRATION_TYPES,
            description="The integration type ('github', 'hipchat', or 'webhook')",
            required=True,
        ),
        "token": Field(
            "Token",
            conditions={"type": ["github", "hipchat"]},
            description="GitHub or HipChat: An OAuth token for the integration",
            validator=is_base64,
            required=True,
        ),
        "repository": Field(
            "Repository",
            conditions={"type": ["github"]},
            description=(
                "GitHub: the repository to track "
                "(the URL, e.g. 'https://github.com/user/repo')"
            ),
            validator=is_repository,
            normalizer=normalize_repository,
            required=True,
        ),
        "build_pull_requests": BooleanField(
            "Build pull requests",
            conditions={"type": ["github"]},
            description="GitHub: build pull requests as environments",
        ),
        "fetch_branches": BooleanField(
            "Fetch branches",
            conditions={"type": ["github"]},
            description="GitHub: sync all branches",
        ),
        "room": Field(
            "HipChat room ID",
            conditions={"type": ["hipchat"]},
            description="HipChat: the room ID",
            validator=is_numeric,
            required=True,
        ),
        "url": UrlField(
            "URL",
            conditions={"type": ["webhook"]},
            description="Generic webhook: a URL to receive JSON data",
            required=True,
        ),
        "events": ArrayField(
            "Events to report",
            conditions={"type": ["hipchat", "webhook"]},
            default=["*"],
            description="Events to report, e.g. environment.push",
        ),
        "states": ArrayField(
            "States to report",
            conditions={"type": ["hipchat", "webhook"]},
            default=["complete"],
            description="States to report, e.g. pending, in_progress, complete",
        ),
        "environments": ArrayField(
            "Environments",
            conditions={"type": ["webhook"]},
            default=["*"],
            description="Generic webhook: the environments relevant to the hook",
        ),
    }


@cache
def get_form() -> Form:
    return Form.from_dict(get_fields())


def format_integration(integration: Integration, form: Form | None = None) -> dict[str, str]:
    """Project an integration onto display rows.

    Known properties are labelled with the field name; unknown ones fall
    back to the capitalized property key. Non-string values are JSON encoded.

    Returns:
        Ordered mapping of label to value.
    """
    form = form or get_form()
    info = {"ID": integration.id, "Type": integration.type}
    for prop, value in integration.properties.items():
        if prop in ("id", "type"):
            continue
        field = form.get_field(prop)
        label = field.name if field is not None else prop[:1].upper() + prop[1:]
        info[label] = value if isinstance(value, str) else json.dumps(value)
    hook = integration.get_link("#hook")
    if hook:
        info["Hook URL"] = hook
    return info


def integration_values(integration: Integration) -> dict[str, Any]:
    """Current property values of an integration, keyed like the form."""
    values: dict[str, Any] = {"type": integration.type}
    values.update(integration.properties)
    return values
