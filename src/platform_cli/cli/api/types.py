"""Data types for Platform API contracts."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Stored authentication credentials."""

    token: str
    token_type: str = "Bearer"
    expires_at: str | None = None


class Account(BaseModel):
    """The authenticated user."""

    id: str
    username: str = ""
    display_name: str = ""
    mail: str = ""


class Project(BaseModel):
    """A hosted project."""

    id: str
    title: str = ""
    region: str = ""
    status: str = ""
    created_at: str = ""
    updated_at: str = ""
    default_branch: str = "main"

    model_config = ConfigDict(extra="ignore")


class Environment(BaseModel):
    """A project environment (one per deployed branch)."""

    id: str
    name: str = ""
    title: str = ""
    status: str = ""
    parent: str | None = None
    machine_name: str = ""
    created_at: str = ""
    updated_at: str = ""

    model_config = ConfigDict(extra="ignore")


class Integration(BaseModel):
    """A configured connection between a project and an external service.

    Properties beyond ``id`` and ``type`` vary with the integration type and
    are kept as extra fields.
    """

    id: str
    type: str
    links: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="_links")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def properties(self) -> dict[str, Any]:
        """Return the type-specific properties, in API order."""
        return dict(self.model_extra or {})

    def get_link(self, rel: str) -> str | None:
        link = self.links.get(rel)
        if not link:
            return None
        return link.get("href")


class CacheEntry(BaseModel):
    """A cached API response body."""

    url: str
    stored_at: float
    data: Any
