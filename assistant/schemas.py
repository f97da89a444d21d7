"""Core data models — shared Pydantic types for the dashboard assistant.

Catalog data arrives from the dashboard in its own camelCase shape
(``fileType``, ``programsUsed``, ``tags``); these models validate and
normalize it. AssistantResult is the only value handed back to the chat UI.

This is a Tier 1 leaf module: it imports only from pydantic and the stdlib.

Usage:
    from assistant.schemas import CatalogSnapshot, CurrentUser, AssistantResult
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _as_list(value: Any) -> Any:
    """Accepts a single string or None wherever the catalog expects a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


# ---------------------------------------------------------------------------
# Catalog snapshot (read-only view supplied by the dashboard)
# ---------------------------------------------------------------------------


class _CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ResourceRecord(_CatalogModel):
    """One catalog resource, reduced to the fields the assistant reads."""

    topics: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("topics", "tags"),
    )
    file_type: str = ""
    programs_used: list[str] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list)

    @field_validator("topics", "programs_used", "authors", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("file_type", mode="before")
    @classmethod
    def _coerce_file_type(cls, value: Any) -> Any:
        return "" if value is None else value


class ProgramRecord(_CatalogModel):
    """A program known to the catalog."""

    name: str


class CurrentUser(_CatalogModel):
    """The signed-in dashboard user, as the UI already displays them."""

    name: str
    role: str = ""


class CatalogSnapshot(_CatalogModel):
    """Ordered resources plus known programs at the time of the question."""

    resources: list[ResourceRecord] = Field(default_factory=list)
    programs: list[ProgramRecord] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Result returned to the chat UI
# ---------------------------------------------------------------------------


class ResultSource(str, Enum):
    """Which path produced the answer."""

    MODEL = "model"
    FALLBACK = "fallback"
    ERROR = "error"


class AssistantResult(BaseModel):
    """One answer for one submitted message.

    ``reason`` is a short machine tag (e.g. "rate_limited", "transport")
    explaining a non-model outcome. It never carries transport or credential
    details.
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(min_length=1)
    source: ResultSource
    cached: bool = False
    reason: str | None = None
