"""Dashboard hook types.

A dashboard hook is an external command that contributes a section to the
branch dashboard. It is invoked as ``<command> --branch <b> --repo <o/r>``
and must print one JSON object:

    {"success": true, "data": {"title": "...", "items": [...]}}
    {"success": false, "error": "..."}
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ghp.hooks.types import HookResult

DEFAULT_DASHBOARD_HOOK_TIMEOUT_MS = 5_000
DEFAULT_CATEGORY = "other"


class DashboardHook(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    command: str
    display_name: str = Field(default="", alias="displayName")
    category: str = DEFAULT_CATEGORY
    enabled: bool = True
    timeout_ms: int = Field(default=DEFAULT_DASHBOARD_HOOK_TIMEOUT_MS, alias="timeout", gt=0)

    @field_validator("name", "command")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def default_empty_category(cls, v: object) -> object:
        if v is None or v == "":
            return DEFAULT_CATEGORY
        return v

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def to_json_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True)
        data["displayName"] = self.label
        return data


@dataclass(frozen=True)
class HookItem:
    id: str
    type: str
    title: str
    summary: str | None = None
    timestamp: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardSection:
    title: str
    items: tuple[HookItem, ...]


@dataclass(frozen=True)
class DashboardHookResult:
    """A dashboard hook run: the generic result plus the parsed section."""

    hook: DashboardHook
    result: HookResult
    data: DashboardSection | None = None
