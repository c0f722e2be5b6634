"""Dashboard hook registry backed by a JSON file ``{"hooks": [...]}``."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ghp.dashboard.types import DashboardHook
from ghp.hooks.registry import HookRegistryError, format_validation_error

logger = logging.getLogger(__name__)


def parse_dashboard_hook(data: dict[str, Any]) -> DashboardHook:
    """Build a DashboardHook, raising HookRegistryError if it is invalid."""
    try:
        return DashboardHook.model_validate(data)
    except ValidationError as e:
        raise HookRegistryError(f"Invalid hook: {format_validation_error(e)}") from e


class DashboardHookRegistry:
    """In-memory view of the dashboard hooks file. Callers own save()."""

    def __init__(self, *, path: Path | None, hooks: list[DashboardHook] | None = None) -> None:
        self._path = path
        self._hooks: list[DashboardHook] = list(hooks or [])

    @classmethod
    def load(cls, path: Path) -> "DashboardHookRegistry":
        """Load from path; unreadable files and invalid entries are dropped with a warning."""
        if not path.exists():
            return cls(path=path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load dashboard hooks from %s: %s", path, e)
            return cls(path=path)

        raw_hooks = raw.get("hooks") if isinstance(raw, dict) else None
        if not isinstance(raw_hooks, list):
            return cls(path=path)

        hooks: list[DashboardHook] = []
        seen: set[str] = set()
        for index, entry in enumerate(raw_hooks):
            if not isinstance(entry, dict):
                logger.warning("Dropping dashboard hook #%d: not an object", index)
                continue
            try:
                hook = DashboardHook.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    "Dropping invalid dashboard hook %r: %s",
                    entry.get("name", f"#{index}"),
                    format_validation_error(e),
                )
                continue
            if hook.name in seen:
                logger.warning("Dropping duplicate dashboard hook %r", hook.name)
                continue
            seen.add(hook.name)
            hooks.append(hook)
        return cls(path=path, hooks=hooks)

    @property
    def path(self) -> Path | None:
        return self._path

    def hooks(self) -> list[DashboardHook]:
        return list(self._hooks)

    def enabled_hooks(self) -> list[DashboardHook]:
        return [hook for hook in self._hooks if hook.enabled]

    def get(self, name: str) -> DashboardHook | None:
        for hook in self._hooks:
            if hook.name == name:
                return hook
        return None

    def hooks_by_category(self) -> dict[str, list[DashboardHook]]:
        """Group all hooks by category, in first-seen category order."""
        grouped: dict[str, list[DashboardHook]] = {}
        for hook in self._hooks:
            grouped.setdefault(hook.category, []).append(hook)
        return grouped

    def add(self, hook: DashboardHook) -> DashboardHook:
        if self.get(hook.name) is not None:
            raise HookRegistryError(f'Hook "{hook.name}" already exists')
        self._hooks.append(hook)
        return hook

    def update(self, name: str, changes: dict[str, Any]) -> DashboardHook:
        for index, hook in enumerate(self._hooks):
            if hook.name != name:
                continue
            new_name = changes.get("name", name)
            if new_name != name and self.get(new_name) is not None:
                raise HookRegistryError(f'Hook "{new_name}" already exists')
            updated = parse_dashboard_hook({**hook.model_dump(), **changes})
            self._hooks[index] = updated
            return updated
        raise HookRegistryError(f'Hook "{name}" not found')

    def remove(self, name: str) -> bool:
        remaining = [hook for hook in self._hooks if hook.name != name]
        removed = len(remaining) != len(self._hooks)
        self._hooks = remaining
        return removed

    def enable(self, name: str) -> DashboardHook:
        return self.update(name, {"enabled": True})

    def disable(self, name: str) -> DashboardHook:
        return self.update(name, {"enabled": False})

    def save(self) -> None:
        if self._path is None:
            raise HookRegistryError("Registry has no file to save to")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps({"hooks": [hook.to_json_dict() for hook in self._hooks]}, indent=2)
        self._path.write_text(content + "\n", encoding="utf-8")
