"""Event hook registry backed by a JSON file.

The registry is an explicit object: load it, mutate it in memory, and call
save() to write it back. Loading is tolerant; a hand-edited file with bad
entries loses those entries (with a warning) instead of breaking every
command.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ghp.hooks.types import (
    EVENT_TYPES,
    ON_FAILURE_POLICIES,
    EventHook,
    EventType,
    OnFailure,
)

logger = logging.getLogger(__name__)

DEFAULT_ON_FAILURE: OnFailure = "fail-fast"


class HookRegistryError(Exception):
    """Raised when a registry mutation is invalid."""


def format_validation_error(exc: ValidationError) -> str:
    """Render a pydantic ValidationError as one human-readable line."""
    messages: list[str] = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"])
        msg = error["msg"].removeprefix("Value error, ")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(messages)


def parse_event_hook(data: dict[str, Any]) -> EventHook:
    """Build an EventHook from registry-file or CLI fields.

    Raises:
        HookRegistryError: If any field is invalid
    """
    try:
        return EventHook.model_validate(data)
    except ValidationError as e:
        raise HookRegistryError(f"Invalid hook: {format_validation_error(e)}") from e


def _parse_on_failure(value: object) -> OnFailure | None:
    for policy in ON_FAILURE_POLICIES:
        if value == policy:
            return policy
    return None


def _parse_event(value: object) -> EventType | None:
    for event in EVENT_TYPES:
        if value == event:
            return event
    return None


class EventHookRegistry:
    """In-memory view of the event hooks file.

    Single writer: concurrent processes saving the same file race, and the
    last save wins.
    """

    def __init__(
        self,
        *,
        path: Path | None,
        hooks: list[EventHook] | None = None,
        on_failure: OnFailure | None = None,
        event_settings: dict[EventType, OnFailure] | None = None,
    ) -> None:
        self._path = path
        self._hooks: list[EventHook] = list(hooks or [])
        self._on_failure = on_failure
        self._event_settings: dict[EventType, OnFailure] = dict(event_settings or {})

    @classmethod
    def load(cls, path: Path) -> "EventHookRegistry":
        """Load the registry from path.

        A missing file yields an empty registry. Unparsable JSON yields an
        empty registry and a warning. Invalid and duplicate hook entries are
        dropped with a warning.
        """
        if not path.exists():
            logger.debug("No event hooks file at %s", path)
            return cls(path=path)

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load event hooks from %s: %s", path, e)
            return cls(path=path)

        if not isinstance(raw, dict):
            logger.warning("Ignoring event hooks file %s: top level is not an object", path)
            return cls(path=path)

        on_failure = None
        if "onFailure" in raw:
            on_failure = _parse_on_failure(raw["onFailure"])
            if on_failure is None:
                logger.warning("Ignoring invalid onFailure value %r", raw["onFailure"])

        return cls(
            path=path,
            hooks=_load_hooks(raw.get("hooks")),
            on_failure=on_failure,
            event_settings=_load_event_settings(raw.get("events")),
        )

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def on_failure(self) -> OnFailure | None:
        return self._on_failure

    @property
    def event_settings(self) -> dict[EventType, OnFailure]:
        return dict(self._event_settings)

    def hooks(self) -> list[EventHook]:
        return list(self._hooks)

    def enabled_hooks(self) -> list[EventHook]:
        return [hook for hook in self._hooks if hook.enabled]

    def get(self, name: str) -> EventHook | None:
        for hook in self._hooks:
            if hook.name == name:
                return hook
        return None

    def hooks_for_event(self, event: EventType) -> list[EventHook]:
        """Enabled hooks for event, in registration order."""
        return [hook for hook in self._hooks if hook.enabled and hook.event == event]

    def has_hooks_for_event(self, event: EventType) -> bool:
        return bool(self.hooks_for_event(event))

    def on_failure_for(self, event: EventType, override: OnFailure | None = None) -> OnFailure:
        """Resolve the failure policy for event.

        Precedence: the event's own setting, then override, then the registry
        default, then fail-fast.
        """
        if event in self._event_settings:
            return self._event_settings[event]
        if override is not None:
            return override
        if self._on_failure is not None:
            return self._on_failure
        return DEFAULT_ON_FAILURE

    def add(self, hook: EventHook) -> EventHook:
        if self.get(hook.name) is not None:
            raise HookRegistryError(f'Hook "{hook.name}" already exists')
        self._hooks.append(hook)
        return hook

    def update(self, name: str, changes: dict[str, Any]) -> EventHook:
        """Apply field changes to the hook called name and re-validate it.

        Raises:
            HookRegistryError: If the hook is missing, the new name is taken,
                or the result is invalid
        """
        index = self._index_of(name)
        if index is None:
            raise HookRegistryError(f'Hook "{name}" not found')

        new_name = changes.get("name", name)
        if new_name != name and self.get(new_name) is not None:
            raise HookRegistryError(f'Hook "{new_name}" already exists')

        merged = {**self._hooks[index].model_dump(), **changes}
        updated = parse_event_hook(merged)
        self._hooks[index] = updated
        return updated

    def remove(self, name: str) -> bool:
        index = self._index_of(name)
        if index is None:
            return False
        del self._hooks[index]
        return True

    def enable(self, name: str) -> EventHook:
        return self.update(name, {"enabled": True})

    def disable(self, name: str) -> EventHook:
        return self.update(name, {"enabled": False})

    def to_json_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self._on_failure is not None:
            data["onFailure"] = self._on_failure
        if self._event_settings:
            data["events"] = {
                event: {"onFailure": policy} for event, policy in self._event_settings.items()
            }
        data["hooks"] = [hook.to_json_dict() for hook in self._hooks]
        return data

    def save(self) -> None:
        """Write the registry back to its file, readable by the owner only."""
        if self._path is None:
            raise HookRegistryError("Registry has no file to save to")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(self.to_json_dict(), indent=2)
        self._path.write_text(content + "\n", encoding="utf-8")
        try:
            self._path.chmod(0o600)
        except OSError as e:
            logger.debug("Could not restrict permissions on %s: %s", self._path, e)

    def _index_of(self, name: str) -> int | None:
        for index, hook in enumerate(self._hooks):
            if hook.name == name:
                return index
        return None


def _load_hooks(raw_hooks: object) -> list[EventHook]:
    if raw_hooks is None:
        return []
    if not isinstance(raw_hooks, list):
        logger.warning("Ignoring event hooks: 'hooks' is not a list")
        return []

    hooks: list[EventHook] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_hooks):
        if not isinstance(entry, dict):
            logger.warning("Dropping event hook #%d: not an object", index)
            continue
        try:
            hook = EventHook.model_validate(entry)
        except ValidationError as e:
            logger.warning(
                "Dropping invalid event hook %r: %s",
                entry.get("name", f"#{index}"),
                format_validation_error(e),
            )
            continue
        if hook.name in seen:
            logger.warning("Dropping duplicate event hook %r", hook.name)
            continue
        seen.add(hook.name)
        hooks.append(hook)
    return hooks


def _load_event_settings(raw_events: object) -> dict[EventType, OnFailure]:
    if not isinstance(raw_events, dict):
        return {}

    settings: dict[EventType, OnFailure] = {}
    for key, value in raw_events.items():
        event = _parse_event(key)
        if event is None:
            logger.warning("Ignoring settings for unknown event %r", key)
            continue
        if not isinstance(value, dict) or "onFailure" not in value:
            continue
        policy = _parse_on_failure(value["onFailure"])
        if policy is None:
            logger.warning("Ignoring invalid onFailure %r for %s", value["onFailure"], event)
            continue
        settings[event] = policy
    return settings
