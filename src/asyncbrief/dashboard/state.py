"""Client-local dashboard state.

Nothing here is sent to the API. A DashboardSession owns the state for one
dashboard run: it is opened at start-up (loading persisted prompt overrides and action item
marks) and closed at shutdown (saving both and dropping notifications).
"""

import json
import uuid
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..llm.prompts import PROMPT_NAMES, load_prompt

logger = logging.getLogger("dashboard")

NOTIFICATION_LIMIT = 1
CHECKLIST_FILENAME = "checklist.json"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str = ""
    variant: str = "default"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class Notifier:
    """Bounded notification queue, newest first."""

    def __init__(self, limit: int = NOTIFICATION_LIMIT):
        self.limit = limit
        self.notifications: List[Notification] = []
        self._listeners: List[Callable[[List[Notification]], None]] = []

    def subscribe(self, listener: Callable[[List[Notification]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _emit(self):
        for listener in list(self._listeners):
            listener(list(self.notifications))

    def notify(self, title: str, description: str = "", variant: str = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.notifications = [notification, *self.notifications][: self.limit]
        self._emit()
        return notification

    def dismiss(self, notification_id: Optional[str] = None):
        if notification_id is None:
            self.notifications = []
        else:
            self.notifications = [n for n in self.notifications if n.id != notification_id]
        self._emit()

    def clear(self):
        self.notifications = []
        self._listeners = []


class ActionItemChecklist:
    """Completion marks, keyed by task text so they survive a refresh.

    With a path, marks are stored as a JSON list of task texts so they also
    survive restarts and can be shared between a `watch` and another terminal.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._done = set()

    def load(self):
        self._done = set()
        if self.path is None or not self.path.exists():
            return
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable checklist at {self.path}: {e}")
            return
        if isinstance(data, list):
            self._done = {task for task in data if isinstance(task, str)}

    def save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(sorted(self._done), f, indent=2)

    def toggle(self, task: str) -> bool:
        if task in self._done:
            self._done.discard(task)
            return False
        self._done.add(task)
        return True

    def mark_done(self, task: str):
        self._done.add(task)

    def is_done(self, task: str) -> bool:
        return task in self._done

    def prune(self, tasks: Iterable[str]):
        """Forget marks for tasks that are no longer listed."""
        self._done &= set(tasks)

    def clear(self):
        self._done.clear()


class PromptTemplateStore:
    """
    User-editable prompt texts keyed by analysis name.

    Defaults come from the packaged prompt files; only overrides are written
    to the local JSON file.
    """

    def __init__(self, path: Path, prompts_dir: Optional[Path] = None):
        self.path = Path(path)
        self.prompts_dir = prompts_dir
        self.overrides: Dict[str, str] = {}

    def _check_key(self, key: str):
        if key not in PROMPT_NAMES:
            raise KeyError(f"Unknown prompt key {key!r}; expected one of {', '.join(PROMPT_NAMES)}")

    def load(self):
        if not self.path.exists():
            self.overrides = {}
            return
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable prompt overrides at {self.path}: {e}")
            self.overrides = {}
            return
        self.overrides = {k: v for k, v in data.items() if k in PROMPT_NAMES and isinstance(v, str)}

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self.overrides, f, indent=2)

    def default(self, key: str) -> str:
        self._check_key(key)
        return load_prompt(key, self.prompts_dir).content

    def get(self, key: str) -> str:
        self._check_key(key)
        if key in self.overrides:
            return self.overrides[key]
        return self.default(key)

    def set(self, key: str, text: str):
        self._check_key(key)
        self.overrides[key] = text

    def reset(self, key: str):
        self._check_key(key)
        self.overrides.pop(key, None)

    def is_customized(self, key: str) -> bool:
        return key in self.overrides

    def items(self):
        return [(key, self.get(key)) for key in PROMPT_NAMES]


class DashboardSession:
    """Lifecycle owner for all client-local state."""

    def __init__(self, state_path: Path, prompts_dir: Optional[Path] = None, checklist_path: Optional[Path] = None):
        state_path = Path(state_path)
        self.notifier = Notifier()
        self.checklist = ActionItemChecklist(checklist_path or state_path.with_name(CHECKLIST_FILENAME))
        self.prompts = PromptTemplateStore(state_path, prompts_dir)
        self.is_open = False

    def open(self) -> "DashboardSession":
        self.prompts.load()
        self.checklist.load()
        self.is_open = True
        return self

    def close(self):
        if not self.is_open:
            return
        self.prompts.save()
        self.checklist.save()
        self.notifier.clear()
        self.checklist.clear()
        self.is_open = False

    def __enter__(self) -> "DashboardSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
