from __future__ import annotations

import json
import logging
import pathlib
import threading
from typing import Callable, List, Optional, Protocol

from .types import DrawSettings, VersionedDrawSettings
from .validation import validate_draw_settings

SettingsListener = Callable[[VersionedDrawSettings], None]


class SettingsPersistence(Protocol):
    def save(self, snapshot: VersionedDrawSettings) -> None:
        ...

    def load_latest(self) -> Optional[VersionedDrawSettings]:
        ...


class JsonFileSettingsPersistence:
    """Keeps the latest accepted settings snapshot in a JSON state file."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)

    def load_latest(self) -> Optional[VersionedDrawSettings]:
        if not self._path.exists():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8"))
        return VersionedDrawSettings(
            version=int(data["version"]),
            settings=DrawSettings.from_dict(data["settings"]),
        )

    def save(self, snapshot: VersionedDrawSettings) -> None:
        payload = {"version": snapshot.version, "settings": snapshot.settings.to_dict()}
        # Write then rename so a crash never leaves a half-written file behind.
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self._path)


class DrawSettingsStore:
    """Holds the installed draw settings and replaces them as a whole.

    A replacement is validated, persisted, swapped in and announced to
    listeners in that order. When validation or persistence fails nothing
    changes.
    """

    def __init__(
        self,
        persistence: Optional[SettingsPersistence] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._persistence = persistence
        self._logger = logger or logging.getLogger("drawcalc.settings")
        self._lock = threading.Lock()
        self._listeners: List[SettingsListener] = []
        self._current: Optional[VersionedDrawSettings] = (
            persistence.load_latest() if persistence is not None else None
        )

    @property
    def current(self) -> Optional[VersionedDrawSettings]:
        return self._current

    def get_draw_settings(self) -> DrawSettings:
        snapshot = self._current
        if snapshot is None:
            raise LookupError("No draw settings have been installed")
        return snapshot.settings

    def subscribe(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def set_draw_settings(self, settings: DrawSettings) -> VersionedDrawSettings:
        try:
            validate_draw_settings(settings)
        except Exception as exc:
            self._logger.warning("Rejected draw settings %s: %s", settings, exc)
            raise

        with self._lock:
            previous = self._current
            version = previous.version + 1 if previous is not None else 1
            snapshot = VersionedDrawSettings(version=version, settings=settings)
            if self._persistence is not None:
                self._persistence.save(snapshot)
            self._current = snapshot

        self._logger.info("Draw settings set: version=%s %s", version, settings)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as exc:
                self._logger.exception("Draw settings listener failed: %s", exc)
        return snapshot
