from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from sqlalchemy import desc

from draw_calculator.settings_store import DrawSettingsStore
from draw_calculator.types import VersionedDrawSettings

from ..db import session_scope
from ..models import DrawSettingsRecord


class SqlSettingsPersistence:
    """Stores every accepted settings snapshot as a row keyed by version."""

    def save(self, snapshot: VersionedDrawSettings) -> None:
        with session_scope() as session:
            session.add(DrawSettingsRecord.from_snapshot(snapshot))

    def load_latest(self) -> Optional[VersionedDrawSettings]:
        with session_scope() as session:
            record = (
                session.query(DrawSettingsRecord)
                .order_by(desc(DrawSettingsRecord.version))
                .first()
            )
            return record.to_snapshot() if record is not None else None

    def list_versions(self) -> list[VersionedDrawSettings]:
        with session_scope() as session:
            records = session.query(DrawSettingsRecord).order_by(DrawSettingsRecord.version).all()
            return [record.to_snapshot() for record in records]


@lru_cache(maxsize=1)
def get_settings_store() -> DrawSettingsStore:
    return DrawSettingsStore(
        SqlSettingsPersistence(), logger=logging.getLogger("drawcalc.backend.settings")
    )
