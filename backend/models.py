from __future__ import annotations

import datetime as dt
import json

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

from draw_calculator.types import DrawSettings, VersionedDrawSettings

Base = declarative_base()


class DrawSettingsRecord(Base):
    """One accepted draw settings snapshot; rows are never updated."""

    __tablename__ = "draw_settings"

    version = Column(Integer, primary_key=True, autoincrement=False)
    bit_range_size = Column(Integer, nullable=False)
    match_cardinality = Column(Integer, nullable=False)
    # uint256 values do not fit SQL integer columns; stored as decimal strings.
    pick_cost = Column(String(80), nullable=False)
    distributions = Column(Text, nullable=False)
    created_at = Column(DateTime, default=dt.datetime.utcnow, nullable=False)

    @classmethod
    def from_snapshot(cls, snapshot: VersionedDrawSettings) -> "DrawSettingsRecord":
        settings = snapshot.settings
        record = cls(
            version=snapshot.version,
            bit_range_size=settings.bit_range_size,
            match_cardinality=settings.match_cardinality,
            pick_cost=str(settings.pick_cost),
        )
        record.set_distributions(settings.distributions)
        return record

    def set_distributions(self, distributions) -> None:
        self.distributions = json.dumps([str(d) for d in distributions])

    def get_distributions(self) -> tuple:
        return tuple(int(d) for d in json.loads(self.distributions))

    def to_snapshot(self) -> VersionedDrawSettings:
        return VersionedDrawSettings(
            version=self.version,
            settings=DrawSettings(
                bit_range_size=self.bit_range_size,
                match_cardinality=self.match_cardinality,
                pick_cost=int(self.pick_cost),
                distributions=self.get_distributions(),
            ),
        )
