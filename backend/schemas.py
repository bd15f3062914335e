from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, validator

from draw_calculator.datasource.http_api import parse_uint


def _parse_uint_list(value: Any, field: str) -> List[int]:
    if not isinstance(value, list):
        raise ValueError(f"{field} must be a list")
    return [parse_uint(item, field) for item in value]


class DrawSettingsRequest(BaseModel):
    bit_range_size: int = Field(..., description="Bits per comparison window (1-255).")
    match_cardinality: int = Field(..., description="Number of comparison windows.")
    pick_cost: int = Field(..., description="Balance units required per pick.")
    distributions: List[int] = Field(
        ..., description="Tier weights in 1e18 fixed point, grand prize first."
    )

    @validator("pick_cost", pre=True)
    def parse_pick_cost(cls, value: Any) -> int:
        return parse_uint(value, "pick_cost")

    @validator("distributions", pre=True)
    def parse_distributions(cls, value: Any) -> List[int]:
        return _parse_uint_list(value, "distributions")


class DrawSettingsResponse(BaseModel):
    version: int
    bit_range_size: int
    match_cardinality: int
    pick_cost: str
    distributions: List[str]


class CalculationRequest(BaseModel):
    user: str
    winning_random_numbers: List[int]
    timestamps: List[int]
    prize_pools: List[int]
    encoded_picks: str = Field(..., description="0x-prefixed ABI-encoded uint256[][].")

    @validator("winning_random_numbers", "timestamps", "prize_pools", pre=True)
    def parse_uints(cls, value: Any) -> List[int]:
        return _parse_uint_list(value, "value")


class CalculationResponse(BaseModel):
    user: str
    settings_version: Optional[int] = None
    awarded: List[str]


class FractionResponse(BaseModel):
    tier_index: int
    fraction: str
