from __future__ import annotations

from flask import Blueprint, jsonify

from draw_calculator.distributions import calculate_prize_distribution_fraction
from draw_calculator.types import VersionedDrawSettings

from ..schemas import DrawSettingsResponse, FractionResponse
from ..services.settings import SqlSettingsPersistence, get_settings_store

bp = Blueprint("settings", __name__)


def settings_response(snapshot: VersionedDrawSettings) -> dict:
    settings = snapshot.settings
    return DrawSettingsResponse(
        version=snapshot.version,
        bit_range_size=settings.bit_range_size,
        match_cardinality=settings.match_cardinality,
        pick_cost=str(settings.pick_cost),
        distributions=[str(d) for d in settings.distributions],
    ).dict()


@bp.get("")
def get_draw_settings():
    snapshot = get_settings_store().current
    if snapshot is None:
        return jsonify({"error": "draw settings not configured"}), 404
    return jsonify(settings_response(snapshot))


@bp.get("/history")
def list_draw_settings():
    versions = SqlSettingsPersistence().list_versions()
    return jsonify([settings_response(snapshot) for snapshot in versions])


@bp.get("/fraction/<int:tier_index>")
def get_distribution_fraction(tier_index: int):
    snapshot = get_settings_store().current
    if snapshot is None:
        return jsonify({"error": "draw settings not configured"}), 404
    try:
        fraction = calculate_prize_distribution_fraction(snapshot.settings, tier_index)
    except IndexError:
        return jsonify({"error": f"no distribution configured for tier {tier_index}"}), 404
    return jsonify(FractionResponse(tier_index=tier_index, fraction=str(fraction)).dict())
