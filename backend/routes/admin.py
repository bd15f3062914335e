from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from draw_calculator.errors import InvalidDrawSettings
from draw_calculator.types import DrawSettings

from ..config import load_settings
from ..schemas import DrawSettingsRequest
from ..services.settings import get_settings_store
from .settings import settings_response

bp = Blueprint("admin", __name__)


def _require_admin() -> bool:
    settings = load_settings()
    api_key = settings.admin_api_key
    if api_key:
        provided = request.headers.get("X-Admin-Token")
        if provided != api_key:
            return False
    return True


@bp.before_request
def verify_admin():
    if not _require_admin():
        return jsonify({"error": "unauthorized"}), 401
    return None


@bp.post("/draw-settings")
def set_draw_settings():
    payload = request.get_json(force=True, silent=True) or {}
    data = DrawSettingsRequest(**payload)

    try:
        draw_settings = DrawSettings(
            bit_range_size=data.bit_range_size,
            match_cardinality=data.match_cardinality,
            pick_cost=data.pick_cost,
            distributions=tuple(data.distributions),
        )
        snapshot = get_settings_store().set_draw_settings(draw_settings)
    except InvalidDrawSettings as exc:
        return jsonify({"error": str(exc), "code": exc.code}), 400
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    current_app.logger.info("Draw settings version %s installed", snapshot.version)
    return jsonify(settings_response(snapshot)), 201
