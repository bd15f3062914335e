from __future__ import annotations

from functools import lru_cache

from flask import Blueprint, current_app, jsonify, request

from draw_calculator.balances import TicketBalanceClient
from draw_calculator.calculator import BalanceSource, PrizeCalculator
from draw_calculator.errors import DrawCalculatorError

from ..config import load_settings
from ..schemas import CalculationRequest, CalculationResponse
from ..services.settings import get_settings_store

bp = Blueprint("calculations", __name__)


@lru_cache(maxsize=1)
def get_balance_source() -> BalanceSource:
    settings = load_settings()
    return TicketBalanceClient.from_rpc(
        settings.ticket.rpc_url,
        settings.ticket.contract_address,
        settings.ticket.abi_path,
    )


@bp.post("")
def calculate():
    payload = request.get_json(force=True, silent=True) or {}
    data = CalculationRequest(**payload)

    store = get_settings_store()
    snapshot = store.current
    if snapshot is None:
        return jsonify({"error": "draw settings not configured"}), 409

    calculator = PrizeCalculator(store, get_balance_source())
    try:
        awarded = calculator.calculate(
            data.user,
            data.winning_random_numbers,
            data.timestamps,
            data.prize_pools,
            data.encoded_picks,
        )
    except DrawCalculatorError as exc:
        current_app.logger.warning("Calculation for %s rejected: %s", data.user, exc)
        return jsonify({"error": str(exc), "code": exc.code}), 400
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    response = CalculationResponse(
        user=data.user,
        settings_version=snapshot.version,
        awarded=[str(amount) for amount in awarded],
    )
    return jsonify(response.dict())
