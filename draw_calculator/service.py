from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional, Sequence

from .balances import TicketBalanceClient
from .calculator import BalanceSource, PrizeCalculator
from .config import CalculatorSettings, load_config
from .datasource import DrawResultsFeed, HttpJsonDrawFeed, HttpJsonDrawFeedConfig, StaticDrawFeed
from .datasource.http_api import parse_uint
from .errors import DrawCalculatorError
from .picks import decode_picks
from .settings_store import DrawSettingsStore, JsonFileSettingsPersistence
from .types import Draw, DrawSettings


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def build_feed(settings: CalculatorSettings, draws_file: Optional[str]) -> DrawResultsFeed:
    if draws_file:
        with open(draws_file, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
        # Local files share the HTTP feed's record layout.
        parser = HttpJsonDrawFeed(_feed_config(settings, url=draws_file))
        return StaticDrawFeed(parser.parse_payload(payload))

    if not settings.feed.url:
        raise RuntimeError("FEED__URL is not configured and no --draws-file given.")
    return HttpJsonDrawFeed(_feed_config(settings, url=settings.feed.url))


def _feed_config(settings: CalculatorSettings, url: str) -> HttpJsonDrawFeedConfig:
    feed = settings.feed
    return HttpJsonDrawFeedConfig(
        url=url,
        winning_number_key=feed.winning_number_key,
        timestamp_key=feed.timestamp_key,
        prize_pool_key=feed.prize_pool_key,
        draws_key=feed.draws_key,
        timeout_seconds=feed.timeout_seconds,
    )


def build_settings_store(settings: CalculatorSettings) -> DrawSettingsStore:
    persistence = JsonFileSettingsPersistence(settings.settings_state_file)
    return DrawSettingsStore(persistence, logger=logging.getLogger("drawcalc.settings"))


def load_pick_lists(args: argparse.Namespace) -> List[List[int]]:
    if args.encoded_picks:
        return decode_picks(args.encoded_picks)
    with open(args.picks_file, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, list) or not all(isinstance(p, list) for p in raw):
        raise ValueError("picks file must contain a list of pick-index lists")
    return [[parse_uint(p, "pick") for p in picks] for picks in raw]


async def fetch_draws(feed: DrawResultsFeed) -> Sequence[Draw]:
    try:
        return await feed.fetch_draws()
    finally:
        await feed.close()


def cmd_set_settings(args: argparse.Namespace, settings: CalculatorSettings) -> int:
    logger = logging.getLogger("drawcalc.service")
    store = build_settings_store(settings)
    draw_settings = DrawSettings(
        bit_range_size=args.bit_range_size,
        match_cardinality=args.match_cardinality,
        pick_cost=parse_uint(args.pick_cost, "pick_cost"),
        distributions=tuple(parse_uint(d, "distribution") for d in args.distribution),
    )
    snapshot = store.set_draw_settings(draw_settings)
    logger.info("Installed draw settings version %s", snapshot.version)
    return 0


def cmd_calculate(
    args: argparse.Namespace,
    settings: CalculatorSettings,
    balance_source: Optional[BalanceSource] = None,
) -> List[int]:
    logger = logging.getLogger("drawcalc.service")
    store = build_settings_store(settings)
    draws = asyncio.run(fetch_draws(build_feed(settings, args.draws_file)))
    pick_lists = load_pick_lists(args)

    if balance_source is None:
        balance_source = TicketBalanceClient.from_rpc(
            settings.rpc_url, settings.ticket.address, settings.ticket.abi_path
        )
    calculator = PrizeCalculator(store, balance_source)
    awarded = calculator.calculate_draws(args.user, draws, pick_lists)
    logger.info("Calculated %s draws for %s", len(awarded), args.user)
    for draw, amount in zip(draws, awarded):
        print(f"{draw.timestamp}\t{amount}")
    return awarded


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draw prize calculator")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with settings")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("set-settings", help="Validate and install new draw settings.")
    s.add_argument("--bit-range-size", type=int, required=True)
    s.add_argument("--match-cardinality", type=int, required=True)
    s.add_argument("--pick-cost", required=True, help="Balance units per pick.")
    s.add_argument(
        "--distribution",
        action="append",
        default=[],
        help="Tier weight in 1e18 fixed point; repeat per tier, grand prize first.",
    )

    c = sub.add_parser("calculate", help="Calculate a user's prizes for settled draws.")
    c.add_argument("--user", required=True, help="User address.")
    c.add_argument("--draws-file", default=None, help="JSON draws file (else FEED__URL).")
    picks = c.add_mutually_exclusive_group(required=True)
    picks.add_argument("--picks-file", default=None, help="JSON list of pick-index lists.")
    picks.add_argument("--encoded-picks", default=None, help="ABI-encoded uint256[][] hex.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)
    settings = load_config(args.env_file)
    try:
        if args.cmd == "set-settings":
            cmd_set_settings(args, settings)
        else:
            cmd_calculate(args, settings)
    except DrawCalculatorError as exc:
        logging.getLogger("drawcalc.service").error("%s: %s", exc.code, exc)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
