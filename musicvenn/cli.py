"""Command-line entry point."""
import argparse
import asyncio
import logging
import sys
import webbrowser
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import matplotlib
import matplotlib.pyplot as plt

from musicvenn.app import MusicVennApp
from musicvenn.auth import SpotifyAuth
from musicvenn.chart import VennChart
from musicvenn.config import COUNTRIES, KINDS, LABELS, load_settings
from musicvenn.errors import ConfigError, ProviderError, ReauthenticationRequired
from musicvenn.logging_config import setup_logging
from musicvenn.providers import LastFmProvider, SpotifyProvider, StaticProvider
from musicvenn.rankings import RankingStore
from musicvenn.regions import all_combinations
from musicvenn.session import SelectionSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="musicvenn",
        description="Compare your top artists/tracks with a country's and the world's charts as a Venn diagram",
    )
    parser.add_argument("--country", type=str, default=None, help="Country for the country chart (default: United States)")
    parser.add_argument("--count", type=int, default=None, help="Number of items per list (default: 5)")
    parser.add_argument("--kind", type=str, default=None, choices=[k.lower() for k in KINDS] + list(KINDS),
                        help="Compare artists or tracks (default: artists)")
    parser.add_argument("--offline", type=str, default=None, metavar="FILE",
                        help="Read the lists from a JSON file instead of the network")
    parser.add_argument("--save", type=str, default=None, metavar="OUT",
                        help="Render to an image file and exit (no window)")
    parser.add_argument("--only", type=str, default=None,
                        help="Comma-separated labels to restrict the saved diagram to, e.g. Personal,World")
    parser.add_argument("--print-regions", action="store_true", help="Print every region's items and exit")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", type=str, default=None, help="Optional log file")
    return parser


def _code_from_reply(reply: str) -> str:
    """Accept either the bare code or the full redirect URL."""
    reply = reply.strip()
    if "://" in reply:
        codes = parse_qs(urlparse(reply).query).get("code")
        if not codes:
            raise ProviderError("missing code", "The redirect URL has no 'code' parameter.")
        return codes[0]
    return reply


async def _authorize(store: RankingStore, exc: ReauthenticationRequired) -> None:
    if not sys.stdin.isatty():
        logger.warning("Spotify login required; open %s (personal lists stay empty).", exc.authorize_url)
        return
    print(f"Log in to Spotify in your browser:\n  {exc.authorize_url}")
    webbrowser.open(exc.authorize_url)
    reply = input("Paste the URL you were redirected to (or the code): ")
    try:
        await store.auth.exchange_code(_code_from_reply(reply))
        await store.load_personal()
    except ProviderError as err:
        logger.error("Spotify login failed: %s", err)


async def _load(store: RankingStore) -> None:
    try:
        await store.load_all()
    except ReauthenticationRequired as exc:
        await _authorize(store, exc)


async def _close(store: RankingStore) -> None:
    for provider in {id(p): p for p in (store.charts, store.personal, store.auth) if p is not None}.values():
        await provider.aclose()


def _build_store(args, settings) -> Tuple[RankingStore, List[str]]:
    if args.offline:
        provider = StaticProvider.from_file(args.offline)
        return RankingStore(provider, provider, None, settings), provider.countries() or list(COUNTRIES)

    charts = LastFmProvider(settings.lastfm_api_key)
    personal, auth = None, None
    if settings.spotify_client_id:
        personal = SpotifyProvider()
        auth = SpotifyAuth(settings.spotify_client_id, settings.redirect_uri)
    else:
        logger.warning("SPOTIFY_CLIENT_ID is not set; personal lists stay empty.")
    return RankingStore(charts, personal, auth, settings), list(COUNTRIES)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(args.log_level, args.log_file)
    except ConfigError as exc:
        print(f"musicvenn: {exc}", file=sys.stderr)
        return 2

    try:
        settings = load_settings(country=args.country, count=args.count, kind=args.kind)
        only = [s.strip() for s in args.only.split(",") if s.strip()] if args.only else None
        if only and not set(only) <= set(LABELS):
            raise ConfigError(f"--only accepts labels from {', '.join(LABELS)}.")
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2

    store, countries = _build_store(args, settings)
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(_load(store))

        if args.save or args.print_regions:
            matplotlib.use("Agg")
            collections = loop.run_until_complete(store.collections())
            return _headless(collections, args.save, only, args.print_regions)

        MusicVennApp(store, loop=loop, countries=countries).run()
        return 0
    finally:
        loop.run_until_complete(_close(store))
        loop.close()


def _headless(collections, outfile: Optional[str], only: Optional[List[str]], print_regions: bool) -> int:
    fig, ax = plt.subplots(figsize=(8, 8))
    chart = VennChart(ax, LABELS)
    session = SelectionSession(LABELS, chart)
    session.load(collections)
    if only:
        session.restrict(only)

    if print_regions:
        for combination in all_combinations(LABELS):
            if combination <= session.active_labels:
                print(session.tooltip(combination, exclusive=True))
    if outfile:
        chart.save(outfile)
    plt.close(fig)
    return 0
