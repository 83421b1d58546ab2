"""
Module: main.py
Description:
    High-level entry point: reads the current Seerr blocklist, loads the
    anime mapping and blocklists every anime series that is missing.

Usage:
    python cli.py seerr sync-blocklist [--cache-dir DIR] [--verbose]

Notes:
    Reads configuration from `.env`.
    - Required/used env vars:
        * SEERR_HOST
        * SEERR_API_KEY
        * SEERR_USER_ID
        * ANIME_LIST_CACHE_DIR (optional)
"""

import sys
from typing import NoReturn
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from syncer.anime_list import AnimeListError, fetch_and_parse_anime_list
from syncer.blocklist_fetcher import get_already_blocklisted
from syncer.reconciler import ReconcileStats, reconcile
from syncer.seerr_client import SeerrClient, SeerrError
from utils.env import load_env_files, load_seerr_settings, resolve_cache_dir

console = Console()

BLOCKLIST_ENDPOINT = "blocklist"


def fatal(message: str) -> NoReturn:
    console.print(f"[bold red]❌ {escape(message)}[/bold red]")
    sys.exit(1)


def main(cache_dir: str | Path | None = None, verbose: bool = False) -> ReconcileStats:
    console.print("[bold white]\n🚫 Anime → Seerr | Blocklist Sync[/bold white]\n")

    load_env_files()
    settings = load_seerr_settings()
    cache_dir = resolve_cache_dir(cache_dir)

    try:
        client = SeerrClient(settings.host, settings.api_key, BLOCKLIST_ENDPOINT)
    except SeerrError as e:
        fatal(str(e))

    with client:
        try:
            blocklisted = get_already_blocklisted(client, verbose=verbose)
        except SeerrError as e:
            fatal(f"Cannot read Seerr blocklist: {e}")
        console.print(
            f"[bold magenta]📦 {len(blocklisted)} series already blocklisted[/bold magenta]"
        )

        try:
            anime_list = fetch_and_parse_anime_list(cache_dir, verbose=verbose)
        except AnimeListError as e:
            fatal(f"Cannot load anime list: {e}")
        console.print(f"[bold magenta]📚 Loaded {len(anime_list)} anime mappings[/bold magenta]\n")

        stats = reconcile(client, anime_list, blocklisted, settings.user_id, verbose=verbose)

    console.print("\n[bold white]📊 Final Report[/bold white]")
    console.print(f"[bold green]✅ Added to blocklist: {stats.added}[/bold green]")
    console.print(f"[bold blue]🔁 Replaced movie entries: {stats.replaced}[/bold blue]")
    console.print(f"[bold cyan]⏭️  Already blocklisted: {stats.already_blocklisted}[/bold cyan]")
    console.print(f"[dim]➖ Without TMDB TV id: {stats.unmapped}[/dim]")
    console.print(f"[bold red]❌ Failed: {stats.failed}[/bold red]\n")

    return stats


if __name__ == "__main__":
    main()
