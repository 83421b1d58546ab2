"""
Module: count_blocklist.py
Description:
    Read-only report comparing the Seerr blocklist with the anime mapping:
    how many series are blocklisted, how many have a TMDB TV id, and how
    many a sync would still add.

Usage:
    python cli.py tools count-blocklist [--cache-dir DIR]

Notes:
    Reads configuration from `.env`.
    - Required/used env vars:
        * SEERR_HOST
        * SEERR_API_KEY
        * SEERR_USER_ID
        * ANIME_LIST_CACHE_DIR (optional)
"""

from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from syncer.anime_list import AnimeEntry, AnimeListError, fetch_and_parse_anime_list
from syncer.blocklist_fetcher import get_already_blocklisted
from syncer.main import BLOCKLIST_ENDPOINT, fatal
from syncer.seerr_client import SeerrClient, SeerrError
from utils.env import load_env_files, load_seerr_settings, resolve_cache_dir

console = Console()


@dataclass
class BlocklistCounts:
    blocklisted: int
    mapped: int
    unmapped: int
    missing: list[AnimeEntry]


def count_missing(anime_list: list[AnimeEntry], blocklisted: set[int]) -> BlocklistCounts:
    mapped = [a for a in anime_list if a.tmdb_tv]
    missing = []
    seen = set()
    for anime in mapped:
        if anime.tmdb_tv in blocklisted or anime.tmdb_tv in seen:
            continue
        seen.add(anime.tmdb_tv)
        missing.append(anime)

    return BlocklistCounts(
        blocklisted=len(blocklisted),
        mapped=len(mapped),
        unmapped=len(anime_list) - len(mapped),
        missing=missing,
    )


def main(cache_dir=None, show_missing: bool = False) -> BlocklistCounts:
    console.print("[bold white]\n🔢 Seerr Blocklist Counter[/bold white]\n")

    load_env_files()
    settings = load_seerr_settings()

    try:
        with SeerrClient(settings.host, settings.api_key, BLOCKLIST_ENDPOINT) as client:
            blocklisted = get_already_blocklisted(client)
    except SeerrError as e:
        fatal(f"Cannot read Seerr blocklist: {e}")

    try:
        anime_list = fetch_and_parse_anime_list(resolve_cache_dir(cache_dir))
    except AnimeListError as e:
        fatal(f"Cannot load anime list: {e}")

    counts = count_missing(anime_list, blocklisted)

    if show_missing and counts.missing:
        table = Table(title="Not yet blocklisted", expand=True)
        table.add_column("TMDB", style="cyan", justify="right")
        table.add_column("AniDB", style="dim", justify="right")
        table.add_column("Name", style="green", overflow="fold")
        for anime in counts.missing:
            table.add_row(str(anime.tmdb_tv), str(anime.anidb_id or "—"), anime.name)
        console.print(table)

    console.print("\n[bold white]📊 Blocklist Summary[/bold white]")
    console.print(f"[bold green]🚫 Series blocklisted in Seerr: {counts.blocklisted}[/bold green]")
    console.print(f"[bold cyan]🔗 Anime with a TMDB TV id: {counts.mapped}[/bold cyan]")
    console.print(f"[dim]➖ Anime without a TMDB TV id: {counts.unmapped}[/dim]")
    console.print(f"[bold yellow]➕ Still to blocklist: {len(counts.missing)}[/bold yellow]\n")

    return counts


if __name__ == "__main__":
    main()
