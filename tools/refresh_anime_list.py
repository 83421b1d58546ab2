"""
Module: refresh_anime_list.py
Description:
    Forces a fresh download of the cached `anime-list.xml`, regardless of age.

Usage:
    python cli.py tools refresh-anime-list [--cache-dir DIR]

Notes:
    Reads configuration from `.env`.
    - Required/used env vars:
        * ANIME_LIST_CACHE_DIR (optional)
"""

from rich.console import Console

from syncer.anime_list import AnimeListError, cache_path, fetch_and_parse_anime_list
from syncer.main import fatal
from utils.env import load_env_files, resolve_cache_dir

console = Console()


def main(cache_dir=None):
    load_env_files()
    cache_dir = resolve_cache_dir(cache_dir)

    try:
        anime_list = fetch_and_parse_anime_list(cache_dir, force_refresh=True)
    except AnimeListError as e:
        fatal(f"Cannot refresh anime list: {e}")

    mapped = sum(1 for a in anime_list if a.tmdb_tv)
    console.print(f"[bold green]✅ Anime list refreshed:[/bold green] {cache_path(cache_dir)}")
    console.print(f"[dim]{len(anime_list)} entries, {mapped} with a TMDB TV id[/dim]")
    return anime_list


if __name__ == "__main__":
    main()
