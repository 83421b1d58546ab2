"""
Module: cli.py
Description:
    Typer-based command-line interface for syncing the Anime-Lists mapping into
    the Seerr blocklist, plus a few helper tools.

Usage:
    python cli.py [subcommand] [options]

Notes:
    Reads configuration from `.env`.
    - Required/used env vars:
        * SEERR_HOST
        * SEERR_API_KEY
        * SEERR_USER_ID
        * ANIME_LIST_CACHE_DIR (optional)
"""

import typer
from rich.console import Console

console = Console()

app = typer.Typer(help="Anime → Seerr blocklist sync.")

# === Sub-apps ===
seerr_app = typer.Typer(help="Commands that change the Seerr blocklist.")
tools_app = typer.Typer(help="Read-only reports and cache maintenance.")

app.add_typer(seerr_app, name="seerr")
app.add_typer(tools_app, name="tools")

CACHE_DIR_HELP = (
    "Folder to store the downloaded anime list in. "
    "Overrides ANIME_LIST_CACHE_DIR from .env; defaults to the project folder."
)


# === SEERR COMMANDS ===
@seerr_app.command("sync-blocklist")
def sync_blocklist(
    cache_dir: str = typer.Option(None, "--cache-dir", help=CACHE_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output."),
):
    """
    Blocklist every anime series from anime-list.xml that Seerr doesn't know yet.
    Existing entries are never removed, except movies sharing a series' TMDB id.
    """
    from syncer.main import main as run_sync
    run_sync(cache_dir=cache_dir, verbose=verbose)


# === TOOLS COMMANDS ===
@tools_app.command("count-blocklist")
def count_blocklist(
    cache_dir: str = typer.Option(None, "--cache-dir", help=CACHE_DIR_HELP),
    show_missing: bool = typer.Option(
        False, "--show-missing", help="List the anime a sync would still add."
    ),
):
    """Compare the Seerr blocklist with the anime list without changing anything."""
    from tools.count_blocklist import main as run_counter
    run_counter(cache_dir=cache_dir, show_missing=show_missing)


@tools_app.command("refresh-anime-list")
def refresh_anime_list(
    cache_dir: str = typer.Option(None, "--cache-dir", help=CACHE_DIR_HELP),
):
    """Download anime-list.xml again even if the cached copy is recent."""
    from tools.refresh_anime_list import main as run_refresh
    run_refresh(cache_dir=cache_dir)


# === ENTRY POINT ===
if __name__ == "__main__":
    app()
