import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

console = Console()

PROJECT_DIR = Path(__file__).resolve().parent.parent

REQUIRED_ENV_VARS = ["SEERR_HOST", "SEERR_API_KEY", "SEERR_USER_ID"]


@dataclass(frozen=True)
class SeerrSettings:
    host: str
    api_key: str
    user_id: int


def load_env_files():
    """Load `.env` from the working directory, then from the project directory."""
    for env_path in (Path.cwd() / ".env", PROJECT_DIR / ".env"):
        if env_path.is_file():
            load_dotenv(dotenv_path=env_path)


def validate_env_vars(required_vars):
    """Ensure all required environment variables are set."""
    missing = [var for var in required_vars if not os.getenv(var)]
    if missing:
        console.print(
            f"[bold red]❌ Missing required environment variables: {', '.join(missing)}[/bold red]"
        )
        sys.exit(1)


def load_seerr_settings() -> SeerrSettings:
    validate_env_vars(REQUIRED_ENV_VARS)

    raw_user_id = os.getenv("SEERR_USER_ID", "").strip()
    try:
        user_id = int(raw_user_id)
    except ValueError:
        console.print(f"[bold red]❌ SEERR_USER_ID must be an integer, got {raw_user_id!r}[/bold red]")
        sys.exit(1)

    return SeerrSettings(
        host=os.getenv("SEERR_HOST").strip(),
        api_key=os.getenv("SEERR_API_KEY").strip(),
        user_id=user_id,
    )


def resolve_cache_dir(cli_dir: str | Path | None = None) -> Path:
    """
    Pick the directory holding the cached anime list.
    Priority: CLI argument > ANIME_LIST_CACHE_DIR > project directory.
    """
    cache_dir = cli_dir or os.getenv("ANIME_LIST_CACHE_DIR")
    if not cache_dir:
        return PROJECT_DIR
    return Path(cache_dir).expanduser()
