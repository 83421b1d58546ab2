"""
Module: anime_list.py
Description:
    Downloads, caches and parses the Anime-Lists `anime-list.xml` mapping
    (AniDB id → TMDB TV id).

Usage:
    Imported by other modules; not intended to be executed directly.

Notes:
    - The cached copy is reused for 24 hours, then downloaded again.
    - Downloads are written to a temp file next to the cache and swapped in
      with `os.replace`, so an interrupted download never corrupts the cache.
"""

from __future__ import annotations

import os
import tempfile
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import requests
from rich.console import Console

console = Console()

ANIME_LIST_URL = "https://raw.githubusercontent.com/Anime-Lists/anime-lists/master/anime-list.xml"
UPDATE_INTERVAL = timedelta(hours=24)
DOWNLOAD_TIMEOUT = (30, 60)


class AnimeListError(Exception):
    """Raised when the mapping cannot be downloaded, cached or parsed."""


@dataclass(frozen=True)
class AnimeEntry:
    name: str
    tmdb_tv: int
    anidb_id: int | None = None


def _int_attr(element: ET.Element, attr: str) -> int:
    value = (element.get(attr) or "").strip()
    if not value:
        return 0
    try:
        return int(value)
    except ValueError as e:
        raise AnimeListError(
            f"invalid {attr}={value!r} for anidbid={element.get('anidbid')!r}"
        ) from e


def parse_anime_list(source) -> list[AnimeEntry]:
    """Parse an anime-list XML document from a path or file object."""
    try:
        root = ET.parse(source).getroot()
    except ET.ParseError as e:
        raise AnimeListError(f"cannot parse anime list: {e}") from e

    entries = []
    for anime in root.iter("anime"):
        name = (anime.findtext("name") or "").strip()
        anidb_id = _int_attr(anime, "anidbid") or None
        entries.append(AnimeEntry(name=name, tmdb_tv=_int_attr(anime, "tmdbtv"), anidb_id=anidb_id))
    return entries


def cache_path(cache_dir: Path, url: str = ANIME_LIST_URL) -> Path:
    return Path(cache_dir) / url.rsplit("/", 1)[-1]


def is_fresh(path: Path, now: float | None = None) -> bool:
    """`now` is an epoch timestamp; defaults to `time.time()`."""
    try:
        mtime = path.stat().st_mtime
    except FileNotFoundError:
        return False
    now = time.time() if now is None else now
    return now - mtime < UPDATE_INTERVAL.total_seconds()


def download_anime_list(target: Path, url: str = ANIME_LIST_URL) -> list[AnimeEntry]:
    """
    Download `url` into `target` atomically and return its parsed entries.

    The existing file (if any) is only replaced once the new one is fully
    written and parses cleanly; its permissions are carried over.
    """
    target.parent.mkdir(parents=True, exist_ok=True)

    try:
        old_mode = target.stat().st_mode
    except FileNotFoundError:
        old_mode = None

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f"{target.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            try:
                with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as resp:
                    if resp.status_code != 200:
                        raise AnimeListError(
                            f"unexpected status: {resp.status_code} {resp.reason or ''}".strip()
                        )
                    for chunk in resp.iter_content(chunk_size=64 * 1024):
                        f.write(chunk)
            except requests.RequestException as e:
                raise AnimeListError(f"cannot download {url}: {e}") from e
            f.flush()
            os.fsync(f.fileno())

        entries = parse_anime_list(tmp_path)

        if old_mode is not None:
            os.chmod(tmp_path, old_mode)
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    return entries


def fetch_and_parse_anime_list(
    cache_dir: Path,
    *,
    force_refresh: bool = False,
    url: str = ANIME_LIST_URL,
    now: float | None = None,
    verbose: bool = False,
) -> list[AnimeEntry]:
    """Return the mapping entries, downloading a new copy when the cache is stale."""
    path = cache_path(cache_dir, url)

    if not force_refresh and is_fresh(path, now):
        if verbose:
            console.print(f"[dim]Using cached anime list: {path}[/dim]")
        try:
            return parse_anime_list(path)
        except OSError as e:
            raise AnimeListError(f"cannot read {path}: {e}") from e

    if verbose:
        console.print(f"[dim]Downloading anime list → {path}[/dim]")
    try:
        return download_anime_list(path, url)
    except OSError as e:
        raise AnimeListError(f"cannot update {path}: {e}") from e
