"""
Module: blocklist_fetcher.py
Description:
    Reads the whole Seerr blocklist through its paginated listing endpoint and
    returns the TMDB ids already blocklisted for one media type.

Usage:
    Imported by other modules; not intended to be executed directly.

Notes:
    Any failed page aborts the fetch; there is no partial result.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rich.console import Console

from syncer.seerr_client import ResponseMode, SeerrClient, SeerrDecodeError

console = Console()

# Large enough that a typical blocklist comes back in a single page
DEFAULT_TAKE = 32767
FILTER_ALL = "all"


class MediaType(str, Enum):
    TV = "tv"
    MOVIE = "movie"


@dataclass(frozen=True)
class RemoteEntry:
    tmdb_id: int
    media_type: MediaType | str


@dataclass(frozen=True)
class PageInfo:
    page: int = 0
    pages: int = 0
    results: int = 0


def _media_type(value: Any) -> MediaType | str:
    try:
        return MediaType(value)
    except ValueError:
        return str(value)


def parse_page(payload: Any) -> tuple[list[RemoteEntry], PageInfo]:
    """Turn one decoded listing response into entries + page counters."""
    if not isinstance(payload, dict):
        raise SeerrDecodeError(f"unexpected blocklist page: {type(payload).__name__}")

    raw_info = payload.get("pageInfo") or {}
    try:
        page_info = PageInfo(
            page=int(raw_info.get("page") or 0),
            pages=int(raw_info.get("pages") or 0),
            results=int(raw_info.get("results") or 0),
        )
        entries = [
            RemoteEntry(tmdb_id=int(r.get("tmdbId") or 0), media_type=_media_type(r.get("mediaType")))
            for r in payload.get("results") or []
        ]
    except (AttributeError, TypeError, ValueError) as e:
        raise SeerrDecodeError(f"malformed blocklist page: {e}") from e

    return entries, page_info


def get_already_blocklisted(
    client: SeerrClient,
    media_type: MediaType = MediaType.TV,
    take: int = DEFAULT_TAKE,
    verbose: bool = False,
) -> set[int]:
    """
    Fetch every blocklist page and collect the TMDB ids of `media_type`.

    Stops when the server reports the last page or returns an empty page.
    Entries of other media types are ignored.
    """
    blocklisted: set[int] = set()
    params = {"take": take, "skip": 0, "filter": FILTER_ALL}

    while True:
        entries, page_info = parse_page(client.get("", params, ResponseMode.JSON))

        if params["skip"] == 0 and verbose:
            console.print(
                f"[dim]Seerr reports ~{page_info.results} blocklist entries "
                f"across {page_info.pages} page(s)[/dim]"
            )

        for entry in entries:
            if entry.media_type == media_type:
                blocklisted.add(entry.tmdb_id)

        if page_info.page >= page_info.pages:
            break

        if not entries:
            break

        params["skip"] += take

    return blocklisted
