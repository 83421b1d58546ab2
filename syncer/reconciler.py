"""
Module: reconciler.py
Description:
    Adds every mapped anime series missing from the Seerr blocklist.

Usage:
    Imported by other modules; not intended to be executed directly.

Notes:
    - Only additions are made; stale blocklist entries are left alone.
    - TMDB ids are shared between movies and TV shows but Seerr treats the
      blocklist as unique per id. A 412 on add means the id is blocklisted
      as the other media type: that entry is deleted and the add retried once.
    - Not safe to run concurrently for the same Seerr instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

from syncer.anime_list import AnimeEntry
from syncer.blocklist_fetcher import MediaType
from syncer.seerr_client import HTTPError, SeerrClient, SeerrError

console = Console()

MAX_ATTEMPTS = 2


@dataclass
class ReconcileStats:
    added: int = 0
    replaced: int = 0
    already_blocklisted: int = 0
    unmapped: int = 0
    failed: int = 0


def blocklist_payload(entry: AnimeEntry, user_id: int) -> dict:
    return {
        "mediaType": MediaType.TV.value,
        "tmdbId": entry.tmdb_tv,
        "title": entry.name,
        "user": user_id,
    }


def add_to_blocklist(
    client: SeerrClient,
    entry: AnimeEntry,
    blocklisted: set[int],
    user_id: int,
    stats: ReconcileStats,
    log=console.print,
) -> None:
    """
    Add one entry, deleting a same-id entry of the other media type on 412.

    At most two POSTs and one DELETE are issued.
    """
    tmdb_id = entry.tmdb_tv
    payload = blocklist_payload(entry, user_id)

    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            client.post("", payload=payload)
        except SeerrError as e:
            conflict = isinstance(e, HTTPError) and e.status_code == HTTPStatus.PRECONDITION_FAILED
            if attempt == 1 and conflict:
                # Marked first so a failed delete can't lead to another attempt
                blocklisted.add(tmdb_id)
                try:
                    client.delete(f"/{tmdb_id}")
                except SeerrError as delete_error:
                    log(
                        f"[red]❌ Error removing conflicting entry {tmdb_id} "
                        f"for {escape(entry.name)}: {escape(str(delete_error))}[/red]"
                    )
                    stats.failed += 1
                    return
                continue
            log(
                f"[red]❌ Error adding {escape(entry.name)} ({tmdb_id}) "
                f"to blocklist: {escape(str(e))}[/red]"
            )
            stats.failed += 1
            return

        blocklisted.add(tmdb_id)
        if attempt == 1:
            stats.added += 1
        else:
            stats.replaced += 1
        return


def reconcile(
    client: SeerrClient,
    candidates: Iterable[AnimeEntry],
    blocklisted: set[int],
    user_id: int,
    verbose: bool = False,
) -> ReconcileStats:
    """
    Blocklist every candidate with a TMDB TV id not already in `blocklisted`.

    `blocklisted` is updated in place. Failures for one candidate are
    reported and never stop the loop.
    """
    stats = ReconcileStats()
    candidates = list(candidates)

    progress_bar = tqdm(
        candidates,
        desc="🚫 Blocklisting",
        unit="anime",
        ncols=console.size.width,
        disable=not verbose,
    )

    def log(message: str) -> None:
        if progress_bar.disable:
            console.print(message)
        else:
            with progress_bar.external_write_mode():
                console.print(message)

    for entry in progress_bar:
        if not entry.tmdb_tv:
            stats.unmapped += 1
            continue

        if entry.tmdb_tv in blocklisted:
            stats.already_blocklisted += 1
            continue

        if verbose:
            log(f"Adding {escape(entry.name)} ({entry.tmdb_tv})")

        add_to_blocklist(client, entry, blocklisted, user_id, stats, log=log)

    progress_bar.close()
    return stats
