from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from syncer.seerr_client import SeerrClient  # noqa: E402
from utils import env  # noqa: E402

SEERR_HOST = "http://seerr.local:5055"
BLOCKLIST_URL = f"{SEERR_HOST}/api/v1/blocklist"

ANIME_LIST_XML = """<?xml version="1.0" encoding="utf-8"?>
<anime-list>
  <anime anidbid="1" tvdbid="76885" defaulttvdbseason="1" tmdbtv="26209">
    <name>Seikai no Monshou</name>
  </anime>
  <anime anidbid="5" tvdbid="movie" tmdbid="11497">
    <name>Kidou Senshi Gundam: Gyakushuu no Char</name>
  </anime>
  <anime anidbid="6" tvdbid="79604" tmdbtv="">
    <name>Hokuto no Ken</name>
  </anime>
  <anime anidbid="7" tvdbid="81797" tmdbtv="30991">
    <name>Re:Zero &amp; &lt;Friends&gt;</name>
  </anime>
</anime-list>
"""


@pytest.fixture()
def client() -> SeerrClient:
    c = SeerrClient(SEERR_HOST, "secret-key", "blocklist")
    yield c
    c.close()


@pytest.fixture()
def seerr_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEERR_HOST", SEERR_HOST)
    monkeypatch.setenv("SEERR_API_KEY", "secret-key")
    monkeypatch.setenv("SEERR_USER_ID", "7")
    monkeypatch.delenv("ANIME_LIST_CACHE_DIR", raising=False)


@pytest.fixture(autouse=True)
def isolated_project_dir(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point the project and working directories at an empty folder so a real `.env` is never loaded."""
    project_dir = tmp_path_factory.mktemp("project")
    monkeypatch.setattr(env, "PROJECT_DIR", project_dir)
    monkeypatch.chdir(project_dir)
    return project_dir
