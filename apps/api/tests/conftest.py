from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from crosscut_site.dependencies import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def site_root(tmp_path, monkeypatch):
    content_dir = tmp_path / "content" / "daily"
    static_dir = tmp_path / "static"
    content_dir.mkdir(parents=True)
    static_dir.mkdir()
    (static_dir / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")

    monkeypatch.setenv("CONTENT_DIR", str(content_dir))
    monkeypatch.setenv("STATIC_DIR", str(static_dir))
    for name in ("CANONICAL_HOST", "LEGACY_HOSTS", "SITE_NAME", "CONTACT_EMAIL", "DEBUG_LOG"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def content_dir(site_root):
    return site_root / "content" / "daily"


@pytest.fixture
def client(site_root):
    from main import create_app

    return TestClient(create_app())
