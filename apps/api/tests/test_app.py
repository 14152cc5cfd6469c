from __future__ import annotations

import logging
import shutil

import pytest
from fastapi.testclient import TestClient

from crosscut_site.domain.exceptions import ConfigurationError


def _write_notes(content_dir, notes: dict[str, str]) -> None:
    for date, body in notes.items():
        (content_dir / f"{date}.md").write_text(body, encoding="utf-8")


def test_root_redirects_to_daily(client) -> None:
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "http://testserver/daily"
    assert r.content == b""


def test_index_trailing_slash_redirect(client) -> None:
    r = client.get("/daily/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "http://testserver/daily"


def test_note_trailing_slash_redirect(client) -> None:
    r = client.get("/daily/2024-12-25/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "http://testserver/daily/2024-12-25"


def test_legacy_host_redirects_before_root_rule(site_root) -> None:
    from main import create_app

    client = TestClient(create_app(), base_url="https://crosscut.cc")
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 308
    assert r.headers["location"] == "https://www.crosscut.cc/"

    r2 = client.get("/daily/2024-01-01?ref=old", follow_redirects=False)
    assert r2.status_code == 308
    assert r2.headers["location"] == "https://www.crosscut.cc/daily/2024-01-01?ref=old"

    r3 = client.get("/a%3Fb", follow_redirects=False)
    assert r3.status_code == 308
    assert r3.headers["location"] == "https://www.crosscut.cc/a%3Fb"

    r4 = client.get("/100%25", follow_redirects=False)
    assert r4.headers["location"] == "https://www.crosscut.cc/100%25"


def test_index_lists_notes(client, content_dir) -> None:
    _write_notes(content_dir, {"2024-01-01": "a\n", "2024-03-05": "b\n"})
    (content_dir / "not-a-date.txt").write_text("x\n", encoding="utf-8")

    r = client.get("/daily")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert r.text.index("/daily/2024-03-05") < r.text.index("/daily/2024-01-01")
    assert "not-a-date" not in r.text


def test_index_without_notes(client) -> None:
    r = client.get("/daily")
    assert r.status_code == 200
    assert "<ol class=\"m-8\"></ol>" in r.text


def test_single_note_round_trip(client, content_dir) -> None:
    _write_notes(content_dir, {"2024-01-01": "first\n", "2024-01-15": "# Hi\n", "2024-03-05": "last\n"})

    r = client.get("/daily/2024-01-15")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "<h1>Hi</h1>" in r.text
    assert 'href="/daily/2024-01-01"' in r.text
    assert 'href="/daily/2024-03-05"' in r.text


def test_note_is_read_fresh_per_request(client, content_dir) -> None:
    _write_notes(content_dir, {"2024-01-15": "# One\n"})
    assert "<h1>One</h1>" in client.get("/daily/2024-01-15").text

    _write_notes(content_dir, {"2024-01-15": "# Two\n", "2024-01-16": "new\n"})
    r = client.get("/daily/2024-01-15")
    assert "<h1>Two</h1>" in r.text
    assert 'href="/daily/2024-01-16"' in r.text


def test_missing_note_is_404(client, caplog) -> None:
    caplog.set_level(logging.INFO, logger="crosscut.site")

    r = client.get("/daily/2099-01-01")
    assert r.status_code == 404
    assert "Not Found" in r.text
    assert any(rec.getMessage() == "note_not_found" for rec in caplog.records)


def test_malformed_date_falls_through_to_static(client) -> None:
    r = client.get("/daily/2024-1-01")
    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}


def test_static_file_is_served(client) -> None:
    r = client.get("/style.css")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/css")
    assert "margin: 0" in r.text


def test_missing_static_file_is_404(client) -> None:
    assert client.get("/missing.png").status_code == 404


def test_static_directory_index(client, site_root) -> None:
    (site_root / "static" / "talks").mkdir()
    (site_root / "static" / "talks" / "index.html").write_text("<p>talks</p>", encoding="utf-8")

    r = client.get("/talks/")
    assert r.status_code == 200
    assert "<p>talks</p>" in r.text


def test_nested_static_file_is_served(client, site_root) -> None:
    (site_root / "static" / "img").mkdir()
    (site_root / "static" / "img" / "logo.svg").write_text("<svg></svg>", encoding="utf-8")

    r = client.get("/img/logo.svg")
    assert r.status_code == 200
    assert r.text == "<svg></svg>"


def test_post_is_not_allowed(client) -> None:
    assert client.post("/daily").status_code == 405


def test_request_id_header(client) -> None:
    r = client.get("/daily")
    assert r.headers.get("x-request-id")

    r2 = client.get("/daily", headers={"X-Request-ID": "abc"})
    assert r2.headers["x-request-id"] == "abc"


def test_removed_content_dir_is_not_an_empty_listing(client, content_dir) -> None:
    shutil.rmtree(content_dir)

    r = client.get("/daily")
    assert r.status_code == 500
    assert r.json()["detail"] == "configuration_error"

    r2 = client.get("/daily/2024-01-01")
    assert r2.status_code == 500


def test_create_app_requires_content_dir(site_root) -> None:
    shutil.rmtree(site_root / "content" / "daily")
    from main import create_app

    with pytest.raises(ConfigurationError, match="content_dir_missing"):
        create_app()


def test_create_app_requires_static_dir(site_root) -> None:
    shutil.rmtree(site_root / "static")
    from main import create_app

    with pytest.raises(ConfigurationError, match="static_dir_missing"):
        create_app()


def test_note_with_invalid_utf8_still_renders(client, content_dir) -> None:
    (content_dir / "2024-01-15.md").write_bytes(b"# Caf\xe9\n")

    r = client.get("/daily/2024-01-15")
    assert r.status_code == 200
    assert "<h1>Caf�</h1>" in r.text


def test_directory_named_like_a_note_is_404(client, content_dir) -> None:
    (content_dir / "2024-01-15.md").mkdir()

    assert client.get("/daily/2024-01-15").status_code == 404
    assert "/daily/2024-01-15" not in client.get("/daily").text


def test_leading_dashed_block_is_rendered(client, content_dir) -> None:
    _write_notes(content_dir, {"2024-01-15": "---\nmood: good\n---\n# Hi\n"})

    r = client.get("/daily/2024-01-15")
    assert "mood: good" in r.text
    assert "<h1>Hi</h1>" in r.text
