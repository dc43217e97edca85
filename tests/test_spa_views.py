# tests/test_spa_views.py
from __future__ import annotations

import pytest


@pytest.fixture
def dist(tmp_path, settings):
    (tmp_path / "index.html").write_text("<html>cleanly</html>", encoding="utf-8")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "app.js").write_text("console.log(1)", encoding="utf-8")
    settings.WASHAPP_FRONTEND_DIST = tmp_path
    return tmp_path


def test_healthcheck(client):
    resp = client.get("/health/")
    assert resp.status_code == 200
    assert b"running" in resp.content


def test_static_asset(client, dist):
    resp = client.get("/assets/app.js")
    assert resp.status_code == 200
    assert b"".join(resp.streaming_content) == b"console.log(1)"


@pytest.mark.parametrize("path", ["/", "/calendar", "/clients/42", "/../../etc/passwd"])
def test_unknown_paths_fall_back_to_index(client, dist, path):
    resp = client.get(path)
    assert resp.status_code == 200
    assert b"cleanly" in b"".join(resp.streaming_content)


def test_missing_bundle(client, tmp_path, settings):
    settings.WASHAPP_FRONTEND_DIST = tmp_path / "nope"
    assert client.get("/calendar").status_code == 404


def test_api_is_not_swallowed(client, dist):
    assert client.get("/api/nope/").status_code == 404
