from __future__ import annotations
import json
import logging
import re
from http.cookies import SimpleCookie

from app import create_app
from blueprints.core.routes import JSONFormatter

VISITOR_COOKIE = "visitor_id"
MAX_AGE = 60 * 60 * 24 * 180  # 180 дней

def _get_cookie_from_headers(headers, name: str):
    for raw in headers.getlist("Set-Cookie"):
        c = SimpleCookie()
        c.load(raw)
        if name in c:
            return c[name]
    return None

def test_health_ok():
    app = create_app("testing")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["status"] == "ok"
        assert "visitor_id" in data

def test_sets_visitor_id_cookie():
    app = create_app("testing")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200

        cookie = _get_cookie_from_headers(rv.headers, VISITOR_COOKIE)
        assert cookie is not None, "должен быть установлен visitor_id"
        assert re.fullmatch(r"[0-9a-f]{32}", cookie.value), "ожидаем uuid4 hex"
        assert cookie["max-age"] == str(MAX_AGE)

        # повторный запрос с тем же cookie - новый не ставим
        rv2 = c.get("/health", headers={"Cookie": f"{VISITOR_COOKIE}={cookie.value}"})
        cookie2 = _get_cookie_from_headers(rv2.headers, VISITOR_COOKIE)
        if cookie2:
            assert cookie2.value == cookie.value

def test_home_redirects_to_login():
    app = create_app("testing")
    with app.test_client() as c:
        rv = c.get("/")
        assert rv.status_code == 302
        assert rv.headers["Location"].endswith("/auth/login")

def test_json_formatter_payload():
    record = logging.LogRecord("blueprints.assign.events", logging.INFO, __file__, 1,
                               "event %s", ("assignsubmission_link.submission_created",), None)
    record.user_id = 7
    payload = json.loads(JSONFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "blueprints.assign.events"
    assert payload["msg"] == "event assignsubmission_link.submission_created"
    assert payload["user_id"] == 7
