from __future__ import annotations

from portfolio_ceo.clients.webhook import WebhookResponse
from portfolio_ceo.core.config import settings
from portfolio_ceo.services.result import Err, ErrorKind, Ok

ANALYSIS = {
    "analysis": {
        "executive_summary": "One big win.",
        "critical_actions": [
            {"action": "Raise rent", "impact": "+$10K", "urgency": "high", "details": "14 units under market"}
        ],
    },
    "metrics": {"current_noi": "$900K"},
    "next_30_days": ["Send notices", "Call tenants"],
}


def test_dashboard_uses_fallback_when_webhook_is_down(client):
    response = client.get("/api/dashboard")

    assert response.status_code == 200
    payload = response.json()
    assert payload["is_fallback"] is True
    assert payload["metrics_variant"] == "financial"
    assert [item["id"] for item in payload["critical_actions"]] == ["critical-0", "critical-1", "critical-2"]
    assert len(payload["quick_actions"]) == 4


def test_dashboard_seeds_from_fetched_analysis(client, webhook):
    webhook.fetch_result = Ok(WebhookResponse(status_code=200, text="", data=ANALYSIS))

    payload = client.get("/api/dashboard").json()

    assert payload["is_fallback"] is False
    assert payload["executive_summary"] == "One big win."
    assert payload["key_metrics"] == {"current_noi": "$900K"}
    assert payload["critical_actions"] == [
        {
            "id": "critical-0",
            "action": "Raise rent",
            "impact": "+$10K",
            "urgency": "high",
            "details": "14 units under market",
        }
    ]


def test_action_crud_flow(client, webhook):
    webhook.fetch_result = Ok(WebhookResponse(status_code=200, text="", data=ANALYSIS))

    created = client.post("/api/actions/quick", json={"action": "Inspect roof"})
    assert created.status_code == 201
    assert created.json() == {"id": "quick-2", "action": "Inspect roof"}

    updated = client.patch("/api/actions/critical/critical-0", json={"urgency": "medium"})
    assert updated.status_code == 200
    assert updated.json()["urgency"] == "medium"
    assert updated.json()["action"] == "Raise rent"

    deleted = client.delete("/api/actions/quick/quick-0")
    assert deleted.status_code == 200
    assert [item["id"] for item in deleted.json()["quick_actions"]] == ["quick-1", "quick-2"]

    listing = client.get("/api/actions").json()
    assert [item["id"] for item in listing["quick_actions"]] == ["quick-1", "quick-2"]
    assert listing["critical_actions"][0]["urgency"] == "medium"


def test_action_errors_map_to_http_status(client):
    blank = client.post("/api/actions/critical", json={"action": "  "})
    assert blank.status_code == 422
    assert blank.json()["detail"] == "action: text is required"

    missing = client.patch("/api/actions/quick/quick-404", json={"action": "Nope"})
    assert missing.status_code == 404

    missing_delete = client.delete("/api/actions/critical/critical-404")
    assert missing_delete.status_code == 404

    assert client.post("/api/actions/weekly", json={"action": "x"}).status_code == 422


def test_metrics_round_trip(client):
    saved = client.put("/api/dashboard/metrics", json={"current_noi": "$1M", "capex_due": 45000})
    assert saved.status_code == 200

    fetched = client.get("/api/dashboard/metrics").json()
    assert fetched["variant"] == "financial"
    assert fetched["metrics"]["current_noi"] == "$1M"
    assert fetched["metrics"]["capex_due"] == "45000"


def test_summary_returns_webhook_text(client, webhook):
    webhook.post_result = Ok(WebhookResponse(status_code=200, text="Resumen ejecutivo nuevo"))

    response = client.post("/api/dashboard/summary")

    assert response.status_code == 200
    assert response.json() == {"summary": "Resumen ejecutivo nuevo"}
    assert webhook.posted[0]["action"] == "generate_executive_summary"


def test_create_plan_stores_history(client, webhook):
    webhook.post_result = Ok(
        WebhookResponse(status_code=200, text='{"title": "Plan Miami"}', data={"title": "Plan Miami"})
    )

    response = client.post(
        "/api/plans",
        json={
            "nombre_plan": "Plan Miami",
            "duracion": "4 meses",
            "roi_esperado": "300%",
            "especificaciones": "Aumentar ROI",
            "numero_planes": 2,
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["action"] == "create_plan"
    assert body["plan"]["title"] == "Plan Miami"
    assert webhook.posted[0]["plan_request"]["numero_planes"] == 2

    plans = client.get("/api/plans").json()
    assert plans["total"] == 1
    assert plans["items"][0]["id"] == "plan-1"


def test_plan_request_requires_fields(client, webhook):
    response = client.post("/api/plans", json={"nombre_plan": "  ", "duracion": "1", "roi_esperado": "1", "especificaciones": "x"})

    assert response.status_code == 422
    assert webhook.posted == []


def test_webhook_failure_returns_bad_gateway(client, webhook):
    webhook.post_result = Err(ErrorKind.HTTP_STATUS, "Error: 500 Internal Server Error", status_code=500)

    response = client.post("/api/plans/navigate")

    assert response.status_code == 502
    assert response.json() == {"detail": "Error: 500 Internal Server Error"}
    assert client.get("/api/plans").json()["total"] == 0


def test_navigate_sends_seeded_opportunities(client, webhook):
    webhook.fetch_result = Ok(WebhookResponse(status_code=200, text="", data=ANALYSIS))

    response = client.post("/api/plans/navigate")

    assert response.status_code == 200
    assert response.json()["action"] == "navigate_to_planes"
    assert webhook.posted[0]["top_opportunities"][0] == {
        "titulo": "Raise rent",
        "descripcion": "14 units under market",
        "valor_anual": "+$10K",
        "prioridad": "ALTA",
    }


def test_refresh_with_reseed_replaces_lists(client, webhook):
    client.post("/api/actions/critical", json={"action": "Keep me?"})
    webhook.fetch_result = Ok(WebhookResponse(status_code=200, text="", data=ANALYSIS))

    response = client.post("/api/dashboard/refresh", params={"reseed": "true"})

    assert response.status_code == 200
    assert [item["action"] for item in response.json()["critical_actions"]] == ["Raise rent"]


def test_refresh_with_reseed_refuses_fallback(client):
    response = client.post("/api/dashboard/refresh", params={"reseed": "true"})

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Error:")


def test_session_flow_without_auth(client):
    assert client.get("/api/session/screen").json()["screen"] == "welcome"
    assert client.post("/api/session/visit").json()["screen"] == "login"

    wrong = client.post("/api/session/login", json={"access_code": "nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"detail": "Incorrect access code."}

    logged_in = client.post("/api/session/login", json={"access_code": settings.access_code})
    assert logged_in.json()["screen"] == "onboarding"

    suggested = client.get("/api/session/accounts/suggest").json()["code"]
    created = client.post("/api/session/accounts", json={"code": suggested})
    assert created.status_code == 201
    assert client.post("/api/session/accounts", json={"code": suggested}).status_code == 422

    onboarded = client.post("/api/session/onboarding", json={"metrics": {"current_noi": "$500K"}})
    assert onboarded.json() == {
        "screen": "dashboard",
        "user_code": suggested,
        "logged_in": True,
        "onboarding_completed": True,
    }

    assert client.post("/api/session/logout").json()["screen"] == "login"
    assert client.post("/api/session/login-code", json={"code": suggested.lower()}).json()["user_code"] == suggested
    assert client.post("/api/session/login-code", json={"code": "ZZZZ0000"}).status_code == 404


def test_auth_requires_login_cookie(client, monkeypatch):
    monkeypatch.setattr(settings, "auth_enabled", True)

    assert client.get("/api/actions").status_code == 401

    visit = client.post("/api/session/visit")
    assert visit.status_code == 200
    assert settings.session_cookie_name in visit.cookies
    assert client.get("/api/actions").status_code == 401

    client.post("/api/session/login", json={"access_code": settings.access_code})
    assert client.get("/api/actions").status_code == 200

    client.post("/api/session/logout")
    assert client.get("/api/actions").status_code == 401


def test_clients_do_not_share_data(client, monkeypatch):
    monkeypatch.setattr(settings, "auth_enabled", True)
    client.post("/api/session/login", json={"access_code": settings.access_code})
    client.post("/api/actions/quick", json={"action": "Mine only"})

    client.cookies.clear()
    client.post("/api/session/login", json={"access_code": settings.access_code})
    quick = client.get("/api/actions").json()["quick_actions"]

    assert "Mine only" not in [item["action"] for item in quick]


def test_action_crud_does_not_refetch_analysis_once_seeded(client, webhook):
    client.get("/api/dashboard")
    fetches_after_seed = webhook.fetch_calls

    for label in ("One", "Two", "Three"):
        assert client.post("/api/actions/quick", json={"action": label}).status_code == 201
    assert client.patch("/api/actions/critical/critical-0", json={"urgency": "low"}).status_code == 200
    assert client.delete("/api/actions/quick/quick-0").status_code == 200
    assert client.get("/api/actions").status_code == 200

    assert webhook.fetch_calls == fetches_after_seed
