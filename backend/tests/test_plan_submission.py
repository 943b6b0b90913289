from __future__ import annotations

from datetime import datetime, timezone

import pytest

from portfolio_ceo.schemas.action import CriticalAction, QuickAction
from portfolio_ceo.schemas.analysis import AnalysisBundle
from portfolio_ceo.schemas.plan import PlanRequest
from portfolio_ceo.services import plan_submission
from portfolio_ceo.services.action_lists import ActionListManager
from portfolio_ceo.services.metrics import save_metrics
from portfolio_ceo.services.plan_submission import SubmissionContext, build_payload, priority_for
from portfolio_ceo.storage.base import USER_CODE_KEY

FIXED_TIME = datetime(2024, 5, 1, 9, 30, 15, 123000, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("urgency", "expected"),
    [("high", "ALTA"), ("medium", "MEDIA"), ("low", "BAJA"), (None, "BAJA"), ("", "BAJA"), ("HIGH", "BAJA")],
)
def test_priority_for_is_total(urgency, expected):
    assert priority_for(urgency) == expected


def test_format_timestamp_uses_utc_with_milliseconds():
    assert plan_submission.format_timestamp(FIXED_TIME) == "2024-05-01T09:30:15.123Z"
    assert plan_submission.format_timestamp(datetime(2024, 5, 1, 9, 30)) == "2024-05-01T09:30:00.000Z"


def test_build_payload_projects_actions_and_keys():
    context = SubmissionContext(
        action=plan_submission.ACTION_NAVIGATE_TO_PLANES,
        critical_actions=[
            CriticalAction(id="critical-0", action="Raise rent", impact="+$10K", urgency="high", details="14 units under market"),
            CriticalAction(id="critical-1", action="Fix roof", impact="+$2K", urgency=None, details=""),
        ],
        quick_actions=[QuickAction(id="quick-0", action="Call tenants")],
        metrics={"current_noi": "$847K"},
        executive_summary="Summary",
        key_metrics={"current_noi": "$847K"},
        user_code="ABC12345",
        timestamp=FIXED_TIME,
    )

    payload = build_payload(context)

    assert list(payload) == [
        "action",
        "timestamp",
        "userCode",
        "metrics",
        "executive_summary",
        "top_opportunities",
        "quick_actions",
        "dashboard_text",
    ]
    assert payload["action"] == "navigate_to_planes"
    assert payload["timestamp"] == "2024-05-01T09:30:15.123Z"
    assert payload["userCode"] == "ABC12345"
    assert payload["top_opportunities"] == [
        {"titulo": "Raise rent", "descripcion": "14 units under market", "valor_anual": "+$10K", "prioridad": "ALTA"},
        {"titulo": "Fix roof", "descripcion": "", "valor_anual": "+$2K", "prioridad": "BAJA"},
    ]
    assert payload["quick_actions"] == [{"descripcion": "Call tenants", "completada": False}]


def test_dashboard_text_sections_are_ordered():
    context = SubmissionContext(
        action=plan_submission.ACTION_CREATE_PLAN,
        critical_actions=[CriticalAction(id="critical-0", action="Raise rent", impact="+$10K", urgency="medium")],
        quick_actions=[],
        metrics={"current_noi": "$847K"},
        executive_summary="Portfolio is healthy.",
        key_metrics={"current_noi": "$847K", "occupancy": "94%"},
        user_code="ABC12345",
        timestamp=FIXED_TIME,
        plan_request=PlanRequest(
            nombre_plan="Plan Miami",
            duracion="4 meses",
            roi_esperado="300%",
            especificaciones="Aumentar ROI",
        ),
    )

    payload = build_payload(context)
    text = payload["dashboard_text"]

    headings = [
        "PORTFOLIO CEO DASHBOARD",
        "CURRENT METRICS",
        "EXECUTIVE SUMMARY",
        "KEY METRICS",
        "TOP OPPORTUNITIES",
        "QUICK ACTIONS (NEXT 30 DAYS)",
        "PLAN REQUEST",
    ]
    positions = [text.index(heading) for heading in headings]
    assert positions == sorted(positions)
    assert "User code: ABC12345" in text
    assert "- Current NOI: $847K (Monthly recurring income)" in text
    assert "- Occupancy: 94%" in text
    assert "1. Raise rent | +$10K | Priority: MEDIA" in text
    assert "QUICK ACTIONS (NEXT 30 DAYS)\n- None" in text
    assert "- Vacancy Cost: N/A" in text
    assert payload["plan_request"]["nombre_plan"] == "Plan Miami"
    assert payload["plan_request"]["numero_planes"] is None


def test_submit_posts_payload_through_client(store, webhook):
    bundle = AnalysisBundle(
        executive_summary="Summary",
        critical_actions=[
            {"action": "Raise rent", "impact": "+$10K", "urgency": "high", "details": "14 units under market"}
        ],
    )
    store.set(USER_CODE_KEY, "ABC12345")
    save_metrics(store, "financial", {"current_noi": "$100K"})
    context = plan_submission.context_from_store(
        store,
        plan_submission.ACTION_NAVIGATE_TO_PLANES,
        bundle,
        "financial",
    )

    result = plan_submission.submit(context, webhook)

    assert result.is_ok
    assert len(webhook.posted) == 1
    payload = webhook.posted[0]
    assert payload["top_opportunities"][0] == {
        "titulo": "Raise rent",
        "descripcion": "14 units under market",
        "valor_anual": "+$10K",
        "prioridad": "ALTA",
    }
    assert payload["metrics"]["current_noi"] == "$100K"
    assert payload["userCode"] == "ABC12345"
    assert payload["quick_actions"] == []
    assert "plan_request" not in payload


def test_submission_reflects_user_edits(store, webhook):
    bundle = AnalysisBundle(critical_actions=[{"action": "Raise rent", "urgency": "high"}])
    manager = ActionListManager(store, bundle)
    manager.load()
    manager.update("critical", "critical-0", {"urgency": "low"})
    manager.add("quick", {"action": "Inspect roof"})

    context = plan_submission.context_from_store(store, plan_submission.ACTION_CREATE_PLAN, bundle, "financial")
    plan_submission.submit(context, webhook)

    payload = webhook.posted[0]
    assert payload["top_opportunities"][0]["prioridad"] == "BAJA"
    assert payload["quick_actions"] == [{"descripcion": "Inspect roof", "completada": False}]
