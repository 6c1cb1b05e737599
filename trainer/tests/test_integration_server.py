import pytest
import requests
import logging
from datetime import datetime, timedelta, timezone

BASE_URL = "http://127.0.0.1:8000"
logger = logging.getLogger(__name__)

CARD = {
    "term": "deliverable",
    "definition_cn": "项目某一阶段结束时需要提交的具体产出物。",
    "wrong_definitions": ["项目启动前进行的风险评估会议。", "团队成员之间的绩效考核标准。"],
}


def post_term(group_id=None):
    """Helper for POST /terms"""
    payload = dict(CARD, group_id=group_id) if group_id else dict(CARD)
    r = requests.post(f"{BASE_URL}/terms", json=payload)
    logger.info("POST /terms → status=%s", r.status_code)
    return r


def post_group(name):
    r = requests.post(f"{BASE_URL}/groups", json={"name": name})
    logger.info("POST /groups name=%s → status=%s", name, r.status_code)
    return r


def start_session(group_id):
    r = requests.post(f"{BASE_URL}/sessions", json={"group_id": group_id})
    data = r.json()
    logger.info(
        "POST /sessions → status=%s state=%s pool=%s",
        r.status_code,
        data.get("state"),
        data.get("pool_size"),
    )
    return r


def post_answer(session, option):
    """Helper for POST /sessions/{id}/answers"""
    r = requests.post(
        f"{BASE_URL}/sessions/{session['session_id']}/answers",
        json={"position": session["position"], "option": option},
    )
    data = r.json()
    logger.info(
        "POST /answers → status=%s correct=%s ignored=%s state=%s",
        r.status_code,
        data.get("correct"),
        data.get("ignored"),
        data.get("state"),
    )
    return r


def get_due(group_id, until):
    """Helper for GET /due"""
    r = requests.get(
        f"{BASE_URL}/due", params={"group": group_id, "until": until.isoformat()}
    )
    data = r.json()
    logger.info(
        "GET /due until=%s → status=%s count=%s",
        until.isoformat(),
        r.status_code,
        data.get("count"),
    )
    return r


@pytest.mark.integration
def test_session_success_live():
    """One correct answer finishes the session and pushes the term out a day"""
    group = post_group("live-success").json()
    term = post_term(group["id"]).json()

    session = start_session(group["id"]).json()
    assert session["state"] == "presenting"

    result = post_answer(session, CARD["definition_cn"]).json()
    assert result["correct"] is True
    assert result["outcomes"] == [{"term_id": term["id"], "success": True}]

    now = datetime.now(timezone.utc)
    assert get_due(group["id"], now).json()["term_ids"] == []
    assert get_due(group["id"], now + timedelta(days=1, minutes=1)).json()["term_ids"] == [term["id"]]
    logger.info("✓ Passed: success scheduled one day out")


@pytest.mark.integration
def test_three_failures_live():
    """Three wrong answers mark the term failed and bring it back in 12h"""
    group = post_group("live-failure").json()
    term = post_term(group["id"]).json()

    session = start_session(group["id"]).json()
    for _ in range(3):
        session = post_answer(session, CARD["wrong_definitions"][0]).json()
        assert session["correct"] is False

    assert session["state"] == "finished"
    assert session["outcomes"] == [{"term_id": term["id"], "success": False}]

    now = datetime.now(timezone.utc)
    assert get_due(group["id"], now + timedelta(hours=11)).json()["term_ids"] == []
    assert get_due(group["id"], now + timedelta(hours=12, minutes=1)).json()["term_ids"] == [term["id"]]
    logger.info("✓ Passed: failed term due again in 12h")


@pytest.mark.integration
def test_duplicate_answer_live():
    """Replaying an answer for the same position is ignored"""
    group = post_group("live-duplicate").json()
    post_term(group["id"])
    post_term(group["id"])

    session = start_session(group["id"]).json()
    first = post_answer(session, CARD["wrong_definitions"][0]).json()
    second = post_answer(session, CARD["wrong_definitions"][0]).json()

    assert first["ignored"] is False
    assert second["ignored"] is True
    assert second["queue_length"] == first["queue_length"] == 3
    logger.info("✓ Passed: duplicate answer ignored")


@pytest.mark.integration
def test_empty_session_live():
    """A group with nothing due yields an empty session"""
    group = post_group("live-empty").json()

    r = start_session(group["id"])
    assert r.status_code == 201
    assert r.json()["state"] == "empty"
    assert "outcomes" not in r.json()
    logger.info("✓ Passed: empty pool handled")
