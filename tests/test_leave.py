from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from hrportal.core.roles import RoleName
from hrportal.models.hrms import LeaveRequest, LeaveStatus


def _leave_payload(leave_type, *, start="2024-07-01", end="2024-07-05", reason="Family holiday abroad"):
    return {"typeId": str(leave_type.id), "dateRange": {"from": start, "to": end}, "reason": reason}


def _count_leave(session):
    with session() as db:
        return db.scalar(select(func.count()).select_from(LeaveRequest))


def test_submit_creates_pending_request(client, make_user, auth_headers, annual_leave):
    employee = make_user()
    resp = client.post("/leave", json=_leave_payload(annual_leave), headers=auth_headers(employee))
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "PENDING"
    assert body["userId"] == str(employee.id)
    assert body["typeName"] == "Annual Leave"
    assert body["startDate"] == "2024-07-01"
    assert body["endDate"] == "2024-07-05"


def test_single_day_leave_is_allowed(client, make_user, auth_headers, annual_leave):
    employee = make_user()
    payload = _leave_payload(annual_leave, start="2024-07-01", end="2024-07-01")
    assert client.post("/leave", json=payload, headers=auth_headers(employee)).status_code == 201


def test_end_before_start_is_400_and_not_stored(client, session, make_user, auth_headers, annual_leave):
    employee = make_user()
    payload = _leave_payload(annual_leave, start="2024-07-05", end="2024-07-01")
    resp = client.post("/leave", json=payload, headers=auth_headers(employee))
    assert resp.status_code == 400
    [message] = resp.json()["errors"]["dateRange"]
    assert "End date cannot be before the start date." in message
    assert _count_leave(session) == 0


def test_missing_start_date_is_400(client, make_user, auth_headers, annual_leave):
    employee = make_user()
    payload = _leave_payload(annual_leave)
    payload["dateRange"]["from"] = None
    resp = client.post("/leave", json=payload, headers=auth_headers(employee))
    assert resp.status_code == 400
    [message] = resp.json()["errors"]["dateRange.from"]
    assert "Start date is required." in message


@pytest.mark.parametrize(("reason", "expected"), [("x" * 9, 400), ("x" * 10, 201), ("x" * 500, 201), ("x" * 501, 400)])
def test_reason_length_bounds(client, make_user, auth_headers, annual_leave, reason, expected):
    employee = make_user()
    resp = client.post("/leave", json=_leave_payload(annual_leave, reason=reason), headers=auth_headers(employee))
    assert resp.status_code == expected


def test_unknown_leave_type_is_400(client, session, make_user, auth_headers, annual_leave):
    employee = make_user()
    payload = {**_leave_payload(annual_leave), "typeId": str(uuid4())}
    resp = client.post("/leave", json=payload, headers=auth_headers(employee))
    assert resp.status_code == 400
    assert "typeId" in resp.json()["errors"]
    assert _count_leave(session) == 0


def test_history_only_returns_own_requests(client, make_user, auth_headers, annual_leave):
    alice = make_user()
    bob = make_user()
    client.post("/leave", json=_leave_payload(annual_leave), headers=auth_headers(alice))
    client.post("/leave", json=_leave_payload(annual_leave, reason="Medical appointment"), headers=auth_headers(bob))

    resp = client.get("/leave/history", params={"userId": str(bob.id)}, headers=auth_headers(alice))
    assert resp.status_code == 200
    rows = resp.json()
    assert len(rows) == 1
    assert rows[0]["userId"] == str(alice.id)


def test_history_is_available_to_every_role(client, make_user, auth_headers):
    admin = make_user(RoleName.ADMINISTRATOR)
    resp = client.get("/leave/history", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json() == []


def test_leave_types_are_seeded(client, make_user, auth_headers):
    employee = make_user()
    resp = client.get("/leave/types", headers=auth_headers(employee))
    assert resp.status_code == 200
    by_name = {t["name"]: t["defaultDays"] for t in resp.json()}
    assert by_name["Annual Leave"] == 20
    assert by_name["Maternity Leave"] == 90
    assert list(by_name) == sorted(by_name)


def test_leave_submission_requires_token(client, annual_leave):
    assert client.post("/leave", json=_leave_payload(annual_leave)).status_code == 401


def test_pending_is_the_only_decidable_state():
    assert LeaveStatus.PENDING.can_transition_to(LeaveStatus.APPROVED)
    assert LeaveStatus.PENDING.can_transition_to(LeaveStatus.REJECTED)
    assert not LeaveStatus.APPROVED.can_transition_to(LeaveStatus.REJECTED)
    assert not LeaveStatus.REJECTED.can_transition_to(LeaveStatus.PENDING)
