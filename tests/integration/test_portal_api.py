"""API tests for the recruiting portal (FastAPI TestClient, in-memory SQLite)."""
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import portal.db
from portal.auth.jwt import create_access_token
from portal.main import app
from recruiting.review.models import Evaluation
from tests.fixtures.recruiting import make_application, make_posting, make_program


def _auth(sub, role, name=None):
    claims = {"sub": sub, "role": role}
    if name:
        claims["name"] = name
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def reviewer_headers():
    return _auth("rev-1", "reviewer", "Jane Reviewer")


@pytest.fixture
def applicant_headers():
    return _auth("user-9", "applicant")


@pytest.fixture
def client(engine):
    portal.db.configure(engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def seeded(engine):
    """Program + posting with applications a (newest) .. d (oldest)."""
    with Session(engine) as s:
        program = make_program(s)
        posting = make_posting(s, program=program)
        d = make_application(s, posting, name="Dee", minutes=0)
        c = make_application(s, posting, name="Cee", minutes=1)
        b = make_application(s, posting, name="Bee", minutes=2)
        a = make_application(s, posting, name="Ay", minutes=3)
        ids = {
            "program": program.id,
            "posting": posting.id,
            "apps": [a.id, b.id, c.id, d.id],
        }
        s.commit()
    return ids


class TestHealth:

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["database"] == "healthy"
        assert body["dialect"] == "sqlite"
        assert body["missing_tables"] == []

    def test_missing_table_degrades(self, client, engine):
        Evaluation.__table__.drop(engine)
        body = client.get("/health").json()
        assert body["status"] == "degraded"
        assert body["database"] == "healthy"
        assert body["missing_tables"] == ["application_evaluations"]


class TestAuth:

    def test_no_token(self, client):
        r = client.get("/admin/applications")
        assert r.status_code in (401, 403)

    def test_bad_token(self, client):
        r = client.get("/admin/applications", headers={"Authorization": "Bearer nope"})
        assert r.status_code == 401

    def test_applicant_cannot_review(self, client, applicant_headers):
        r = client.get("/admin/applications", headers=applicant_headers)
        assert r.status_code == 403

    def test_expired_token(self, client):
        token = create_access_token(
            {"sub": "rev-1", "role": "reviewer"}, expires_delta=timedelta(minutes=-5)
        )
        r = client.get("/admin/applications", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401


class TestApplicationsApi:

    def test_list(self, client, seeded, reviewer_headers):
        r = client.get("/admin/applications", headers=reviewer_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 4
        assert body["total_pages"] == 1
        assert [item["id"] for item in body["data"]] == seeded["apps"]

    def test_list_bad_posting_filter(self, client, seeded, reviewer_headers):
        r = client.get("/admin/applications?posting_id=abc", headers=reviewer_headers)
        assert r.status_code == 400

    def test_list_page_zero(self, client, seeded, reviewer_headers):
        r = client.get("/admin/applications?page=0", headers=reviewer_headers)
        assert r.status_code == 422

    def test_detail_with_navigation(self, client, seeded, reviewer_headers):
        a, b, c, d = seeded["apps"]
        r = client.get(f"/admin/applications/{b}", headers=reviewer_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["prev_id"] == a
        assert body["next_id"] == c
        assert body["attachments"] == [
            {"url": "https://files.example.com/cv.pdf", "name": "cv.pdf"}
        ]

    def test_detail_missing(self, client, seeded, reviewer_headers):
        r = client.get("/admin/applications/999", headers=reviewer_headers)
        assert r.status_code == 404
        assert r.json()["kind"] == "not_found"

    def test_refetch_after_leaving_filter(self, client, seeded, reviewer_headers):
        a, b, c, d = seeded["apps"]
        url = f"/admin/applications/{b}?status=submitted"
        r = client.get(url, headers=reviewer_headers)
        assert r.status_code == 200
        assert (r.json()["prev_id"], r.json()["next_id"]) == (a, c)

        r = client.patch(
            f"/admin/applications/{b}/status",
            json={"status": "first_pass"},
            headers=reviewer_headers,
        )
        assert r.status_code == 200

        r = client.get(url, headers=reviewer_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "first_pass"
        assert body["prev_id"] is None
        assert body["next_id"] is None

    def test_transition_flow(self, client, seeded, reviewer_headers):
        app_id = seeded["apps"][0]
        r = client.patch(
            f"/admin/applications/{app_id}/status",
            json={"status": "final_pass"},
            headers=reviewer_headers,
        )
        assert r.status_code == 200
        assert r.json() == {"id": app_id, "status": "final_pass"}

        r = client.get(
            f"/admin/programs/{seeded['program']}/participants", headers=reviewer_headers
        )
        assert r.status_code == 200
        assert [p["application_id"] for p in r.json()] == [app_id]

        r = client.get(f"/admin/applications/{app_id}", headers=reviewer_headers)
        log = r.json()["status_logs"][0]
        assert log["to_status"] == "final_pass"
        assert log["changed_by_name"] == "Jane Reviewer"

    def test_invalid_transition(self, client, seeded, reviewer_headers):
        app_id = seeded["apps"][0]
        r = client.patch(
            f"/admin/applications/{app_id}/status",
            json={"status": "submitted"},
            headers=reviewer_headers,
        )
        assert r.status_code == 400
        assert r.json()["kind"] == "invalid_transition"

    def test_evaluations(self, client, seeded, reviewer_headers):
        app_id = seeded["apps"][0]
        r = client.post(
            f"/admin/applications/{app_id}/evaluations",
            json={"score_criteria_1": 70, "score_criteria_2": 80, "score_criteria_3": 90},
            headers=reviewer_headers,
        )
        assert r.status_code == 201
        evaluation = r.json()
        assert evaluation["total_score"] == 240
        assert evaluation["evaluated_by_name"] == "Jane Reviewer"

        r = client.get(f"/admin/applications/{app_id}/evaluations", headers=reviewer_headers)
        assert [e["id"] for e in r.json()] == [evaluation["id"]]

        r = client.get("/admin/applications", headers=reviewer_headers)
        item = next(i for i in r.json()["data"] if i["id"] == app_id)
        assert item["eval_score"] == 240

        r = client.delete(
            f"/admin/applications/evaluations/{evaluation['id']}", headers=reviewer_headers
        )
        assert r.status_code == 200
        r = client.get(f"/admin/applications/{app_id}/evaluations", headers=reviewer_headers)
        assert r.json() == []

    def test_evaluation_out_of_range(self, client, seeded, reviewer_headers):
        r = client.post(
            f"/admin/applications/{seeded['apps'][0]}/evaluations",
            json={"score_criteria_1": 101, "score_criteria_2": 80, "score_criteria_3": 90},
            headers=reviewer_headers,
        )
        assert r.status_code == 400
        assert r.json()["kind"] == "invalid_score"

    def test_delete_missing_evaluation(self, client, seeded, reviewer_headers):
        r = client.delete("/admin/applications/evaluations/999", headers=reviewer_headers)
        assert r.status_code == 404

    def test_export_and_postings(self, client, seeded, reviewer_headers):
        r = client.get("/admin/applications/export", headers=reviewer_headers)
        assert r.status_code == 200
        rows = r.json()
        assert [row["id"] for row in rows] == seeded["apps"]
        assert rows[0]["status"] == "Submitted"

        r = client.get("/admin/applications/postings", headers=reviewer_headers)
        assert r.json() == [{"id": seeded["posting"], "name": "Backend Intern"}]


class TestParticipantsApi:

    def test_evaluate_participant(self, client, seeded, reviewer_headers):
        app_id = seeded["apps"][1]
        client.patch(
            f"/admin/applications/{app_id}/status",
            json={"status": "final_pass"},
            headers=reviewer_headers,
        )
        participants = client.get(
            f"/admin/programs/{seeded['program']}/participants", headers=reviewer_headers
        ).json()
        participation_id = participants[0]["id"]

        r = client.put(
            f"/admin/participations/{participation_id}/evaluation",
            json={
                "eval_scores": {"teamwork": 90},
                "eval_total_score": 90,
                "participation_state": "completed",
                "role": "Team lead",
            },
            headers=reviewer_headers,
        )
        assert r.status_code == 200
        body = r.json()
        assert body["participation_state"] == "completed"
        assert body["evaluated_by_name"] == "Jane Reviewer"

    def test_unknown_state_rejected(self, client, seeded, reviewer_headers):
        r = client.put(
            "/admin/participations/1/evaluation",
            json={"eval_scores": {}, "eval_total_score": 0, "participation_state": "graduated"},
            headers=reviewer_headers,
        )
        assert r.status_code == 422

    def test_missing_program(self, client, seeded, reviewer_headers):
        r = client.get("/admin/programs/999/participants", headers=reviewer_headers)
        assert r.status_code == 404

    def test_program_phase(self, client, seeded, reviewer_headers):
        r = client.get(f"/admin/programs/{seeded['program']}/phase", headers=reviewer_headers)
        assert r.status_code == 200
        assert r.json()["phase"] in ("upcoming", "in_progress", "ended")


class TestSubmissionApi:

    def _body(self, posting_id):
        return {
            "posting_id": posting_id,
            "applicant_name": "Sam Choi",
            "applicant_email": "sam@example.com",
            "applicant_phone": "010-2222-3333",
            "attachments": [{"url": "https://files.example.com/sam.pdf", "name": "sam.pdf"}],
        }

    def test_open_posting(self, client, engine, applicant_headers):
        today = date.today()
        with Session(engine) as s:
            posting = make_posting(
                s, start=today - timedelta(days=1), end=today + timedelta(days=1)
            )
            posting_id = posting.id
            s.commit()

        r = client.post("/applications", json=self._body(posting_id), headers=applicant_headers)
        assert r.status_code == 201
        assert r.json()["status"] == "submitted"

    def test_closed_posting(self, client, engine, applicant_headers):
        today = date.today()
        with Session(engine) as s:
            posting = make_posting(
                s, start=today - timedelta(days=10), end=today - timedelta(days=5)
            )
            posting_id = posting.id
            s.commit()

        r = client.post("/applications", json=self._body(posting_id), headers=applicant_headers)
        assert r.status_code == 400
        assert r.json()["kind"] == "submission_closed"

    def test_too_many_attachments(self, client, seeded, applicant_headers):
        body = self._body(seeded["posting"])
        body["attachments"] = body["attachments"] * 3
        r = client.post("/applications", json=body, headers=applicant_headers)
        assert r.status_code == 422

    def test_reviewer_cannot_submit(self, client, seeded, reviewer_headers):
        r = client.post(
            "/applications", json=self._body(seeded["posting"]), headers=reviewer_headers
        )
        assert r.status_code == 403
