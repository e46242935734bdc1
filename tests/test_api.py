import time
from datetime import datetime, timedelta, timezone

from starlette.requests import Request

from middlewares.error_handler import _elapsed_ms


def _recent_days(n):
    today = datetime.now(timezone.utc).date()
    return [(today - timedelta(days=i)).isoformat() for i in range(n)]


def _create_student(client, student_id="s1", grade=9):
    res = client.post("/v1/students/", json={"id": student_id, "name": "Musu Kollie", "grade": grade})
    assert res.status_code == 200
    return res.json()["data"]


def _create_rule(client, **overrides):
    body = {
        "name": "Perfect week",
        "description": "Five present days in a row",
        "condition": "attendance_perfect_week",
        "point_value": 15,
        "created_by": "admin-1",
    }
    body.update(overrides)
    return client.post("/v1/point-rules/", json=body)


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert "X-Latency-Ms" in res.headers


# ==========================================================
# /v1/grading
# ==========================================================

def test_grade_scale_has_eleven_levels(client):
    data = client.get("/v1/grading/scale").json()["data"]
    assert [row["grade"] for row in data][:3] == ["A1", "A2", "A3"]
    assert len(data) == 11


def test_final_grade_endpoint(client):
    res = client.post("/v1/grading/final-grade", json={"continuous_assessment": 100, "external_examination": 0})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["final_score"] == 30
    assert data["grade"] == "F9"


def test_summary_endpoint(client):
    body = {"subject_grades": [
        {"subject": "English", "grade": "A1"},
        {"subject": "Mathematics", "grade": "A1"},
        {"subject": "Biology", "grade": "A2"},
        {"subject": "Chemistry", "grade": "B2"},
        {"subject": "Physics", "grade": "C4"},
    ]}
    data = client.post("/v1/grading/summary", json=body).json()["data"]
    assert data["eligibility"]["is_eligible"] is True
    assert data["aggregate_score"] == 1 + 1 + 2 + 4 + 6
    assert data["division"]["division"] == "Division I"


# ==========================================================
# /v1/point-rules
# ==========================================================

def test_conditions_list(client):
    data = client.get("/v1/point-rules/conditions").json()["data"]
    assert len(data) == 6
    assert data[0]["value"] == "attendance_perfect_week"


def test_rule_validation_errors(client):
    res = _create_rule(client, point_value=0)
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"

    assert _create_rule(client, condition="homework_streak").status_code == 422
    assert _create_rule(client, name="   ").status_code == 422
    assert _create_rule(client, parameters={"days_early": 31}).status_code == 422


def test_rule_crud(client):
    rule = _create_rule(client, parameters={"min_score": 90}).json()["data"]
    assert rule["parameters"]["min_score"] == 90

    res = client.put(f"/v1/point-rules/{rule['id']}", json={"point_value": 20})
    assert res.json()["data"]["point_value"] == 20

    res = client.put(f"/v1/point-rules/{rule['id']}", json={})
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "INVALID_RULE"

    assert client.delete(f"/v1/point-rules/{rule['id']}").status_code == 200
    res = client.get(f"/v1/point-rules/{rule['id']}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


# ==========================================================
# 제안 생성 → 승인 흐름
# ==========================================================

def test_generate_and_apply_suggestion(client):
    _create_student(client)
    for day in _recent_days(5):
        res = client.post("/v1/students/s1/attendance", json={"date": day, "status": "present"})
        assert res.status_code == 200
    _create_rule(client)

    res = client.post("/v1/point-suggestions/generate", json={"student_id": "s1", "teacher_id": "teacher-1"})
    assert res.status_code == 200
    [suggestion] = res.json()["data"]
    assert suggestion["suggested_points"] == 15
    assert suggestion["id"].startswith("suggestion_")

    pending = client.get("/v1/point-suggestions/", params={"student_id": "s1", "pending_only": True}).json()["data"]
    assert [s["id"] for s in pending] == [suggestion["id"]]

    res = client.post(f"/v1/point-suggestions/{suggestion['id']}/apply")
    assert res.status_code == 200
    assert res.json()["data"]["is_applied"] is True

    res = client.post(f"/v1/point-suggestions/{suggestion['id']}/apply")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "SUGGESTION_ALREADY_APPLIED"

    student = client.get("/v1/students/s1").json()["data"]
    assert student["points"] == 15
    history = client.get("/v1/students/s1/points").json()["data"]
    assert [t["points"] for t in history] == [15]


def test_generate_for_missing_student(client):
    res = client.post("/v1/point-suggestions/generate", json={"student_id": "ghost", "teacher_id": "teacher-1"})
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


def test_stateless_evaluate(client):
    body = {
        "rules": [{"id": "r1", "name": "High score", "condition": "assignment_high_score", "point_value": 5}],
        "context": {
            "student": {"id": "s1", "name": "Musu Kollie", "grade": 9},
            "grades": [{
                "id": "g1", "student_id": "s1", "class_id": "c1",
                "assignment_name": "Quiz", "score": "95", "date_assigned": "2024-03-15",
            }],
            "teacher_id": "teacher-1",
        },
        "now": "2024-03-15T12:00:00Z",
    }
    data = client.post("/v1/point-suggestions/evaluate", json=body).json()["data"]
    assert len(data) == 1
    assert data[0]["rule_id"] == "r1"


def test_dismiss_missing_suggestion(client):
    assert client.delete("/v1/point-suggestions/nope").status_code == 404


# ==========================================================
# 성적 / 성적표
# ==========================================================

def test_create_grade_computes_liberian_grade(client):
    _create_student(client, grade=12)
    res = client.post("/v1/grades/", json={
        "student_id": "s1", "class_id": "c1", "assignment_name": "Mathematics",
        "continuous_assessment": 80, "external_examination": 70,
    })
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["score"] == "73"
    assert data["liberian_grade"] == "A3"

    performance = client.get("/v1/gradesheet/students/s1").json()["data"]
    assert performance["overall_average"] == 73
    assert performance["credit_passes"] == 1


def test_gradesheet_summary_for_class(client):
    _create_student(client, "s1")
    _create_student(client, "s2")
    client.post("/v1/classes/", json={"id": "c1", "name": "Grade 9 - A", "student_ids": ["s1", "s2"]})
    client.post("/v1/grades/", json={"student_id": "s1", "class_id": "c1", "assignment_name": "Biology", "score": "81"})
    client.post("/v1/grades/", json={"student_id": "s2", "class_id": "c1", "assignment_name": "Biology", "score": "30"})

    summary = client.get("/v1/gradesheet/summary", params={"class_id": "c1"}).json()["data"]
    assert summary["total_students"] == 2
    assert summary["total_grades"] == 2
    assert summary["credit_pass_rate"] == 50
    assert summary["grade_distribution"]["A1"] == 1

    assert client.get("/v1/gradesheet/summary", params={"class_id": "missing"}).status_code == 404


def test_delete_missing_grade(client):
    res = client.delete("/v1/grades/nope")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "HTTP_ERROR"


def test_non_finite_score_keeps_gradesheet_readable(client):
    _create_student(client, grade=12)
    client.post("/v1/classes/", json={"id": "c1", "name": "Grade 12 - A", "student_ids": ["s1"]})
    for score in ("nan", "inf"):
        res = client.post("/v1/grades/", json={
            "student_id": "s1", "class_id": "c1", "assignment_name": "Biology", "score": score,
        })
        assert res.status_code == 200
        assert res.json()["data"]["liberian_grade"] is None

    res = client.get("/v1/gradesheet/students/s1")
    assert res.status_code == 200
    assert res.json()["data"]["overall_average"] == 0
    res = client.get("/v1/gradesheet/summary", params={"class_id": "c1"})
    assert res.status_code == 200
    assert res.json()["data"]["average_score"] == 0


def test_leaderboard_endpoint(client):
    _create_student(client, "s1", grade=9)
    _create_student(client, "s2", grade=9)
    _create_student(client, "s3", grade=10)
    client.post("/v1/students/s2/points", json={"points": 30, "reason": "Quiz", "teacher_id": "t1"})
    client.post("/v1/students/s3/points", json={"points": 50, "reason": "Quiz", "teacher_id": "t1"})

    board = client.get("/v1/students/leaderboard").json()["data"]
    assert [(e["rank"], e["id"]) for e in board][:2] == [(1, "s3"), (2, "s2")]

    board = client.get("/v1/students/leaderboard", params={"grade": 9}).json()["data"]
    assert [(e["rank"], e["id"], e["points"]) for e in board] == [(1, "s2", 30), (2, "s1", 0)]


def test_error_latency_is_measured_from_request_start():
    request = Request({"type": "http", "headers": []})
    assert _elapsed_ms(request) == 0
    request.state.started_at = time.perf_counter() - 0.25
    assert _elapsed_ms(request) >= 250


def test_error_response_carries_latency(client):
    res = client.get("/v1/students/ghost")
    assert res.status_code == 404
    assert isinstance(res.json()["latency_ms"], int)
