"""
HTTP tests: response envelope, authentication, role gates and scoping.
"""

import pytest


# =============================================================================
# Helpers
# =============================================================================


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email, password="pass-word-1", token=None, **fields):
    body = {
        "email": email,
        "password": password,
        "first_name": fields.pop("first_name", "Test"),
        "last_name": fields.pop("last_name", "User"),
        **fields,
    }
    return client.post("/auth/register", json=body, headers=bearer(token) if token else {})


def create_student(client, token, email, **fields):
    body = {
        "first_name": "Sam",
        "last_name": "Student",
        "email": email,
        "department": "COMPUTER_SCIENCE",
        **fields,
    }
    response = client.post("/students", json=body, headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def admin_token(client):
    response = register(client, "admin@example.com", role="ADMIN", first_name="Ada", last_name="Admin")
    assert response.status_code == 201, response.text
    return response.json()["data"]["access_token"]


@pytest.fixture
def hr_token(client, admin_token):
    response = register(client, "hr@example.com", token=admin_token, role="HR",
                        first_name="Hana", last_name="Reyes")
    assert response.status_code == 201, response.text
    return response.json()["data"]["access_token"]


@pytest.fixture
def two_students(client, admin_token):
    s1 = create_student(client, admin_token, "s1@example.com")
    s2 = create_student(client, admin_token, "s2@example.com")
    return s1, s2


@pytest.fixture
def s1_token(client, admin_token, two_students):
    s1, _ = two_students
    response = register(client, "s1-login@example.com", token=admin_token,
                        role="STUDENT", student_id=s1["id"])
    assert response.status_code == 201, response.text
    return response.json()["data"]["access_token"]


# =============================================================================
# Envelope and errors
# =============================================================================


class TestEnvelope:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "healthy"

    def test_unknown_route(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Resource not found", "data": None}

    def test_validation_error(self, client):
        response = client.post("/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["data"]} >= {"email", "password"}


# =============================================================================
# Authentication
# =============================================================================


class TestAuthentication:
    def test_no_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_cookie_token(self, client, admin_token):
        response = client.get("/auth/me", headers={"Cookie": f"accessToken={admin_token}"})

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "admin@example.com"

    def test_login_refresh_logout(self, client, admin_token):
        login = client.post("/auth/login", json={"email": "admin@example.com", "password": "pass-word-1"})
        assert login.status_code == 200
        tokens = login.json()["data"]
        assert tokens["user"]["role"] == "ADMIN"

        refreshed = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refreshed.status_code == 200

        # The rotated-out token is dead
        replay = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert replay.status_code == 401

        new = refreshed.json()["data"]
        assert client.post("/auth/logout", headers=bearer(new["access_token"])).status_code == 200
        after = client.post("/auth/refresh", json={"refresh_token": new["refresh_token"]})
        assert after.status_code == 401

    def test_wrong_password(self, client, admin_token):
        response = client.post("/auth/login", json={"email": "admin@example.com", "password": "wrong-pass"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_registration_without_role(self, client):
        response = register(client, "norole@example.com")

        assert response.status_code == 422
        assert "role" in {e["field"] for e in response.json()["data"]}

    def test_student_id_on_non_student_registration(self, client, admin_token, two_students):
        s1, _ = two_students
        response = register(client, "hr2@example.com", token=admin_token, role="HR", student_id=s1["id"])

        assert response.status_code == 422
        assert "non-STUDENT" in response.json()["data"][0]["message"]

    def test_hr_registration_needs_admin(self, client, hr_token):
        anonymous = register(client, "x@example.com", role="HR")
        assert anonymous.status_code == 401

        by_hr = register(client, "y@example.com", token=hr_token, role="HR")
        assert by_hr.status_code == 403

    def test_deactivated_account(self, client, admin_token, hr_token):
        me = client.get("/auth/me", headers=bearer(hr_token)).json()["data"]

        response = client.patch(
            f"/auth/users/{me['id']}/active",
            json={"is_active": False},
            headers=bearer(admin_token),
        )
        assert response.status_code == 200

        login = client.post("/auth/login", json={"email": "hr@example.com", "password": "pass-word-1"})
        assert login.status_code == 401
        assert "deactivated" in login.json()["message"]

    def test_change_password(self, client, admin_token):
        response = client.post(
            "/auth/change-password",
            json={"current_password": "wrong-one", "new_password": "another-pass"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 400

        response = client.post(
            "/auth/change-password",
            json={"current_password": "pass-word-1", "new_password": "another-pass"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 200
        login = client.post("/auth/login", json={"email": "admin@example.com", "password": "another-pass"})
        assert login.status_code == 200


# =============================================================================
# Student scoping
# =============================================================================


class TestStudentScoping:
    def test_student_reads_only_own_record(self, client, two_students, s1_token):
        s1, s2 = two_students

        own = client.get(f"/students/{s1['id']}", headers=bearer(s1_token))
        assert own.status_code == 200
        assert own.json()["data"]["email"] == "s1@example.com"

        other = client.get(f"/students/{s2['id']}", headers=bearer(s1_token))
        assert other.status_code == 403
        assert other.json()["message"] == "Students can only access their own data"

        assert client.get(f"/students/{s1['id']}/skills", headers=bearer(s1_token)).status_code == 200
        assert client.get(f"/students/{s2['id']}/skills", headers=bearer(s1_token)).status_code == 403

    def test_student_cannot_list(self, client, two_students, s1_token):
        for path in ("/students", "/students/search?name=sam", "/students/department/CIVIL"):
            response = client.get(path, headers=bearer(s1_token))
            assert response.status_code == 403, path
            assert "contact HR or Admin" in response.json()["message"]

    def test_student_cannot_review(self, client, s1_token):
        response = client.get("/hr/skill/unverified", headers=bearer(s1_token))

        assert response.status_code == 403
        assert "Required roles" in response.json()["message"]

    def test_hr_lists_students(self, client, two_students, hr_token):
        response = client.get("/students?limit=1", headers=bearer(hr_token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["items"]) == 1
        assert data["pagination"]["total_items"] == 2

    def test_duplicate_student_email(self, client, admin_token, two_students):
        response = client.post(
            "/students",
            json={"first_name": "A", "last_name": "B", "email": "s1@example.com",
                  "department": "CIVIL"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 409


# =============================================================================
# HR review
# =============================================================================


class TestReviewRoutes:
    def test_skill_verify_flow(self, client, hr_token, two_students):
        s1, _ = two_students
        created = client.post(
            "/hr/skill",
            json={"student_id": s1["id"], "skill_name": "Go", "category": "PROGRAMMING",
                  "proficiency_level": "INTERMEDIATE"},
            headers=bearer(hr_token),
        )
        assert created.status_code == 201
        skill_id = created.json()["data"]["id"]

        pending = client.get("/hr/skill/unverified", headers=bearer(hr_token)).json()["data"]
        assert [s["id"] for s in pending] == [skill_id]

        verified = client.put(f"/hr/skill/{skill_id}/verify", json={"remarks": "ok"}, headers=bearer(hr_token))
        assert verified.status_code == 200
        assert verified.json()["message"] == "Skill verified successfully"
        assert verified.json()["data"]["reviewer_name"] == "Hana Reyes"

        again = client.put(f"/hr/skill/{skill_id}/verify", headers=bearer(hr_token))
        assert again.status_code == 400
        assert again.json()["success"] is False

    def test_performance_approve_and_reject(self, client, hr_token, two_students):
        s1, _ = two_students
        created = client.post(
            "/hr/performance",
            json={"student_id": s1["id"], "evaluation_type": "ANNUAL", "score": 88},
            headers=bearer(hr_token),
        )
        record = created.json()["data"]
        assert record["evaluator_id"]

        approved = client.put(f"/hr/performance/{record['id']}/approve", headers=bearer(hr_token))
        assert approved.json()["data"]["status"] == "APPROVED"

        rejected = client.put(
            f"/hr/performance/{record['id']}/reject",
            json={"rejection_reason": "score typo"},
            headers=bearer(hr_token),
        )
        data = rejected.json()["data"]
        assert data["status"] == "REJECTED"
        assert data["remarks"] is None
        assert data["rejection_reason"] == "score typo"

    def test_review_missing_owner(self, client, hr_token):
        response = client.post(
            "/hr/document",
            json={"student_id": "stu_ghost", "document_type": "RESUME", "document_name": "CV"},
            headers=bearer(hr_token),
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Student not found"

    def test_verify_missing_record(self, client, hr_token):
        response = client.put("/hr/document/doc_missing/verify", headers=bearer(hr_token))

        assert response.status_code == 404
        assert response.json()["message"] == "Document not found"

    def test_document_expiring(self, client, hr_token):
        response = client.get("/hr/document/expiring?days=7", headers=bearer(hr_token))

        assert response.status_code == 200
        assert response.json()["data"] == []
