from src.gym_management.gym_management.core.enums import AccessLevel, Role


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "OK", "message": "Gym API is running"}


def test_unknown_route_is_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_register_sets_cookie_and_hides_hash(client):
    resp = client.post(
        "/api/users/register",
        json={"name": "Ravi", "email": "ravi@gym.test", "password": "secret123"},
    )

    body = resp.get_json()
    assert resp.status_code == 201
    assert body["role"] == "visitor"
    assert body["token"]
    assert "password_hash" not in body
    cookie = resp.headers.get("Set-Cookie", "")
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie


def test_me_requires_token(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Not authorized, no token"


def test_me_accepts_cookie_or_bearer(client, repos, container, auth_header):
    member = repos.add_user(Role.MEMBER)

    assert client.get("/api/users/me", headers=auth_header(member)).get_json()["user_id"] == member.user_id

    client.set_cookie("token", container.tokens.issue(user_id=member.user_id, role=member.role))
    assert client.get("/api/users/me").get_json()["user_id"] == member.user_id


def test_bad_token_is_rejected(client):
    resp = client.get("/api/users/me", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 401


def test_malformed_json_is_400(client):
    resp = client.post("/api/users/login", data="{not json", content_type="application/json")
    assert resp.status_code == 400


def test_admin_routes_reject_members(client, repos, auth_header):
    member = repos.add_user(Role.MEMBER)

    resp = client.post(
        "/api/plans",
        json={"name": "Hack", "price": 1, "duration": "1 Month"},
        headers=auth_header(member),
    )

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Access denied. Required role: admin or super_admin"


def test_plans_are_public_and_admin_managed(client, repos, auth_header):
    admin = repos.add_user(Role.ADMIN)

    created = client.post(
        "/api/plans",
        json={"name": "Pro", "price": "2499", "duration": "3 Months", "features": ["Trainer"]},
        headers=auth_header(admin),
    )
    assert created.status_code == 201

    plans = client.get("/api/plans").get_json()
    assert plans[0]["name"] == "Pro"
    assert plans[0]["price"] == 2499.0


def test_anonymous_workout_listing_is_a_preview(client, repos, container):
    admin = repos.add_user(Role.ADMIN)
    container.workout_service.create(
        {
            "title": "Full body",
            "goal": "General",
            "access": AccessLevel.MEMBERS.value,
            "exercises": [{"name": "Squat", "reps": "10"}, {"name": "Row", "reps": "12"}],
        },
        actor=admin,
    )

    body = client.get("/api/workouts").get_json()

    assert body["preview"] is True
    assert body["plans"][0]["total_items"] == 2
    assert len(body["plans"][0]["sample"]) == 1
    assert client.get("/api/workouts/1").status_code == 401


def test_visitor_diet_listing_needs_preview_flag(client, repos, auth_header):
    visitor = repos.add_user(Role.VISITOR)

    assert client.get("/api/diets", headers=auth_header(visitor)).status_code == 403
    body = client.get("/api/diets?preview=true", headers=auth_header(visitor)).get_json()
    assert body == {"preview": True, "diets": []}


def test_demo_checkout_over_http(client, repos, auth_header):
    plan = repos.plans.add("Basic", "999", "1 Month")
    visitor = repos.add_user(Role.VISITOR)
    headers = auth_header(visitor)

    created = client.post("/api/payments/create", json={"plan_id": plan.plan_id}, headers=headers)
    order = created.get_json()
    assert created.status_code == 201
    assert order["demo"] is True
    assert order["amount"] == 99900

    verified = client.post("/api/payments/verify", json={"order_id": order["order_id"]})
    assert verified.status_code == 200
    assert verified.get_json()["message"] == "Payment verified successfully (Demo Mode)"

    status = client.get(f"/api/membership/status/{visitor.user_id}", headers=headers).get_json()
    assert status["is_active"] is True
    assert status["role"] == "member"

    mine = client.get("/api/payments/mine", headers=headers).get_json()
    assert [p["status"] for p in mine] == ["completed"]


def test_attendance_check_in_twice(client, repos, auth_header):
    member = repos.add_user(Role.MEMBER)
    headers = auth_header(member)

    assert client.post("/api/attendance/checkin", headers=headers).status_code == 201
    again = client.post("/api/attendance/checkin", headers=headers)
    assert again.status_code == 400
    assert again.get_json()["message"] == "Already checked in today"

    today = client.get("/api/attendance/today", headers=headers).get_json()
    assert today["status"] == "checked-in"


def test_visitor_cannot_check_in(client, repos, auth_header):
    visitor = repos.add_user(Role.VISITOR)
    assert client.post("/api/attendance/checkin", headers=auth_header(visitor)).status_code == 403


def test_admin_customer_listing(client, repos, auth_header):
    admin = repos.add_user(Role.ADMIN)
    for _ in range(3):
        repos.add_user(Role.MEMBER)

    body = client.get("/api/admin/customers?role=member&limit=2", headers=auth_header(admin)).get_json()

    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert len(body["customers"]) == 2
    assert client.get("/api/admin/customers?membership_status=bogus", headers=auth_header(admin)).status_code == 400


def test_admin_login_endpoint(client, repos):
    repos.add_user(Role.MEMBER, email="m@gym.test")
    repos.add_user(Role.ADMIN, email="boss@gym.test")

    assert client.post("/api/admin/auth/login", json={"email": "m@gym.test", "password": "secret123"}).status_code == 403
    resp = client.post("/api/admin/auth/login", json={"email": "boss@gym.test", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "admin"


def test_membership_override_rejects_non_numeric_plan_id(client, repos, auth_header):
    admin = repos.add_user(Role.ADMIN)
    member = repos.add_user(Role.MEMBER)

    resp = client.put(
        f"/api/admin/customers/{member.user_id}/membership",
        json={"plan_id": "abc"},
        headers=auth_header(admin),
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "plan_id must be an integer"


def test_transformation_with_numeric_story_is_400(client, repos, auth_header):
    member = repos.add_user(Role.MEMBER)

    resp = client.post(
        "/api/transformations",
        json={"before_image": "a", "after_image": "b", "story": 5},
        headers=auth_header(member),
    )

    assert resp.status_code == 400


def test_progress_writes_are_member_only(client, repos, auth_header):
    visitor = repos.add_user(Role.VISITOR)
    member = repos.add_user(Role.MEMBER)

    assert client.post("/api/progress", json={"weight": 70}, headers=auth_header(visitor)).status_code == 403
    created = client.post("/api/progress", json={"weight": 70}, headers=auth_header(member))
    assert created.status_code == 201
    entry_id = created.get_json()["entry_id"]
    assert client.delete(f"/api/progress/entry/{entry_id}", headers=auth_header(visitor)).status_code == 403
    assert client.get(f"/api/progress/{visitor.user_id}", headers=auth_header(visitor)).status_code == 200
