"""Integration tests for /auth: sign-up, sign-in and sign-out through the real ASGI stack."""

import unittest

from fastapi.testclient import TestClient

from acquisitions.api.deps import get_profile_service
from acquisitions.main import app
from acquisitions.models import User

from support import TEST_PASSWORD, ApiHarness, make_settings


class AuthRoutesTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.harness = ApiHarness()
        self.client = self.harness.client

    def tearDown(self) -> None:
        self.harness.close()

    def _user_count(self) -> int:
        db = self.harness.session_factory()
        try:
            return db.query(User).count()
        finally:
            db.close()


class TestSignUp(AuthRoutesTestCase):
    def test_sign_up_returns_201_user_and_cookie(self) -> None:
        resp = self.client.post(
            "/auth/sign-up",
            json={"name": "Ada", "email": "Ada@Example.com", "password": "hunter22"},
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["user"]["email"], "ada@example.com")
        self.assertEqual(body["user"]["role"], "user")
        self.assertNotIn("password", body["user"])
        self.assertNotIn("password_hash", body["user"])

        set_cookie = resp.headers.get("set-cookie", "")
        self.assertIn("token=", set_cookie)
        self.assertIn("HttpOnly", set_cookie)
        self.assertIn("Max-Age=86400", set_cookie)

    def test_cookie_authenticates_follow_up_requests(self) -> None:
        resp = self.client.post(
            "/auth/sign-up",
            json={"name": "Ada", "email": "ada@example.com", "password": "hunter22"},
        )
        user_id = resp.json()["user"]["id"]
        resp = self.client.get(f"/users/{user_id}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["name"], "Ada")

    def test_duplicate_email_returns_409_and_creates_nothing(self) -> None:
        self.harness.create_user("Ada", "ada@example.com")
        resp = self.client.post(
            "/auth/sign-up",
            json={"name": "Ada 2", "email": "ADA@example.com", "password": "hunter22"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self._user_count(), 1)

    def test_validation_errors_return_400_with_fields(self) -> None:
        resp = self.client.post(
            "/auth/sign-up",
            json={"name": "A", "email": "not-an-email", "password": "123"},
        )
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["error"], "Validation failed")
        fields = {d["field"] for d in body["details"]}
        self.assertEqual(fields, {"name", "email", "password"})
        self.assertEqual(self._user_count(), 0)

    def test_unknown_role_rejected(self) -> None:
        resp = self.client.post(
            "/auth/sign-up",
            json={"name": "Ada", "email": "ada@example.com", "password": "hunter22", "role": "root"},
        )
        self.assertEqual(resp.status_code, 400)


class TestSignIn(AuthRoutesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.harness.create_user("Ada", "ada@example.com")

    def test_sign_in_success_sets_cookie(self) -> None:
        resp = self.client.post(
            "/auth/sign-in", json={"email": "ada@example.com", "password": TEST_PASSWORD}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["email"], "ada@example.com")
        self.assertIn("token=", resp.headers.get("set-cookie", ""))

    def test_wrong_password_returns_401(self) -> None:
        resp = self.client.post(
            "/auth/sign-in", json={"email": "ada@example.com", "password": "wrong-pass"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid email or password")

    def test_unknown_email_returns_same_401(self) -> None:
        resp = self.client.post(
            "/auth/sign-in", json={"email": "nobody@example.com", "password": TEST_PASSWORD}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid email or password")

    def test_missing_password_returns_400(self) -> None:
        resp = self.client.post("/auth/sign-in", json={"email": "ada@example.com"})
        self.assertEqual(resp.status_code, 400)

    def test_cookie_flags_in_dev(self) -> None:
        resp = self.client.post(
            "/auth/sign-in", json={"email": "ada@example.com", "password": TEST_PASSWORD}
        )
        set_cookie = resp.headers.get("set-cookie", "").lower()
        self.assertIn("samesite=strict", set_cookie)
        self.assertNotIn("; secure", set_cookie)

    def test_cookie_marked_secure_in_prod(self) -> None:
        self.harness.settings = make_settings(APP_ENV="prod")
        resp = self.client.post(
            "/auth/sign-in", json={"email": "ada@example.com", "password": TEST_PASSWORD}
        )
        self.assertEqual(resp.status_code, 200)
        set_cookie = resp.headers.get("set-cookie", "").lower()
        self.assertIn("httponly", set_cookie)
        self.assertIn("samesite=strict", set_cookie)
        self.assertIn("; secure", set_cookie)


class TestSignOut(AuthRoutesTestCase):
    def test_sign_out_requires_session(self) -> None:
        resp = self.client.post("/auth/sign-out")
        self.assertEqual(resp.status_code, 401)

    def test_sign_out_clears_cookie(self) -> None:
        self.client.post(
            "/auth/sign-up",
            json={"name": "Ada", "email": "ada@example.com", "password": "hunter22"},
        )
        resp = self.client.post("/auth/sign-out")
        self.assertEqual(resp.status_code, 200)
        set_cookie = resp.headers.get("set-cookie", "")
        self.assertIn("token=", set_cookie)
        self.assertIn("Max-Age=0", set_cookie)

        resp = self.client.get("/users")
        self.assertEqual(resp.status_code, 401)


class TestSessionToken(AuthRoutesTestCase):
    def test_garbage_token_returns_401(self) -> None:
        resp = self.client.get("/users/1", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(resp.status_code, 401)

    def test_token_for_deleted_user_returns_401(self) -> None:
        user = self.harness.create_user("Ada", "ada@example.com")
        headers = self.harness.auth_headers(user)
        db = self.harness.session_factory()
        try:
            db.query(User).filter(User.id == user.id).delete()
            db.commit()
        finally:
            db.close()
        resp = self.client.get(f"/users/{user.id}", headers=headers)
        self.assertEqual(resp.status_code, 401)

    def test_stale_cookie_falls_back_to_bearer_header(self) -> None:
        user = self.harness.create_user("Ada", "ada@example.com")
        headers = {"Cookie": "token=garbage", **self.harness.auth_headers(user)}
        resp = self.client.get(f"/users/{user.id}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["email"], "ada@example.com")

    def test_garbage_cookie_alone_returns_401(self) -> None:
        resp = self.client.get("/users/1", headers={"Cookie": "token=garbage"})
        self.assertEqual(resp.status_code, 401)


class TestMisc(AuthRoutesTestCase):
    def test_root(self) -> None:
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "Hello from Acquisitions!")
        self.assertEqual(resp.headers["x-content-type-options"], "nosniff")

    def test_health(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")

    def test_unexpected_error_returns_500_with_security_headers(self) -> None:
        user = self.harness.create_user("Ada", "ada@example.com")

        def broken_profiles():
            raise RuntimeError("boom")

        app.dependency_overrides[get_profile_service] = broken_profiles
        with TestClient(app, raise_server_exceptions=False) as client:
            resp = client.get(f"/users/{user.id}", headers=self.harness.auth_headers(user))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})
        self.assertNotIn("boom", resp.text)
        self.assertEqual(resp.headers["x-content-type-options"], "nosniff")
        self.assertEqual(resp.headers["x-frame-options"], "DENY")


if __name__ == "__main__":
    unittest.main()
