"""Tests for the admin access guard: token extraction, role gate and the /admin middleware."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from portal.core.config import get_settings
from portal.core.errors import Forbidden, TokenExpired, TokenInvalid, TokenMissing
from portal.core.security import TOKEN_LIFETIME, TokenIssuer, get_token_issuer
from portal.main import app
from portal.models.user import Role
from portal.services.access_guard import AccessGuard, extract_token

COOKIE = "portal_token"


class TestExtractToken(unittest.TestCase):
    """Cookie wins over the Authorization header; malformed headers yield None."""

    def test_cookie_only(self) -> None:
        self.assertEqual(extract_token({COOKIE: "from-cookie"}, {}, COOKIE), "from-cookie")

    def test_bearer_only(self) -> None:
        headers = {"authorization": "Bearer from-header"}
        self.assertEqual(extract_token({}, headers, COOKIE), "from-header")

    def test_bearer_scheme_is_case_insensitive(self) -> None:
        headers = {"authorization": "bearer from-header"}
        self.assertEqual(extract_token({}, headers, COOKIE), "from-header")

    def test_cookie_takes_precedence(self) -> None:
        headers = {"authorization": "Bearer from-header"}
        self.assertEqual(extract_token({COOKIE: "from-cookie"}, headers, COOKIE), "from-cookie")

    def test_absent_or_malformed(self) -> None:
        self.assertIsNone(extract_token({}, {}, COOKIE))
        self.assertIsNone(extract_token({}, {"authorization": "Basic abc"}, COOKIE))
        self.assertIsNone(extract_token({}, {"authorization": "Bearer   "}, COOKIE))
        self.assertIsNone(extract_token({"other": "x"}, {}, COOKIE))


class TestAccessGuard(unittest.TestCase):
    """authorize_admin admits ADMIN and SUPER_ADMIN only."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer("guard-secret")
        self.guard = AccessGuard(self.issuer)

    def test_admin_roles_allowed(self) -> None:
        for role in (Role.ADMIN, Role.SUPER_ADMIN):
            with self.subTest(role=role):
                token = self.issuer.issue("id-1", "a@example.com", role)
                identity = self.guard.authorize_admin(token)
                self.assertEqual(identity.id, "id-1")
                self.assertEqual(identity.role, role)

    def test_user_role_forbidden(self) -> None:
        token = self.issuer.issue("id-1", "a@example.com", Role.USER)
        with self.assertRaises(Forbidden):
            self.guard.authorize_admin(token)

    def test_user_role_authenticates(self) -> None:
        token = self.issuer.issue("id-1", "a@example.com", Role.USER)
        self.assertEqual(self.guard.authenticate(token).role, Role.USER)

    def test_token_failures(self) -> None:
        with self.assertRaises(TokenMissing):
            self.guard.authorize_admin(None)
        with self.assertRaises(TokenInvalid):
            self.guard.authorize_admin("garbage")
        old = datetime.now(UTC) - TOKEN_LIFETIME - timedelta(minutes=1)
        with self.assertRaises(TokenExpired):
            self.guard.authorize_admin(self.issuer.issue("id-1", "a@example.com", Role.ADMIN, now=old))


class TestAdminMiddleware(unittest.TestCase):
    """Requests to /admin are redirected to / unless they carry an admin token."""

    def setUp(self) -> None:
        self.client = TestClient(app, follow_redirects=False)
        self.cookie_name = get_settings().AUTH_COOKIE_NAME
        self.issuer = get_token_issuer()

    def tearDown(self) -> None:
        self.client.cookies.clear()

    def _assert_redirected(self, resp) -> None:
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp.headers["location"], "/")

    def test_no_token_redirects(self) -> None:
        self._assert_redirected(self.client.get("/admin"))
        self._assert_redirected(self.client.get("/admin/users"))

    def test_invalid_token_redirects(self) -> None:
        self._assert_redirected(
            self.client.get("/admin", headers={"Authorization": "Bearer nope"})
        )

    def test_expired_token_redirects(self) -> None:
        old = datetime.now(UTC) - TOKEN_LIFETIME - timedelta(minutes=1)
        token = self.issuer.issue("id-1", "a@example.com", Role.SUPER_ADMIN, now=old)
        self._assert_redirected(
            self.client.get("/admin", headers={"Authorization": f"Bearer {token}"})
        )

    def test_user_role_redirects(self) -> None:
        token = self.issuer.issue("id-1", "u@example.com", Role.USER)
        self.client.cookies.set(self.cookie_name, token)
        self._assert_redirected(self.client.get("/admin"))

    def test_admin_cookie_allowed_and_identity_attached(self) -> None:
        token = self.issuer.issue("id-9", "boss@example.com", Role.ADMIN)
        self.client.cookies.set(self.cookie_name, token)
        resp = self.client.get("/admin")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"user": {"id": "id-9", "email": "boss@example.com", "role": "ADMIN"}},
        )

    def test_admin_bearer_allowed(self) -> None:
        token = self.issuer.issue("id-9", "boss@example.com", Role.SUPER_ADMIN)
        resp = self.client.get("/admin", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["role"], "SUPER_ADMIN")

    def test_cookie_precedence_over_header(self) -> None:
        user_token = self.issuer.issue("id-1", "u@example.com", Role.USER)
        admin_token = self.issuer.issue("id-9", "boss@example.com", Role.ADMIN)
        self.client.cookies.set(self.cookie_name, user_token)
        resp = self.client.get("/admin", headers={"Authorization": f"Bearer {admin_token}"})
        self._assert_redirected(resp)

    def test_unprotected_paths_pass_through(self) -> None:
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        # Shares the prefix text but not the path segment.
        self.assertEqual(self.client.get("/administrator").status_code, 404)


if __name__ == "__main__":
    unittest.main()
