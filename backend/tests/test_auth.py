"""Unit tests for the login check.

Run with: pytest backend/tests/test_auth.py -v
"""

import base64

from core.auth import ADMIN_ACCOUNT_ID, authenticate, parse_basic_header
from schemas.users import Role, UserAccount

USERS = [
    UserAccount(id="u1", username="Lena", password="Secret1", role="ProjectLead"),
    UserAccount(id="u2", username="tom", password="tom", role="Technician"),
]


class TestAuthenticate:
    def test_bypass_maps_to_owner(self):
        account = authenticate(USERS, "ADMIN", "123", admin_username="admin", admin_password="123")

        assert account.id == ADMIN_ACCOUNT_ID
        assert account.username == "Administrator"
        assert account.role == Role.OWNER

    def test_bypass_with_wrong_password_is_denied(self):
        assert authenticate([], "admin", "1234", admin_username="admin", admin_password="123") is None

    def test_username_is_case_insensitive(self):
        assert authenticate(USERS, "lena", "Secret1").id == "u1"

    def test_password_is_exact(self):
        assert authenticate(USERS, "lena", "secret1") is None

    def test_unknown_user_and_wrong_password_look_the_same(self):
        assert authenticate(USERS, "nobody", "tom") is None
        assert authenticate(USERS, "tom", "nope") is None

    def test_user_without_username_never_matches(self):
        assert authenticate([UserAccount(id="x", username="", password="")], "", "") is None


class TestParseBasicHeader:
    def test_valid_header(self):
        token = base64.b64encode(b"tom:pa:ss").decode()
        assert parse_basic_header(f"Basic {token}") == ("tom", "pa:ss")

    def test_invalid_headers(self):
        assert parse_basic_header(None) is None
        assert parse_basic_header("Bearer abc") is None
        assert parse_basic_header("Basic !!!") is None
        assert parse_basic_header("Basic " + base64.b64encode(b"nocolon").decode()) is None
