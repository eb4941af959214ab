import unittest

import httpx
from fastapi.testclient import TestClient

from cpauth.client import AuthClient, password_to_secret
from cpauth.errors import InvalidArgument, MalformedInput
from cpauth.params import GroupParameters
from cpauth.server import create_app
from cpauth.service import AuthService

TOY = GroupParameters(p=23, q=11, g=2, h=4)


class TestPasswordToSecret(unittest.TestCase):
    def test_numeric_password(self) -> None:
        self.assertEqual(password_to_secret("6"), 6)
        self.assertEqual(password_to_secret(" 42\n"), 42)

    def test_rejects_non_numeric_or_non_positive(self) -> None:
        with self.assertRaises(MalformedInput):
            password_to_secret("hunter2")
        with self.assertRaises(InvalidArgument):
            password_to_secret("0")
        with self.assertRaises(InvalidArgument):
            password_to_secret("-6")


class TestAuthClient(unittest.TestCase):
    def setUp(self) -> None:
        self.service = AuthService(TOY, randbelow=lambda bound: 5)
        self.client = AuthClient(http_client=TestClient(create_app(self.service)))

    def test_register_and_login(self) -> None:
        message = self.client.register_secret("alice", 6, TOY)
        self.assertEqual(message, "User alice registered successfully")
        self.assertEqual(self.service.users.lookup("alice").y1, 18)

        session_id = self.client.login("alice", 6, TOY)
        self.assertTrue(session_id)
        self.assertEqual(len(self.service.sessions), 0)

    def test_login_with_wrong_password(self) -> None:
        self.client.register_secret("alice", 6, TOY)
        # With c = 5 the responses for x = 6 and x = 7 always differ.
        self.assertEqual(self.client.login("alice", 7, TOY), "")

    def test_protocol_calls(self) -> None:
        self.client.register("alice", 18, 2)
        auth_id, c = self.client.create_authentication_challenge("alice", 8, 18)
        self.assertIsInstance(c, int)
        self.assertTrue(0 <= c < TOY.q)
        s = (3 - c * 6) % TOY.q
        self.assertTrue(self.client.verify_authentication(auth_id, s))

    def test_http_errors_raise(self) -> None:
        with self.assertRaises(httpx.HTTPStatusError) as ctx:
            self.client.create_authentication_challenge("bob", 8, 18)
        self.assertEqual(ctx.exception.response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
