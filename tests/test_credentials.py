import base64
import unittest

from authhack.credentials import (
    BASIC_PREFIX,
    EMPTY_CREDENTIAL,
    EncodedCredential,
    encode,
    normalize,
    with_prefix,
)

TEST_USERNAME = "testusername"
TEST_PASSWORD = "testpassword"
TEST_USERNAME_ENCODED = "dGVzdHVzZXJuYW1lOg=="
TEST_USERNAME_AND_PASSWORD_ENCODED = "dGVzdHVzZXJuYW1lOnRlc3RwYXNzd29yZA=="


class EncodeTests(unittest.TestCase):
    def test_encode_username_and_password(self):
        self.assertEqual(
            encode(TEST_USERNAME, TEST_PASSWORD).value,
            TEST_USERNAME_AND_PASSWORD_ENCODED,
        )

    def test_missing_password_is_empty_password(self):
        self.assertEqual(encode(TEST_USERNAME).value, TEST_USERNAME_ENCODED)
        self.assertEqual(encode(TEST_USERNAME, None), encode(TEST_USERNAME, ""))

    def test_encode_uses_utf8(self):
        expected = base64.b64encode("jürgen:pässword".encode("utf-8")).decode("ascii")
        self.assertEqual(encode("jürgen", "pässword").value, expected)


class NormalizeTests(unittest.TestCase):
    def test_without_prefix(self):
        self.assertEqual(normalize(TEST_USERNAME_AND_PASSWORD_ENCODED).value, TEST_USERNAME_AND_PASSWORD_ENCODED)

    def test_strips_repeated_prefixes(self):
        for count in range(0, 5):
            raw = BASIC_PREFIX * count + TEST_USERNAME_AND_PASSWORD_ENCODED
            self.assertEqual(normalize(raw).value, TEST_USERNAME_AND_PASSWORD_ENCODED, raw)

    def test_idempotent(self):
        raw = "Basic Basic " + TEST_USERNAME_ENCODED
        once = normalize(raw)
        self.assertEqual(normalize(once.value), once)

    def test_prefix_is_case_sensitive(self):
        raw = "basic " + TEST_USERNAME_ENCODED
        self.assertEqual(normalize(raw).value, raw)

    def test_empty_input(self):
        self.assertTrue(normalize("").is_empty())
        self.assertTrue(normalize(None).is_empty())
        self.assertEqual(normalize(""), EMPTY_CREDENTIAL)

    def test_round_trip(self):
        pairs = [
            (TEST_USERNAME, TEST_PASSWORD),
            (TEST_USERNAME, ""),
            ("user:with:colons", "p@ss word"),
            ("", ""),
            ("ünï", "ċøđë"),
        ]
        for username, password in pairs:
            credential = encode(username, password)
            self.assertEqual(normalize(with_prefix(credential)), credential, (username, password))


class EncodedCredentialTests(unittest.TestCase):
    def test_with_prefix_adds_exactly_one_prefix(self):
        credential = normalize("Basic Basic " + TEST_USERNAME_ENCODED)
        self.assertEqual(credential.with_prefix(), "Basic " + TEST_USERNAME_ENCODED)

    def test_equality_is_on_canonical_form(self):
        self.assertEqual(normalize("Basic abc"), EncodedCredential("abc"))
        self.assertNotEqual(EncodedCredential("abc"), EncodedCredential("abd"))

    def test_truthiness(self):
        self.assertFalse(EMPTY_CREDENTIAL)
        self.assertTrue(EncodedCredential("abc"))

    def test_is_well_formed(self):
        self.assertTrue(EncodedCredential(TEST_USERNAME_AND_PASSWORD_ENCODED).is_well_formed())
        self.assertTrue(encode("user", "pass").is_well_formed())
        for bad in ("", "abc", "abc; Domain=example.com", "abc=\r\nX-Injected: 1", "€uro", "abc d=="):
            self.assertFalse(EncodedCredential(bad).is_well_formed(), repr(bad))

    def test_decode_valid(self):
        creds = encode("user", "pass").decode()
        self.assertIsNotNone(creds)
        assert creds is not None
        self.assertEqual(creds.username, "user")
        self.assertEqual(creds.password, "pass")

    def test_decode_invalid_base64(self):
        self.assertIsNone(EncodedCredential("!!!notbase64!!!").decode())

    def test_decode_missing_colon(self):
        token = base64.b64encode(b"userpass").decode("ascii")
        self.assertIsNone(EncodedCredential(token).decode())

    def test_decode_empty(self):
        self.assertIsNone(EMPTY_CREDENTIAL.decode())


if __name__ == "__main__":
    unittest.main()
