"""Tests for X-Hub-Signature verification."""

import pytest
from hypothesis import given, strategies as st

from messenger_client.signature import compute_signature, is_signature_valid


class TestComputeSignature:
    """Test compute_signature()."""

    def test_known_hmac_sha1_vector(self):
        """HMAC-SHA1 of the classic pangram keyed by 'key'."""
        signature = compute_signature("The quick brown fox jumps over the lazy dog", "key")
        assert signature == "sha1=de7c9b85b8b78aa6bc8a7a36f70a90701c9db4d9"

    def test_utf8_body_is_hashed_as_bytes(self):
        """Non-ASCII bodies are signed over their UTF-8 encoding."""
        body = '{"text":"héllo 👋"}'
        assert is_signature_valid(body, compute_signature(body, "secret"), "secret")


class TestIsSignatureValid:
    """Test is_signature_valid()."""

    @given(body=st.text(max_size=500), secret=st.text(min_size=1, max_size=64))
    def test_signed_body_always_verifies(self, body: str, secret: str):
        """Property: a body verifies against its own signature."""
        assert is_signature_valid(body, compute_signature(body, secret), secret) is True

    @given(body=st.text(min_size=1, max_size=500), secret=st.text(min_size=1, max_size=64))
    def test_altered_body_never_verifies(self, body: str, secret: str):
        """Property: changing one character breaks verification."""
        signature = compute_signature(body, secret)
        replacement = "a" if body[-1] != "a" else "b"
        altered = body[:-1] + replacement
        assert is_signature_valid(altered, signature, secret) is False

    def test_wrong_secret_fails(self):
        body = '{"object":"page"}'
        assert is_signature_valid(body, compute_signature(body, "one"), "other") is False

    def test_scheme_is_case_insensitive(self):
        body = '{"object":"page"}'
        digest = compute_signature(body, "secret").split("=", 1)[1]
        assert is_signature_valid(body, f"SHA1={digest}", "secret") is True
        assert is_signature_valid(body, f"Sha1={digest.upper()}", "secret") is True

    @pytest.mark.parametrize(
        "signature",
        [
            "",
            "sha1",
            "de7c9b85b8b78aa6bc8a7a36f70a90701c9db4d9",
            "sha1=",
            "sha256=de7c9b85b8b78aa6bc8a7a36f70a90701c9db4d9",
            "md5=abc",
            "sha1=zzzz",
            "sha1=ünïcødé",
        ],
    )
    def test_malformed_header_returns_false(self, signature: str):
        """Malformed headers are a False outcome, never an exception."""
        assert is_signature_valid("body", signature, "secret") is False
