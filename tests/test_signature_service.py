import base64
import hashlib
import hmac

from relay.services.signature_service import compute_signature, verify_signature

BODY = '{"destination":"U1","events":[]}'.encode("utf-8")


class TestVerifySignature:
    def test_matches_hmac_sha256_base64(self):
        expected = base64.b64encode(hmac.new(b"secret", BODY, hashlib.sha256).digest()).decode("utf-8")
        assert compute_signature("secret", BODY) == expected

    def test_valid_signature(self):
        assert verify_signature("secret", BODY, compute_signature("secret", BODY)) is True

    def test_wrong_secret(self):
        assert verify_signature("other", BODY, compute_signature("secret", BODY)) is False

    def test_tampered_body(self):
        signature = compute_signature("secret", BODY)
        assert verify_signature("secret", BODY + b" ", signature) is False

    def test_missing_signature_or_secret(self):
        assert verify_signature("secret", BODY, None) is False
        assert verify_signature("", BODY, "anything") is False
