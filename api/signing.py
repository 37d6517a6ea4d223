"""Response signing using itsdangerous."""

from itsdangerous import BadSignature, Signer

from config import config


class ResponseSigner:
    """Sign and verify serialized responses with the server secret."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._signer = Signer(secret_key or config.security.secret_key, salt="table-view")

    def sign(self, payload: str | bytes) -> str:
        """Return the signature of a serialized payload."""
        return self._signer.get_signature(payload).decode()

    def verify(self, payload: str | bytes, signature: str) -> bool:
        """Check a signature produced by sign()."""
        try:
            return self._signer.verify_signature(payload, signature)
        except BadSignature:
            return False


# Global signer instance
_response_signer: ResponseSigner | None = None


def get_response_signer() -> ResponseSigner:
    """Get or create the response signer."""
    global _response_signer
    if _response_signer is None:
        _response_signer = ResponseSigner()
    return _response_signer
