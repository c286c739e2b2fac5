"""Yo! Payments webhook verification.

Verifies IPN and failure notification signatures using RSA-SHA1.
"""

import base64
import binascii
import logging
from pathlib import Path
from typing import Any

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

logger = logging.getLogger(__name__)

# Concatenation order is fixed by Yo!
IPN_SIGNED_FIELDS = ("date_time", "amount", "narrative", "network_ref", "external_ref", "msisdn")
FAILURE_SIGNED_FIELDS = ("failed_transaction_reference", "transaction_init_date")


def is_ipn_payload(payload: dict[str, Any]) -> bool:
    """Success notification: carries ``signature`` and ``external_ref``."""
    return bool(payload.get("signature")) and bool(payload.get("external_ref"))


def is_failure_payload(payload: dict[str, Any]) -> bool:
    """Failure notification: carries ``verification`` and the failed reference."""
    return bool(payload.get("verification")) and bool(payload.get("failed_transaction_reference"))


def signed_data(payload: dict[str, Any], fields: tuple[str, ...]) -> str:
    return "".join(str(payload.get(name) or "") for name in fields)


def load_public_key(key_path: str | None) -> rsa.RSAPublicKey | None:
    """Load the Yo! public key from a PEM file.

    Returns None (verification disabled) if no path is configured or the
    file cannot be read.
    """
    if not key_path:
        logger.warning("No Yo! public key path configured, signature verification disabled")
        return None

    path = Path(key_path)
    if not path.is_file():
        logger.warning(f"Yo! public key file not found: {key_path}")
        return None

    try:
        key = serialization.load_pem_public_key(path.read_bytes())
    except (ValueError, UnsupportedAlgorithm) as e:
        logger.error(f"Failed to load Yo! public key from {key_path}: {e}")
        return None

    if not isinstance(key, rsa.RSAPublicKey):
        logger.error(f"Yo! public key at {key_path} is not an RSA key")
        return None

    logger.info("Yo! public key loaded successfully")
    return key


class YoWebhookVerifier:
    """Verifies Yo! notifications against a public key loaded once."""

    def __init__(self, public_key_path: str | None = None) -> None:
        self._public_key = load_public_key(public_key_path)

    @property
    def has_public_key(self) -> bool:
        return self._public_key is not None

    def verify_signature(self, data: str, signature_b64: str) -> bool:
        """Verify an RSA-SHA1 signature over ``data``.

        Without a public key this returns True. That is a development
        fallback only; production deployments must configure the key.
        """
        if self._public_key is None:
            logger.warning("No Yo! public key available, skipping signature verification")
            return True

        try:
            # Signatures may arrive wrapped across lines
            signature = base64.b64decode("".join((signature_b64 or "").split()), validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Yo! webhook signature is not valid base64")
            return False

        try:
            self._public_key.verify(
                signature,
                data.encode("utf-8"),
                padding.PKCS1v15(),
                hashes.SHA1(),
            )
        except InvalidSignature:
            return False

        return True

    def verify_ipn(self, payload: dict[str, Any]) -> bool:
        """Verify a success (IPN) notification.

        Concatenation order: date_time + amount + narrative + network_ref
        + external_ref + msisdn
        """
        data = signed_data(payload, IPN_SIGNED_FIELDS)
        return self.verify_signature(data, str(payload.get("signature") or ""))

    def verify_failure(self, payload: dict[str, Any]) -> bool:
        """Verify a failure notification.

        Concatenation order: failed_transaction_reference + transaction_init_date
        """
        data = signed_data(payload, FAILURE_SIGNED_FIELDS)
        return self.verify_signature(data, str(payload.get("verification") or ""))
