"""CA loading and the readiness gate guarding every issuance operation."""

from pathlib import Path

from .config import IssuerSettings
from .crypto_provider import CryptoProvider
from .logging_config import LOGGER
from .models import CAIdentity, PackagingConfig


def _read_optional(path: Path) -> bytes | None:
    """Return file contents, or None if the file does not exist."""
    if not path.is_file():
        return None
    try:
        return path.read_bytes()
    except OSError as e:
        LOGGER.warning("Unable to read CA file %s: %s", path, e)
        return None


def load_ca_identity(settings: IssuerSettings) -> CAIdentity:
    """Load CA key and certificate from the configured CA directory.

    Missing files are not an error: the corresponding field is None and
    the readiness gate will report the CA as not ready.

    Args:
        settings: Issuer configuration with CA paths, passphrase and common name

    Returns:
        CAIdentity for the configured CA
    """
    return CAIdentity(
        private_key=_read_optional(settings.authority_key_path),
        certificate=_read_optional(settings.authority_cert_path),
        passphrase=settings.passphrase,
        common_name=settings.common_name,
    )


class ReadinessGate:
    """One-shot check that the CA material is present and usable.

    The check runs once at construction and is never repeated; build a new
    gate to pick up replaced CA material.
    """

    def __init__(
        self,
        identity: CAIdentity,
        provider: CryptoProvider,
        packaging_cipher: str,
    ) -> None:
        """Evaluate CA readiness.

        Args:
            identity: CA material to validate
            provider: Provider used for the PKCS#12 packaging self-test
            packaging_cipher: Cipher for the packaging self-test
        """
        self._ready = self._evaluate(identity, provider, packaging_cipher)

    def is_ready(self) -> bool:
        return self._ready

    @staticmethod
    def _evaluate(identity: CAIdentity, provider: CryptoProvider, packaging_cipher: str) -> bool:
        if not identity.private_key or not identity.certificate:
            LOGGER.warning("CA not ready: authority key or certificate missing")
            return False

        if not identity.passphrase or not identity.common_name:
            LOGGER.warning("CA not ready: passphrase or common name not configured")
            return False

        try:
            provider.package_identity(
                identity.private_key,
                identity.certificate,
                identity.passphrase,
                PackagingConfig(cipher=packaging_cipher, key_password=identity.passphrase),
            )
        except Exception as e:
            LOGGER.warning("CA not ready: packaging self-test failed: %s", e)
            return False

        LOGGER.info("CA ready: %s", identity.common_name)
        return True
