"""Issuance service sequencing key, CSR and certificate generation."""

from dataclasses import replace

from .cert_utils import deserialize_certificate, get_certificate_serial_hex, get_common_name
from .config import IssuerSettings
from .crypto_provider import CryptoProvider, CryptographyProvider
from .errors import ConfigurationError, ProviderError
from .logging_config import LOGGER
from .models import CAIdentity, CertificateRequest, IssuanceResult, KeyRequest
from .options import resolve_certificate_options, resolve_key_options
from .readiness import ReadinessGate, load_ca_identity


class IssuanceService:
    """Issues private keys and CA-signed client certificates.

    Every operation checks the readiness gate first and raises
    ConfigurationError before any provider call if the CA is not ready.
    Provider errors propagate unchanged; no step is retried.
    """

    def __init__(
        self,
        settings: IssuerSettings,
        identity: CAIdentity,
        provider: CryptoProvider,
        gate: ReadinessGate,
    ) -> None:
        """Initialize issuance service.

        Args:
            settings: Issuer configuration supplying option defaults
            identity: CA material that signs every certificate
            provider: Cryptographic provider doing the actual work
            gate: Readiness gate evaluated for identity
        """
        self.settings = settings
        self._identity = identity
        self.provider = provider
        self.gate = gate

    def _ensure_ready(self) -> None:
        if not self.gate.is_ready():
            raise ConfigurationError()

    def create_private_key(self, request: KeyRequest) -> bytes:
        """Generate a standalone private key.

        Args:
            request: Caller key options

        Returns:
            PEM-encoded private key

        Raises:
            ConfigurationError: If the CA is not ready
            ProviderError: If key generation fails
        """
        self._ensure_ready()

        options = resolve_key_options(request, self.settings)
        LOGGER.info("Generating %d-bit private key", options.key_bit_size)
        return self.provider.generate_private_key(options.key_bit_size, options)

    def create_certificate(self, request: CertificateRequest) -> IssuanceResult:
        """Issue a client certificate signed by the CA.

        Steps, each feeding the next:
            1. Resolve certificate options
            2. Generate a private key, unless the caller supplied client_key
            3. Generate a CSR for the client key
            4. Sign the CSR with the CA

        Args:
            request: Caller certificate options

        Returns:
            IssuanceResult with the certificate and any generated key

        Raises:
            ConfigurationError: If the CA is not ready
            ProviderError: From the first failing step
        """
        self._ensure_ready()

        options = resolve_certificate_options(request, self.settings, self._identity)

        generated_key = None
        if not options.client_key:
            key_options = resolve_key_options(request.key_request(), self.settings)
            generated_key = self.provider.generate_private_key(
                key_options.key_bit_size, key_options
            )
            options = replace(
                options,
                client_key=generated_key,
                client_key_password=key_options.password,
            )

        csr = self.provider.generate_csr(options)
        certificate = self.provider.sign_certificate(options, csr)

        try:
            issued = deserialize_certificate(certificate)
        except ValueError as e:
            raise ProviderError(f"issued certificate could not be parsed: {e}") from e
        serial_number = get_certificate_serial_hex(issued)

        LOGGER.info(
            "Certificate issued for %s (serial: %s, key generated: %s)",
            get_common_name(issued.subject),
            serial_number,
            generated_key is not None,
        )
        return IssuanceResult(
            certificate=certificate,
            serial_number=serial_number,
            private_key=generated_key,
        )


def build_issuance_service(
    settings: IssuerSettings,
    provider: CryptoProvider | None = None,
    identity: CAIdentity | None = None,
) -> IssuanceService:
    """Build an issuance service at startup.

    Loads the CA from settings.ca_dir unless an identity is given, then
    evaluates the readiness gate once.

    Args:
        settings: Issuer configuration
        provider: Cryptographic provider (defaults to CryptographyProvider)
        identity: Pre-loaded CA material, e.g. from SSM

    Returns:
        IssuanceService bound to the CA and its readiness state
    """
    provider = provider or CryptographyProvider()
    identity = identity or load_ca_identity(settings)
    gate = ReadinessGate(identity, provider, packaging_cipher=settings.cipher)
    return IssuanceService(settings, identity, provider, gate)
