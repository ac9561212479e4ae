"""Test fixtures for client_cert_issuer tests."""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import NameOID

from client_cert_issuer.lib.cert_utils import (
    generate_private_key,
    generate_serial_number,
    serialize_certificate,
    serialize_private_key,
)
from client_cert_issuer.lib.config import IssuerSettings
from client_cert_issuer.lib.crypto_provider import CryptoProvider
from client_cert_issuer.lib.errors import ProviderError
from client_cert_issuer.lib.models import (
    CAIdentity,
    CertificateOptions,
    KeyOptions,
    PackagingConfig,
)
from client_cert_issuer.lib.readiness import ReadinessGate

CA_COMMON_NAME = "example-ca"
CA_PASSPHRASE = "secret"


class RecordingProvider(CryptoProvider):
    """Provider double that records calls and returns placeholder PEM bytes.

    sign_certificate returns the certificate PEM given at construction.
    Set fail_on to a method name to make that method raise ProviderError.
    """

    def __init__(self, certificate: bytes) -> None:
        self.certificate = certificate
        self.calls: list[tuple[str, object]] = []
        self.fail_on: str | None = None

    def _record(self, name: str, payload: object) -> None:
        self.calls.append((name, payload))
        if self.fail_on == name:
            raise ProviderError(f"{name} exploded")

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def generate_private_key(self, bit_size: int, config: KeyOptions) -> bytes:
        self._record("generate_private_key", (bit_size, config))
        return b"generated-key"

    def generate_csr(self, options: CertificateOptions) -> bytes:
        self._record("generate_csr", options)
        return b"csr"

    def sign_certificate(self, options: CertificateOptions, csr: bytes) -> bytes:
        self._record("sign_certificate", (options, csr))
        return self.certificate

    def package_identity(
        self, key: bytes, cert: bytes, passphrase: str, config: PackagingConfig
    ) -> bytes:
        self._record("package_identity", (key, cert, passphrase, config))
        return b"pkcs12"


@pytest.fixture(scope="session")
def ca_key() -> RSAPrivateKey:
    """Generate RSA private key for the test CA."""
    return generate_private_key(key_size=2048)


@pytest.fixture(scope="session")
def ca_cert(ca_key: RSAPrivateKey) -> x509.Certificate:
    """Generate self-signed CA certificate with CN example-ca."""
    subject = x509.Name(
        [
            x509.NameAttribute(NameOID.COUNTRY_NAME, "GB"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Test Org"),
            x509.NameAttribute(NameOID.COMMON_NAME, CA_COMMON_NAME),
        ]
    )
    not_before = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(ca_key.public_key())
        .serial_number(generate_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=0), critical=True)
        .sign(ca_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def ca_key_pem(ca_key: RSAPrivateKey) -> bytes:
    """CA key encrypted with the test passphrase."""
    return serialize_private_key(
        ca_key, serialization.BestAvailableEncryption(CA_PASSPHRASE.encode("utf-8"))
    )


@pytest.fixture(scope="session")
def ca_cert_pem(ca_cert: x509.Certificate) -> bytes:
    return serialize_certificate(ca_cert)


@pytest.fixture(scope="session")
def client_key() -> RSAPrivateKey:
    """Generate RSA private key for a caller that brings its own key."""
    return generate_private_key(key_size=2048)


@pytest.fixture
def ca_dir(tmp_path: Path, ca_key_pem: bytes, ca_cert_pem: bytes) -> Generator[Path, None, None]:
    """Write CA files to disk and return the directory.

    Creates:
        {temp_dir}/ca/ca.key
        {temp_dir}/ca/ca.pem
    """
    directory = tmp_path / "ca"
    directory.mkdir()
    (directory / "ca.key").write_bytes(ca_key_pem)
    (directory / "ca.pem").write_bytes(ca_cert_pem)
    yield directory


@pytest.fixture
def settings(ca_dir: Path) -> IssuerSettings:
    """Return issuer settings pointing at the on-disk test CA."""
    return IssuerSettings(
        ca_dir=ca_dir,
        passphrase=CA_PASSPHRASE,
        key_bit_size=2048,
        cipher="aes256",
        country="GB",
        state="London",
        locality="London",
        organization="Test Org",
        organizational_unit="Test Unit",
        common_name=CA_COMMON_NAME,
        email_address="pki@example.com",
        hash="sha256",
        days=30,
    )


@pytest.fixture
def identity(ca_key_pem: bytes, ca_cert_pem: bytes) -> CAIdentity:
    return CAIdentity(
        private_key=ca_key_pem,
        certificate=ca_cert_pem,
        passphrase=CA_PASSPHRASE,
        common_name=CA_COMMON_NAME,
    )


@pytest.fixture
def fake_identity() -> CAIdentity:
    """Fully populated identity with placeholder material for provider doubles."""
    return CAIdentity(
        private_key=b"ca-key",
        certificate=b"ca-cert",
        passphrase=CA_PASSPHRASE,
        common_name=CA_COMMON_NAME,
    )


@pytest.fixture
def recording_provider(ca_cert_pem: bytes) -> RecordingProvider:
    return RecordingProvider(certificate=ca_cert_pem)


@pytest.fixture
def ready_gate(fake_identity: CAIdentity, recording_provider: RecordingProvider) -> ReadinessGate:
    """Gate that passed its self-test against the recording provider."""
    gate = ReadinessGate(fake_identity, recording_provider, packaging_cipher="aes256")
    recording_provider.calls.clear()
    return gate
