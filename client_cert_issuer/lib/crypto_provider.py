"""Cryptographic provider interface and its `cryptography` implementation.

The issuance pipeline never touches key material directly; every key,
CSR, signature and PKCS#12 bundle is produced through a
:class:`CryptoProvider`. Keys, CSRs and certificates cross this boundary as
PEM bytes.

Providers report every failure as :class:`ProviderError`.
"""

import abc

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import pkcs12

from .cert_utils import (
    deserialize_certificate,
    deserialize_csr,
    deserialize_private_key,
    generate_private_key,
    get_hash_algorithm,
    get_key_encryption,
    get_pkcs12_encryption,
    serialize_certificate,
    serialize_csr,
    serialize_private_key,
)
from .certificate_builder import CertificateBuilder
from .errors import ProviderError
from .models import CertificateOptions, KeyOptions, PackagingConfig

# Raised by cryptography and datetime for bad, out-of-range or unsupported input
_LIBRARY_ERRORS = (ValueError, TypeError, OverflowError, UnsupportedAlgorithm)


class CryptoProvider(abc.ABC):
    """Base class for cryptographic providers used by the issuance pipeline."""

    @abc.abstractmethod
    def generate_private_key(self, bit_size: int, config: KeyOptions) -> bytes:
        """Generate a private key and return it as PEM."""

    @abc.abstractmethod
    def generate_csr(self, options: CertificateOptions) -> bytes:
        """Build a PEM CSR for options.subject, signed by options.client_key."""

    @abc.abstractmethod
    def sign_certificate(self, options: CertificateOptions, csr: bytes) -> bytes:
        """Sign csr with the CA material carried by options and return the PEM certificate."""

    @abc.abstractmethod
    def package_identity(
        self,
        key: bytes,
        cert: bytes,
        passphrase: str,
        config: PackagingConfig,
    ) -> bytes:
        """Bundle key and cert into a passphrase-protected PKCS#12 blob."""


class CryptographyProvider(CryptoProvider):
    """RSA provider backed by the `cryptography` package."""

    def generate_private_key(self, bit_size: int, config: KeyOptions) -> bytes:
        try:
            encryption = get_key_encryption(config.cipher, config.password)
            key = generate_private_key(key_size=bit_size)
            return serialize_private_key(key, encryption)
        except _LIBRARY_ERRORS as e:
            raise ProviderError(f"private key generation failed: {e}") from e

    def generate_csr(self, options: CertificateOptions) -> bytes:
        if not options.client_key:
            raise ProviderError("CSR generation requires a client key")

        try:
            client_key = deserialize_private_key(options.client_key, options.client_key_password)
            csr = CertificateBuilder.build_csr(
                subject_dn=options.subject,
                private_key=client_key,
                hash_algorithm=get_hash_algorithm(options.hash),
            )
            return serialize_csr(csr)
        except _LIBRARY_ERRORS as e:
            raise ProviderError(f"CSR generation failed: {e}") from e

    def sign_certificate(self, options: CertificateOptions, csr: bytes) -> bytes:
        if not options.service_key or not options.service_certificate:
            raise ProviderError("certificate signing requires CA key and certificate")

        try:
            issuer_key = deserialize_private_key(
                options.service_key, options.service_key_password
            )
            issuer_cert = deserialize_certificate(options.service_certificate)
            certificate = CertificateBuilder.build_client_certificate(
                csr=deserialize_csr(csr),
                issuer_cert=issuer_cert,
                issuer_key=issuer_key,
                validity_days=options.days,
                hash_algorithm=get_hash_algorithm(options.hash),
                serial_number=options.serial_number,
            )
            return serialize_certificate(certificate)
        except _LIBRARY_ERRORS as e:
            raise ProviderError(f"certificate signing failed: {e}") from e

    def package_identity(
        self,
        key: bytes,
        cert: bytes,
        passphrase: str,
        config: PackagingConfig,
    ) -> bytes:
        try:
            private_key = deserialize_private_key(key, config.key_password)
            certificate = deserialize_certificate(cert)
            return pkcs12.serialize_key_and_certificates(
                name=None,
                key=private_key,
                cert=certificate,
                cas=None,
                encryption_algorithm=get_pkcs12_encryption(config.cipher, passphrase),
            )
        except _LIBRARY_ERRORS as e:
            raise ProviderError(f"PKCS#12 packaging failed: {e}") from e
