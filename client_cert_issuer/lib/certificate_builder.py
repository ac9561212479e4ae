"""Certificate builder for X.509 CSR and client certificate construction."""

from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import ExtendedKeyUsageOID

from .cert_utils import extract_csr_public_key, generate_serial_number, validate_csr_signature
from .config import DistinguishedName


class CertificateBuilder:
    """Builds client CSRs and CA-signed client certificates."""

    @staticmethod
    def build_csr(
        subject_dn: DistinguishedName,
        private_key: RSAPrivateKey,
        hash_algorithm: hashes.HashAlgorithm,
    ) -> x509.CertificateSigningRequest:
        """Build CSR for subject_dn, self-signed with the client's private key."""
        return (
            x509.CertificateSigningRequestBuilder()
            .subject_name(subject_dn.to_x509_name())
            .sign(private_key, hash_algorithm)
        )

    @staticmethod
    def build_client_certificate(
        csr: x509.CertificateSigningRequest,
        issuer_cert: x509.Certificate,
        issuer_key: RSAPrivateKey,
        validity_days: int,
        hash_algorithm: hashes.HashAlgorithm,
        serial_number: int | None = None,
    ) -> x509.Certificate:
        """Build client certificate from CSR, signed by the CA.

        The CA validates the CSR and issues a certificate for the CSR's
        subject and public key.

        Args:
            csr: Certificate signing request from client
            issuer_cert: CA certificate (issuer)
            issuer_key: CA private key for signing
            validity_days: Certificate validity period in days
            hash_algorithm: Signature hash algorithm
            serial_number: Serial number to use; a random one when None

        Returns:
            X.509 end-entity certificate signed by the CA

        Raises:
            ValueError: If CSR signature is invalid or the serial number is out of range
        """
        if not validate_csr_signature(csr):
            raise ValueError("CSR signature validation failed")

        not_before = datetime.now(timezone.utc)
        not_after = not_before + timedelta(days=validity_days)

        builder = (
            x509.CertificateBuilder()
            .subject_name(csr.subject)
            .issuer_name(issuer_cert.subject)
            .public_key(extract_csr_public_key(csr))
            .serial_number(serial_number if serial_number is not None else generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=False,
            )
            .add_extension(
                x509.ExtendedKeyUsage([ExtendedKeyUsageOID.CLIENT_AUTH]),
                critical=False,
            )
        )

        return builder.sign(issuer_key, hash_algorithm)
