"""Certificate utility functions for key generation, serialization, and encryption choices."""

import uuid

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.serialization import pkcs12

HASH_ALGORITHMS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}

# PEM keys are always written as PKCS8 with the library's best available
# scheme (PBES2 with AES-256-CBC); des3 is accepted only for PKCS#12.
KEY_CIPHERS = frozenset({"aes128", "aes192", "aes256"})

PKCS12_CIPHERS: dict[str, pkcs12.PBES] = {
    "aes128": pkcs12.PBES.PBESv2SHA256AndAES256CBC,
    "aes192": pkcs12.PBES.PBESv2SHA256AndAES256CBC,
    "aes256": pkcs12.PBES.PBESv2SHA256AndAES256CBC,
    "des3": pkcs12.PBES.PBESv1SHA1And3KeyTripleDESCBC,
}


def generate_private_key(key_size: int = 2048) -> RSAPrivateKey:
    """Generate RSA private key with specified size."""
    return rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size,
    )


def get_hash_algorithm(name: str) -> hashes.HashAlgorithm:
    """Return hash algorithm instance for a name such as 'sha256'.

    Raises:
        ValueError: If the name is not a supported signature hash
    """
    algorithm = HASH_ALGORITHMS.get(name.lower())
    if algorithm is None:
        raise ValueError(f"unsupported hash algorithm: {name}")
    return algorithm()


def get_key_encryption(
    cipher: str, password: str | None
) -> serialization.KeySerializationEncryption:
    """Return PEM key encryption for cipher, or none when there is no password.

    Raises:
        ValueError: If a password is given with an unsupported cipher
    """
    if not password:
        return serialization.NoEncryption()
    if cipher.lower() not in KEY_CIPHERS:
        raise ValueError(f"unsupported private key cipher: {cipher}")
    return serialization.BestAvailableEncryption(password.encode("utf-8"))


def get_pkcs12_encryption(
    cipher: str, password: str
) -> serialization.KeySerializationEncryption:
    """Return PKCS#12 encryption for cipher protected by password.

    Raises:
        ValueError: If the cipher has no PKCS#12 scheme
    """
    scheme = PKCS12_CIPHERS.get(cipher.lower())
    if scheme is None:
        raise ValueError(f"unsupported PKCS#12 cipher: {cipher}")
    hmac_hash = (
        hashes.SHA1()
        if scheme is pkcs12.PBES.PBESv1SHA1And3KeyTripleDESCBC
        else hashes.SHA256()
    )
    return (
        serialization.PrivateFormat.PKCS12.encryption_builder()
        .kdf_rounds(50000)
        .key_cert_algorithm(scheme)
        .hmac_hash(hmac_hash)
        .build(password.encode("utf-8"))
    )


def serialize_private_key(
    key: RSAPrivateKey,
    encryption: serialization.KeySerializationEncryption | None = None,
) -> bytes:
    """Serialize private key to PEM format (PKCS8, unencrypted unless told otherwise)."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption or serialization.NoEncryption(),
    )


def deserialize_private_key(pem_data: bytes, password: str | None = None) -> RSAPrivateKey:
    """Deserialize private key from PEM bytes.

    A password supplied for an unencrypted key is ignored.

    Raises:
        ValueError: If the PEM is malformed, the password is wrong, or the key is not RSA
        TypeError: If the key is encrypted and no password was given
    """
    password_bytes = password.encode("utf-8") if password else None
    try:
        key = serialization.load_pem_private_key(pem_data, password=password_bytes)
    except TypeError:
        if password_bytes is None:
            raise
        key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, RSAPrivateKey):
        raise ValueError("expected RSA private key")
    return key


def serialize_certificate(cert: x509.Certificate) -> bytes:
    """Serialize certificate to PEM format."""
    return cert.public_bytes(serialization.Encoding.PEM)


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize certificate from PEM bytes."""
    return x509.load_pem_x509_certificate(pem_data)


def serialize_csr(csr: x509.CertificateSigningRequest) -> bytes:
    """Serialize CSR to PEM format."""
    return csr.public_bytes(serialization.Encoding.PEM)


def deserialize_csr(pem_data: bytes) -> x509.CertificateSigningRequest:
    """Deserialize CSR from PEM bytes."""
    return x509.load_pem_x509_csr(pem_data)


def generate_serial_number() -> int:
    """Generate certificate serial number from UUID4.

    UUID v4 gives 128-bit values with ~122 bits of entropy, above the
    64-bit CSPRNG minimum of the CA/Browser Forum baseline.

    Returns:
        Integer serial number for x509.CertificateBuilder.serial_number()
    """
    return uuid.uuid4().int


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def get_common_name(name: x509.Name) -> str | None:
    """Return the first common name in an X.509 name, if any."""
    attributes = name.get_attributes_for_oid(x509.NameOID.COMMON_NAME)
    if not attributes:
        return None
    value = attributes[0].value
    return value if isinstance(value, str) else value.decode("utf-8")


def extract_csr_public_key(
    csr: x509.CertificateSigningRequest,
) -> rsa.RSAPublicKey:
    """Extract public key from CSR.

    Raises:
        ValueError: If public key is not RSA type
    """
    public_key = csr.public_key()
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise ValueError("CSR public key must be RSA type")
    return public_key


def validate_csr_signature(csr: x509.CertificateSigningRequest) -> bool:
    """Verify CSR self-signature to prove private key possession.

    Returns:
        True if signature is valid, False otherwise
    """
    try:
        return csr.is_signature_valid
    except Exception:
        return False
