"""Issuer configuration dataclasses."""

import os
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.x509 import oid


@dataclass(frozen=True)
class IssuerSettings:
    """Process-wide issuer configuration, read once at startup."""

    ca_dir: Path = Path("ca")
    authority_key_file_name: str = "ca.key"
    authority_cert_file_name: str = "ca.pem"
    passphrase: str | None = None
    key_bit_size: int = 2048
    cipher: str = "aes256"
    country: str = "GB"
    state: str = "London"
    locality: str = "London"
    organization: str = "Client Cert Issuer"
    organizational_unit: str = "Engineering"
    common_name: str | None = None
    email_address: str = ""
    hash: str = "sha256"
    days: int = 365

    @property
    def authority_key_path(self) -> Path:
        return self.ca_dir / self.authority_key_file_name

    @property
    def authority_cert_path(self) -> Path:
        return self.ca_dir / self.authority_cert_file_name

    @classmethod
    def from_env(cls) -> "IssuerSettings":
        """Build settings from ISSUER_* environment variables.

        Unset variables keep the dataclass defaults. An empty
        ISSUER_PASSPHRASE or ISSUER_COMMON_NAME is treated as unset.
        """
        defaults = cls()
        return cls(
            ca_dir=Path(os.environ.get("ISSUER_CA_DIR", str(defaults.ca_dir))),
            authority_key_file_name=os.environ.get(
                "ISSUER_AUTHORITY_KEY_FILE", defaults.authority_key_file_name
            ),
            authority_cert_file_name=os.environ.get(
                "ISSUER_AUTHORITY_CERT_FILE", defaults.authority_cert_file_name
            ),
            passphrase=os.environ.get("ISSUER_PASSPHRASE") or None,
            key_bit_size=int(os.environ.get("ISSUER_KEY_BIT_SIZE", defaults.key_bit_size)),
            cipher=os.environ.get("ISSUER_CIPHER", defaults.cipher),
            country=os.environ.get("ISSUER_COUNTRY", defaults.country),
            state=os.environ.get("ISSUER_STATE", defaults.state),
            locality=os.environ.get("ISSUER_LOCALITY", defaults.locality),
            organization=os.environ.get("ISSUER_ORGANIZATION", defaults.organization),
            organizational_unit=os.environ.get(
                "ISSUER_ORGANIZATIONAL_UNIT", defaults.organizational_unit
            ),
            common_name=os.environ.get("ISSUER_COMMON_NAME") or None,
            email_address=os.environ.get("ISSUER_EMAIL_ADDRESS", defaults.email_address),
            hash=os.environ.get("ISSUER_HASH", defaults.hash),
            days=int(os.environ.get("ISSUER_DAYS", defaults.days)),
        )


@dataclass
class DistinguishedName:
    """X.509 Subject Distinguished Name.

    Only common_name is mandatory; empty optional fields are left out of
    the encoded name.
    """

    common_name: str
    country: str = ""
    state: str = ""
    locality: str = ""
    organization: str = ""
    organizational_unit: str = ""
    email_address: str = ""

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name for CSR generation."""
        attributes = [
            (oid.NameOID.COUNTRY_NAME, self.country),
            (oid.NameOID.STATE_OR_PROVINCE_NAME, self.state),
            (oid.NameOID.LOCALITY_NAME, self.locality),
            (oid.NameOID.ORGANIZATION_NAME, self.organization),
            (oid.NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit),
            (oid.NameOID.COMMON_NAME, self.common_name),
            (oid.NameOID.EMAIL_ADDRESS, self.email_address),
        ]
        return x509.Name(
            [x509.NameAttribute(attr_oid, value) for attr_oid, value in attributes if value]
        )
