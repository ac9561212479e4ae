"""Request, option and result models for certificate issuance."""

from dataclasses import dataclass
from typing import Any

from .config import DistinguishedName
from .errors import InvalidRequestError


def _optional_str(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidRequestError(f"{key} must be a string")
    return value


def _optional_int(body: dict[str, Any], key: str) -> int | None:
    value = body.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidRequestError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"{key} must be an integer") from e


def _require_mapping(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidRequestError("options must be an object")
    return body


@dataclass(frozen=True)
class CAIdentity:
    """CA signing material loaded at startup.

    Key and certificate are PEM bytes, or None when the source had nothing
    to load.
    """

    private_key: bytes | None
    certificate: bytes | None
    passphrase: str | None
    common_name: str | None


@dataclass
class KeyRequest:
    """Caller-supplied private key options; unset fields fall back to settings."""

    key_bit_size: int | None = None
    cipher: str | None = None
    password: str | None = None

    @classmethod
    def from_dict(cls, body: Any) -> "KeyRequest":
        """Parse the camelCase options bag accepted at the request boundary."""
        body = _require_mapping(body)
        return cls(
            key_bit_size=_optional_int(body, "keyBitsize"),
            cipher=_optional_str(body, "cipher"),
            password=_optional_str(body, "password"),
        )


@dataclass
class CertificateRequest:
    """Caller-supplied certificate options.

    Has no fields for the signing authority: the CA key,
    certificate and passphrase can only come from the loaded CAIdentity.
    """

    client_key: bytes | None = None
    client_key_password: str | None = None
    key_bit_size: int | None = None
    cipher: str | None = None
    password: str | None = None
    country: str | None = None
    state: str | None = None
    locality: str | None = None
    organization: str | None = None
    organizational_unit: str | None = None
    common_name: str | None = None
    email_address: str | None = None
    hash: str | None = None
    days: int | None = None
    serial_number: int | None = None

    @classmethod
    def from_dict(cls, body: Any) -> "CertificateRequest":
        """Parse the camelCase options bag accepted at the request boundary.

        Unknown keys, including serviceKey, serviceCertificate and
        serviceKeyPassword, are ignored.
        """
        body = _require_mapping(body)
        client_key = _optional_str(body, "clientKey")
        return cls(
            client_key=client_key.encode("utf-8") if client_key else None,
            client_key_password=_optional_str(body, "clientKeyPassword"),
            key_bit_size=_optional_int(body, "keyBitsize"),
            cipher=_optional_str(body, "cipher"),
            password=_optional_str(body, "password"),
            country=_optional_str(body, "country"),
            state=_optional_str(body, "state"),
            locality=_optional_str(body, "locality"),
            organization=_optional_str(body, "organization"),
            organizational_unit=_optional_str(body, "organizationUnit"),
            common_name=_optional_str(body, "commonName"),
            email_address=_optional_str(body, "emailAddress"),
            hash=_optional_str(body, "hash"),
            days=_optional_int(body, "days"),
            serial_number=_optional_int(body, "serialNumber"),
        )

    def key_request(self) -> KeyRequest:
        """Key options for a key generated on the caller's behalf."""
        return KeyRequest(
            key_bit_size=self.key_bit_size,
            cipher=self.cipher,
            password=self.password,
        )


@dataclass(frozen=True)
class KeyOptions:
    """Resolved private key generation parameters."""

    key_bit_size: int
    cipher: str
    password: str | None = None


@dataclass
class CertificateOptions:
    """Resolved CSR and signing parameters.

    client_key is the only field the pipeline sets after resolution, when
    it generates a key for the caller.
    """

    service_key: bytes | None
    service_certificate: bytes | None
    service_key_password: str | None
    client_key: bytes | None
    client_key_password: str | None
    key_bit_size: int
    country: str
    state: str
    locality: str
    organization: str
    organizational_unit: str
    common_name: str | None
    email_address: str
    hash: str
    days: int
    serial_number: int | None = None

    @property
    def subject(self) -> DistinguishedName:
        return DistinguishedName(
            common_name=self.common_name or "",
            country=self.country,
            state=self.state,
            locality=self.locality,
            organization=self.organization,
            organizational_unit=self.organizational_unit,
            email_address=self.email_address,
        )


@dataclass(frozen=True)
class PackagingConfig:
    """Options for bundling a key and certificate into PKCS#12."""

    cipher: str
    key_password: str | None = None


@dataclass
class IssuanceResult:
    """Result from certificate issuance.

    serial_number is the issued certificate serial as colon-separated hex.
    private_key holds the PEM of a key generated during issuance, or None
    when the caller supplied its own key.
    """

    certificate: bytes
    serial_number: str
    private_key: bytes | None = None
