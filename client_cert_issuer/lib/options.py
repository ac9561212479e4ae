"""Resolution of caller options against configured defaults."""

from typing import TypeVar

from .config import IssuerSettings
from .models import (
    CAIdentity,
    CertificateOptions,
    CertificateRequest,
    KeyOptions,
    KeyRequest,
)

T = TypeVar("T")


def _pick(value: T | None, default: T) -> T:
    """Return value unless it is missing or empty, else the default."""
    return value if value else default


def resolve_key_options(request: KeyRequest, settings: IssuerSettings) -> KeyOptions:
    """Resolve private key options.

    Args:
        request: Caller-supplied key options
        settings: Issuer configuration supplying defaults

    Returns:
        KeyOptions with every field populated
    """
    return KeyOptions(
        key_bit_size=_pick(request.key_bit_size, settings.key_bit_size),
        cipher=_pick(request.cipher, settings.cipher),
        password=request.password,
    )


def resolve_certificate_options(
    request: CertificateRequest,
    settings: IssuerSettings,
    identity: CAIdentity,
) -> CertificateOptions:
    """Resolve CSR and signing options.

    Each subject and validity field falls back to its configured default.
    serial_number and client_key pass through unresolved. The signing
    authority fields always come from the CA identity.

    Args:
        request: Caller-supplied certificate options
        settings: Issuer configuration supplying defaults
        identity: CA material that will sign the certificate

    Returns:
        CertificateOptions ready for CSR generation
    """
    return CertificateOptions(
        service_key=identity.private_key,
        service_certificate=identity.certificate,
        service_key_password=identity.passphrase,
        client_key=request.client_key,
        client_key_password=request.client_key_password,
        key_bit_size=_pick(request.key_bit_size, settings.key_bit_size),
        country=_pick(request.country, settings.country),
        state=_pick(request.state, settings.state),
        locality=_pick(request.locality, settings.locality),
        organization=_pick(request.organization, settings.organization),
        organizational_unit=_pick(request.organizational_unit, settings.organizational_unit),
        common_name=_pick(request.common_name, settings.common_name),
        email_address=_pick(request.email_address, settings.email_address),
        hash=_pick(request.hash, settings.hash),
        days=_pick(request.days, settings.days),
        serial_number=request.serial_number,
    )
