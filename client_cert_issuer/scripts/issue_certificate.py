#!/usr/bin/env python3
"""Issue a client certificate signed by the configured CA."""

import argparse
import sys
from pathlib import Path

from client_cert_issuer.lib.config import IssuerSettings
from client_cert_issuer.lib.errors import ConfigurationError, ProviderError
from client_cert_issuer.lib.issuance_service import build_issuance_service
from client_cert_issuer.lib.logging_config import LOGGER
from client_cert_issuer.lib.models import CertificateRequest


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue client certificate")
    parser.add_argument(
        "--common-name",
        required=True,
        help="Subject common name for the client certificate",
    )
    parser.add_argument(
        "--client-key",
        type=Path,
        help="Existing PEM private key; a new key is generated when omitted",
    )
    parser.add_argument("--organization", help="Subject organization")
    parser.add_argument("--organizational-unit", help="Subject organizational unit")
    parser.add_argument("--email-address", help="Subject email address")
    parser.add_argument("--days", type=int, help="Validity period in days")
    parser.add_argument("--serial-number", type=int, help="Certificate serial number")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output/clients"),
        help="Output directory for client artifacts (default: output/clients)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Issue certificate for the requested common name.

    CA location and defaults come from ISSUER_* environment variables.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)

    try:
        service = build_issuance_service(IssuerSettings.from_env())
        request = CertificateRequest(
            client_key=args.client_key.read_bytes() if args.client_key else None,
            common_name=args.common_name,
            organization=args.organization,
            organizational_unit=args.organizational_unit,
            email_address=args.email_address,
            days=args.days,
            serial_number=args.serial_number,
        )

        LOGGER.info("Issuing certificate for: %s", args.common_name)
        result = service.create_certificate(request)

        client_dir = args.output_dir / args.common_name
        client_dir.mkdir(parents=True, exist_ok=True)
        cert_path = client_dir / "client.pem"
        cert_path.write_bytes(result.certificate)

        LOGGER.info("Client certificate created:")
        LOGGER.info("  Cert: %s", cert_path)
        LOGGER.info("  Serial: %s", result.serial_number)

        if result.private_key is not None:
            key_path = client_dir / "client.key"
            key_path.write_bytes(result.private_key)
            key_path.chmod(0o600)
            LOGGER.info("  Key: %s", key_path)
        return 0

    except FileNotFoundError as e:
        LOGGER.error("Client key not found: %s", e)
        return 1
    except ConfigurationError as e:
        LOGGER.error("CA not ready: %s", e)
        return 1
    except ProviderError as e:
        LOGGER.error("Certificate issuance failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
