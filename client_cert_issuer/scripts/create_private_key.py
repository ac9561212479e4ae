#!/usr/bin/env python3
"""Generate a standalone private key through the issuer."""

import argparse
import sys
from pathlib import Path

from client_cert_issuer.lib.config import IssuerSettings
from client_cert_issuer.lib.errors import ConfigurationError, ProviderError
from client_cert_issuer.lib.issuance_service import build_issuance_service
from client_cert_issuer.lib.logging_config import LOGGER
from client_cert_issuer.lib.models import KeyRequest


def main(argv: list[str] | None = None) -> int:
    """Write a new PEM private key to --output.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Generate private key")
    parser.add_argument("--output", type=Path, required=True, help="Output PEM file")
    parser.add_argument("--key-bit-size", type=int, help="RSA key size in bits")
    parser.add_argument("--cipher", help="Cipher used when --password is given")
    parser.add_argument("--password", help="Encrypt the key with this password")
    args = parser.parse_args(argv)

    try:
        service = build_issuance_service(IssuerSettings.from_env())
        key = service.create_private_key(
            KeyRequest(
                key_bit_size=args.key_bit_size,
                cipher=args.cipher,
                password=args.password,
            )
        )

        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(key)
        args.output.chmod(0o600)
        LOGGER.info("Private key written to %s", args.output)
        return 0

    except ConfigurationError as e:
        LOGGER.error("CA not ready: %s", e)
        return 1
    except ProviderError as e:
        LOGGER.error("Private key generation failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
