"""SSM client for reading CA material from AWS Parameter Store."""

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import IssuerSettings
from .logging_config import LOGGER
from .models import CAIdentity


class SSMClient:
    """SSM client for reading the signing CA (writes handled by Terraform)."""

    def __init__(self, region: str = "eu-west-2") -> None:
        """Initialize SSM client.

        Args:
            region: AWS region for SSM client
        """
        self.client = boto3.client("ssm", region_name=region)

    def _get_optional_parameter(self, name: str, decrypt: bool) -> bytes | None:
        try:
            response = self.client.get_parameter(Name=name, WithDecryption=decrypt)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "ParameterNotFound":
                return None
            raise
        return response["Parameter"]["Value"].encode("utf-8")

    def get_certificate_authority(self, prefix: str) -> tuple[bytes | None, bytes | None]:
        """Fetch CA key and certificate from SSM.

        Args:
            prefix: Parameter path prefix (e.g., '/client-cert-issuer/sandbox/ca')

        Returns:
            Tuple of (private_key_pem, certificate_pem); a parameter that does
            not exist is returned as None

        Raises:
            ClientError: For SSM failures other than ParameterNotFound
        """
        prefix = prefix.rstrip("/")
        key_pem = self._get_optional_parameter(f"{prefix}/private-key", decrypt=True)
        cert_pem = self._get_optional_parameter(f"{prefix}/certificate", decrypt=False)
        return key_pem, cert_pem


def load_ca_identity_from_ssm(
    ssm_client: SSMClient, prefix: str, settings: IssuerSettings
) -> CAIdentity:
    """Build CAIdentity from SSM material plus configured passphrase and common name.

    SSM failures are logged and leave the key and certificate absent, so the
    readiness gate reports the CA as not ready.
    """
    try:
        key_pem, cert_pem = ssm_client.get_certificate_authority(prefix)
    except (ClientError, BotoCoreError) as e:
        LOGGER.warning("Could not read CA material from SSM prefix %s: %s", prefix, e)
        key_pem, cert_pem = None, None
    return CAIdentity(
        private_key=key_pem,
        certificate=cert_pem,
        passphrase=settings.passphrase,
        common_name=settings.common_name,
    )
