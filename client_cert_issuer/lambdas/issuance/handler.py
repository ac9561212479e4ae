"""Issuance Lambda handler - creates private keys and CA-signed client certificates."""

import base64
import binascii
import json
import os
from typing import Any

from client_cert_issuer.lib.config import IssuerSettings
from client_cert_issuer.lib.errors import ConfigurationError, InvalidRequestError, ProviderError
from client_cert_issuer.lib.issuance_service import IssuanceService, build_issuance_service
from client_cert_issuer.lib.logging_config import LOGGER
from client_cert_issuer.lib.models import CertificateRequest, KeyRequest
from client_cert_issuer.lib.ssm_client import SSMClient, load_ca_identity_from_ssm

from ._types import (
    APIGatewayProxyEventV2,
    APIGatewayProxyResponseV2,
    CertificateResponse,
    LambdaContext,
    PrivateKeyResponse,
)

KEYS_ROUTE = "POST /keys"
CERTIFICATES_ROUTE = "POST /certificates"

# Built once per Lambda container; CA readiness is not re-evaluated afterwards
_SERVICE: IssuanceService | None = None


def _json_response(status_code: int, body: Any) -> APIGatewayProxyResponseV2:
    """Build JSON API Gateway response."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _error_response(error: str, message: str) -> APIGatewayProxyResponseV2:
    return _json_response(400, {"error": error, "message": message})


def _get_service() -> IssuanceService:
    """Get the container-wide issuance service, building it on first use."""
    global _SERVICE
    if _SERVICE is None:
        settings = IssuerSettings.from_env()
        ssm_prefix = os.environ.get("CA_SSM_PREFIX", "")
        identity = None
        if ssm_prefix:
            ssm_client = SSMClient(region=os.environ.get("AWS_REGION", "eu-west-2"))
            identity = load_ca_identity_from_ssm(ssm_client, ssm_prefix, settings)
        _SERVICE = build_issuance_service(settings, identity=identity)
    return _SERVICE


def _parse_options(event: APIGatewayProxyEventV2) -> Any:
    """Return the "options" object from the JSON request body, if any.

    Raises:
        InvalidRequestError: If the body is not a JSON object
    """
    raw_body = event.get("body") or ""
    if event.get("isBase64Encoded") and raw_body:
        try:
            raw_body = base64.b64decode(raw_body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidRequestError("body is not valid base64") from e

    if not raw_body:
        return None

    try:
        body = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise InvalidRequestError("body is not valid JSON") from e

    if not isinstance(body, dict):
        raise InvalidRequestError("body must be a JSON object")
    return body.get("options")


def _create_private_key(service: IssuanceService, options: Any) -> PrivateKeyResponse:
    key = service.create_private_key(KeyRequest.from_dict(options))
    return {"key": key.decode("utf-8")}


def _create_certificate(service: IssuanceService, options: Any) -> CertificateResponse:
    result = service.create_certificate(CertificateRequest.from_dict(options))
    return {
        "certificate": result.certificate.decode("utf-8"),
        "serialNumber": result.serial_number,
        "privateKey": result.private_key.decode("utf-8") if result.private_key else None,
    }


def handler(event: APIGatewayProxyEventV2, context: LambdaContext) -> APIGatewayProxyResponseV2:
    """Create a private key or a CA-signed client certificate.

    Routes:
        POST /keys          -> {"key": pem}
        POST /certificates  -> {"certificate": pem, "serialNumber": hex, "privateKey": pem|null}

    Every failure is a 400 whose "error" field tells configuration,
    provider and request errors apart.
    """
    route_key = event.get("routeKey", "")
    if route_key not in (KEYS_ROUTE, CERTIFICATES_ROUTE):
        return _json_response(404, {"error": "not_found", "message": f"Unknown route: {route_key}"})

    try:
        options = _parse_options(event)
        service = _get_service()
        if route_key == KEYS_ROUTE:
            return _json_response(200, _create_private_key(service, options))
        return _json_response(200, _create_certificate(service, options))
    except ConfigurationError as e:
        LOGGER.error("%s rejected: %s", route_key, e)
        return _error_response("configuration_error", str(e))
    except ProviderError as e:
        LOGGER.error("%s failed: %s", route_key, e.detail)
        return _error_response("provider_error", e.detail)
    except InvalidRequestError as e:
        LOGGER.error("%s invalid request: %s", route_key, e.detail)
        return _error_response("invalid_request", e.detail)
