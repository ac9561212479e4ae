"""Type definitions for issuance lambda."""

from typing import NotRequired, TypedDict


class HTTPContext(TypedDict, total=False):
    """HTTP details from API Gateway request context."""

    method: str
    path: str
    sourceIp: str


class RequestContext(TypedDict, total=False):
    """Request context from API Gateway."""

    requestId: str
    http: HTTPContext


class APIGatewayProxyEventV2(TypedDict, total=False):
    """API Gateway HTTP API v2 event (partial, issuance-relevant fields)."""

    routeKey: str
    rawPath: str
    headers: dict[str, str]
    body: str
    isBase64Encoded: bool
    requestContext: RequestContext


class APIGatewayProxyResponseV2(TypedDict):
    """API Gateway HTTP API v2 response."""

    statusCode: int
    headers: NotRequired[dict[str, str]]
    body: NotRequired[str]


class LambdaContext:
    """AWS Lambda context object stub for typing."""

    function_name: str
    memory_limit_in_mb: int
    invoked_function_arn: str
    aws_request_id: str


class PrivateKeyResponse(TypedDict):
    """Success payload for POST /keys."""

    key: str


class CertificateResponse(TypedDict):
    """Success payload for POST /certificates."""

    certificate: str
    serialNumber: str
    privateKey: str | None
