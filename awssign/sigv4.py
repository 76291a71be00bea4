"""
AWS Signature Version 4 signing.

The module-level functions are the individual steps of the algorithm and
are exposed so each one can be checked against the AWS reference vectors.
SigV4Signer wraps them for the common case of "give me the headers to send".

See: https://docs.aws.amazon.com/IAM/latest/UserGuide/create-signed-request.html
"""
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .canonical import (
    EMPTY_SHA256,
    UNSIGNED_PAYLOAD,
    canonical_request,
    payload_hash,
    signed_header_string,
)
from .request import Body, HeaderSource, SigningRequest, parse_url, snapshot_headers, to_utc

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
KEY_PREFIX = 'AWS4'
SCOPE_TERMINATOR = 'aws4_request'
SHORT_DATE = '%Y%m%d'
LONG_DATETIME = '%Y%m%dT%H%M%SZ'

# Headers that proxies and HTTP clients are known to add or rewrite in flight.
# They are still sent, just never signed.
UNSIGNED_HEADERS = frozenset(['expect', 'transfer-encoding', 'user-agent', 'x-amzn-trace-id'])

# Headers create_headers() owns; stale copies are removed before signing.
_MANAGED_HEADERS = frozenset(['authorization', 'x-amz-date', 'x-amz-security-token', 'x-amz-content-sha256'])

Headers = Dict[str, str]

__all__ = [
    'ALGORITHM',
    'EMPTY_SHA256',
    'Headers',
    'Service',
    'SigV4Signer',
    'UNSIGNED_PAYLOAD',
    'scope_string',
    'sign',
    'signature',
    'signing_key',
    'string_to_sign',
]


class Service(str, Enum):
    """Service codes as they appear in the credential scope."""
    S3 = 's3'
    DYNAMODB = 'dynamodb'
    LAMBDA = 'lambda'
    IAM = 'iam'
    STS = 'sts'
    EC2 = 'ec2'
    SQS = 'sqs'
    SNS = 'sns'
    KMS = 'kms'
    EXECUTE_API = 'execute-api'
    APPSYNC = 'appsync'
    ES = 'es'
    SECRETS_MANAGER = 'secretsmanager'

    def __str__(self) -> str:
        return self.value


ServiceName = Union[str, Service]


def _service_code(service: ServiceName) -> str:
    return service.value if isinstance(service, Service) else service


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()


def scope_string(timestamp: datetime, region: str, service: ServiceName) -> str:
    timestamp = to_utc(timestamp)
    return '/'.join([timestamp.strftime(SHORT_DATE), region, _service_code(service), SCOPE_TERMINATOR])


def string_to_sign(timestamp: datetime, region: str, service: ServiceName, canonical_req: str) -> str:
    timestamp = to_utc(timestamp)
    canonical_hash = hashlib.sha256(canonical_req.encode('utf-8')).hexdigest()
    return '\n'.join([
        ALGORITHM,
        timestamp.strftime(LONG_DATETIME),
        scope_string(timestamp, region, service),
        canonical_hash,
    ])


def signing_key(timestamp: datetime, secret_key: str, region: str, service: ServiceName) -> bytes:
    """
    Derive the SigV4 signing key via the HMAC-SHA256 chain.

    HMAC accepts keys of any length, so this always succeeds.
    """
    timestamp = to_utc(timestamp)
    k_date = _hmac(f'{KEY_PREFIX}{secret_key}'.encode('utf-8'), timestamp.strftime(SHORT_DATE))
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, _service_code(service))
    return _hmac(k_service, SCOPE_TERMINATOR)


def signature(key: bytes, string_to_sign: str) -> str:
    return hmac.new(key, string_to_sign.encode('utf-8'), hashlib.sha256).hexdigest()


def sign(request: SigningRequest) -> str:
    """
    Compute the ``Authorization`` header value for ``request``.

    Example:
        AWS4-HMAC-SHA256 Credential=AKID/20150830/us-east-1/iam/aws4_request,SignedHeaders=host;x-amz-date,Signature=5d67...
    """
    canonical = canonical_request(request)
    logger.debug('CanonicalRequest:\n%s', canonical)
    to_sign = string_to_sign(request.datetime, request.region, request.service, canonical)
    logger.debug('StringToSign:\n%s', to_sign)
    key = signing_key(request.datetime, request.secret_key, request.region, request.service)
    sig = signature(key, to_sign)
    logger.debug('Signature:\n%s', sig)

    scope = scope_string(request.datetime, request.region, request.service)
    return (
        f'{ALGORITHM} Credential={request.access_key}/{scope},'
        f'SignedHeaders={signed_header_string(request.headers)},'
        f'Signature={sig}'
    )


def _host_from_url(url: str) -> str:
    # Lowercase host, brackets around IPv6 literals, no userinfo, and the
    # port only when it isn't the scheme default.
    parts = parse_url(url)
    host = parts.hostname
    if ':' in host:
        host = f'[{host}]'
    default_ports = {'http': 80, 'https': 443}
    if parts.port is not None and parts.port != default_ports.get(parts.scheme):
        host = f'{host}:{parts.port}'
    return host


class SigV4Signer:
    """
    Signs requests for a single set of credentials, region and service.

    Usage:
        signer = SigV4Signer(access_key, secret_key, 'us-east-1', Service.S3)
        headers = signer.create_headers('GET', url)
        requests.get(url, headers=headers)
    """

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            region: str,
            service: ServiceName,
            token: Optional[str] = None
    ) -> None:
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region
        self.service = _service_code(service)
        self.token = token

    def __repr__(self) -> str:
        return f'SigV4Signer(access_key={self.access_key!r}, region={self.region!r}, service={self.service!r})'

    def _prepare_headers(
            self,
            url: str,
            headers: Optional[HeaderSource],
            hashed_payload: str,
            timestamp: datetime
    ) -> Headers:
        prepared = {
            name: value for name, value in snapshot_headers(headers)
            if name.lower() not in _MANAGED_HEADERS
        }
        if not any(name.lower() == 'host' for name in prepared):
            prepared['Host'] = _host_from_url(url)
        prepared['X-Amz-Date'] = timestamp.strftime(LONG_DATETIME)
        if self.token:
            prepared['X-Amz-Security-Token'] = self.token
        # S3 requires the payload hash header; other services only need it
        # to announce an unsigned payload.
        if self.service == Service.S3.value or hashed_payload == UNSIGNED_PAYLOAD:
            prepared['X-Amz-Content-SHA256'] = hashed_payload
        return prepared

    def _build(
            self,
            method: str,
            url: str,
            headers: Optional[HeaderSource],
            body: Body,
            timestamp: Optional[datetime]
    ) -> Tuple[SigningRequest, Headers]:
        timestamp = to_utc(timestamp) if timestamp is not None else datetime.now(timezone.utc)
        hashed_payload = payload_hash(body)
        prepared = self._prepare_headers(url, headers, hashed_payload, timestamp)
        request = SigningRequest(
            method=method,
            url=url,
            headers=[(k, v) for k, v in prepared.items() if k.lower() not in UNSIGNED_HEADERS],
            body=body,
            datetime=timestamp,
            region=self.region,
            service=self.service,
            access_key=self.access_key,
            secret_key=self.secret_key,
            payload_hash=hashed_payload,
        )
        return request, prepared

    def build_request(
            self,
            method: str,
            url: str,
            headers: Optional[HeaderSource] = None,
            body: Body = None,
            timestamp: Optional[datetime] = None
    ) -> SigningRequest:
        """Return the SigningRequest create_headers() would sign, without signing it."""
        return self._build(method, url, headers, body, timestamp)[0]

    def create_headers(
            self,
            method: str,
            url: str,
            headers: Optional[HeaderSource] = None,
            body: Body = None,
            timestamp: Optional[datetime] = None
    ) -> Headers:
        """
        Return a new header dict with the SigV4 headers and Authorization added.

        The caller's headers are copied, never modified. ``timestamp``
        defaults to the current UTC time.
        """
        request, prepared = self._build(method, url, headers, body, timestamp)
        prepared['Authorization'] = sign(request)
        return prepared
