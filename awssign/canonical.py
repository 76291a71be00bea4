"""
Canonical request construction for SigV4.

See: https://docs.aws.amazon.com/IAM/latest/UserGuide/create-signed-request.html#create-canonical-request
"""
import hashlib
from typing import Dict, List
from urllib.parse import parse_qsl

from .encoding import uri_encode
from .request import Body, HeaderPairs, SigningRequest

UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'
EMPTY_SHA256 = hashlib.sha256(b'').hexdigest()

# Chunk size used when hashing file-like bodies.
PAYLOAD_BUFFER = 1024 * 1024


def canonical_query_string(query: str) -> str:
    """
    Sort and re-encode a raw query string.

    Pairs are decoded first (so already-encoded input is not double encoded),
    then each key and value is encoded on its own and the ``key=value``
    strings are sorted as a whole. Repeated keys are all kept.
    """
    pairs = parse_qsl(query, keep_blank_values=True)
    encoded = sorted(f'{uri_encode(key)}={uri_encode(value)}' for key, value in pairs)
    return '&'.join(encoded)


def _trim(value: str) -> str:
    # Trimall: strip the ends and squeeze inner runs of whitespace.
    return ' '.join(value.split())


def _group_headers(headers: HeaderPairs) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for name, value in headers:
        grouped.setdefault(name.lower(), []).append(_trim(value))
    return grouped


def canonical_header_string(headers: HeaderPairs) -> str:
    grouped = _group_headers(headers)
    return '\n'.join(f'{name}:{",".join(grouped[name])}' for name in sorted(grouped))


def signed_header_string(headers: HeaderPairs) -> str:
    return ';'.join(sorted(_group_headers(headers)))


def payload_hash(body: Body) -> str:
    """
    Hex SHA-256 of the request body.

    ``UNSIGNED-PAYLOAD`` is passed through untouched. Seekable streams are
    read in chunks and rewound to where they started.
    """
    if body is None:
        return EMPTY_SHA256
    if isinstance(body, str):
        if body == UNSIGNED_PAYLOAD:
            return UNSIGNED_PAYLOAD
        body = body.encode('utf-8')
    if isinstance(body, (bytes, bytearray, memoryview)):
        return hashlib.sha256(body).hexdigest()

    position = body.tell()
    checksum = hashlib.sha256()
    for chunk in iter(lambda: body.read(PAYLOAD_BUFFER), b''):
        checksum.update(chunk)
    body.seek(position)
    return checksum.hexdigest()


def canonical_request(request: SigningRequest) -> str:
    """Build the canonical request string for ``request``."""
    if request.payload_hash is not None:
        hashed_payload = request.payload_hash
    else:
        hashed_payload = payload_hash(request.body)

    return '\n'.join([
        request.method,
        request.path,
        canonical_query_string(request.query),
        canonical_header_string(request.headers),
        '',
        signed_header_string(request.headers),
        hashed_payload,
    ])
