"""
AWS Signature Version 4 - Standalone Implementation

This package computes SigV4 Authorization headers for outbound HTTP requests
using only the standard library's hashlib and hmac. It never sends requests
or looks up credentials; callers pass those in and attach the result.
"""

from .canonical import canonical_request, payload_hash
from .encoding import uri_encode
from .errors import InvalidUrl, SigningError, UndecodableHeaderValue
from .request import SigningRequest
from .sigv4 import (
    EMPTY_SHA256,
    UNSIGNED_PAYLOAD,
    Headers,
    Service,
    SigV4Signer,
    scope_string,
    sign,
    signature,
    signing_key,
    string_to_sign,
)

__version__ = "0.1.0"
__all__ = [
    "SigV4Signer",
    "SigningRequest",
    "UNSIGNED_PAYLOAD",
    "EMPTY_SHA256",
    "Service",
    "Headers",
    "canonical_request",
    "payload_hash",
    "scope_string",
    "sign",
    "signature",
    "signing_key",
    "string_to_sign",
    "uri_encode",
    "SigningError",
    "InvalidUrl",
    "UndecodableHeaderValue",
]
