import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, BinaryIO, Iterable, Optional, Tuple, Union
from urllib.parse import SplitResult, urlsplit

from .errors import InvalidUrl, UndecodableHeaderValue

logger = logging.getLogger(__name__)

HeaderPairs = Tuple[Tuple[str, str], ...]
HeaderSource = Union[Mapping, Iterable[Tuple[Any, Any]]]
Body = Union[None, str, bytes, bytearray, memoryview, BinaryIO]


def parse_url(url: str) -> SplitResult:
    """Split ``url`` and make sure it is absolute, raising InvalidUrl otherwise."""
    try:
        parts = urlsplit(url)
        # .port validates the port lazily
        parts.port
    except (TypeError, ValueError) as e:
        raise InvalidUrl(str(url), str(e)) from e
    if not parts.scheme:
        raise InvalidUrl(url, 'missing scheme')
    if not parts.hostname:
        raise InvalidUrl(url, 'missing host')
    return parts


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode('utf-8')
    return str(value)


def snapshot_headers(headers: Optional[HeaderSource], drop_undecodable: bool = False) -> HeaderPairs:
    """
    Copy any header collection into a tuple of ``(name, value)`` text pairs.

    Accepts a mapping or any iterable of pairs, so header objects from
    different HTTP libraries can be passed straight in. Names are kept
    verbatim; case folding happens during canonicalization.
    """
    if headers is None:
        return ()
    items = headers.items() if isinstance(headers, Mapping) else headers

    pairs = []
    for name, value in items:
        try:
            name = _to_text(name)
        except UnicodeDecodeError as e:
            raise UndecodableHeaderValue(repr(name)) from e
        try:
            text = _to_text(value)
        except UnicodeDecodeError as e:
            if not drop_undecodable:
                raise UndecodableHeaderValue(name) from e
            logger.debug('Dropping header %s from signature: value is not valid UTF-8', name)
            continue
        pairs.append((name, text))
    return tuple(pairs)


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class SigningRequest:
    """
    Everything needed to sign one HTTP request.

    The header collection is snapshotted and the URL validated on
    construction, so a SigningRequest that exists can always be signed.
    """
    method: str
    url: str
    headers: HeaderSource
    body: Body
    datetime: datetime
    region: str
    service: str
    access_key: str
    secret_key: str = field(repr=False)
    payload_hash: Optional[str] = None
    drop_undecodable_headers: bool = False

    def __post_init__(self) -> None:
        parts = parse_url(self.url)
        object.__setattr__(self, '_parts', parts)
        object.__setattr__(
            self, 'headers', snapshot_headers(self.headers, self.drop_undecodable_headers)
        )
        object.__setattr__(self, 'datetime', to_utc(self.datetime))
        # Service enum members are str subclasses; store the plain code.
        object.__setattr__(self, 'service', str(getattr(self.service, 'value', self.service)))

    @property
    def path(self) -> str:
        return self._parts.path or '/'

    @property
    def query(self) -> str:
        return self._parts.query
