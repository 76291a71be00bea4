"""Exceptions raised while building or signing a request."""


class SigningError(ValueError):
    """Base class for every error raised by awssign."""


class InvalidUrl(SigningError):
    """The request URL could not be parsed or is not absolute."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class UndecodableHeaderValue(SigningError):
    """A header value is not valid UTF-8 text and cannot be canonicalized."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Header {name!r} has a value that is not valid UTF-8")
