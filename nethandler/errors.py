"""
The closed set of errors a `NetworkHandler` reports.

Every failure that leaves the request pipeline is an instance of one of the
`NetworkError` subclasses below, carried by a `Failure` result. Foreign
exceptions are wrapped in `OtherError`.

Two errors are equal when they are the same kind and carry equal diagnostic
payloads. Wrapped exceptions are not otherwise comparable, so they are compared
by their text.
"""

from typing import Optional, Tuple

from .model import GQLError


class NetworkError(Exception):
    """
    Base class of all errors reported by the request pipeline.
    """

    def _diagnostics(self) -> Tuple:
        return ()

    def __eq__(self, other):
        if not isinstance(other, NetworkError):
            return NotImplemented
        return type(self) is type(other) and self._diagnostics() == other._diagnostics()

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return '{}{!r}'.format(type(self).__name__, self._diagnostics())


class OtherError(NetworkError):
    """
    Wraps an error that doesn't otherwise fall under one of the predetermined
    categories.
    """

    def __init__(self, error: BaseException) -> None:
        super().__init__('Unexpected error: {}'.format(error))
        self.error = error

    def _diagnostics(self) -> Tuple:
        return (str(self.error),)


class BadData(NetworkError):
    """
    The request expected a body, but either didn't get any or got something
    unusable. Wraps the source data for debugging.
    """

    def __init__(self, source_data: Optional[bytes] = None) -> None:
        super().__init__('Bad or missing response data')
        self.source_data = source_data

    def _diagnostics(self) -> Tuple:
        return (self.source_data,)


class DataCodingError(NetworkError):
    """
    The body couldn't be decoded into the requested type. Wraps the original
    error and source data for debugging.
    """

    def __init__(self, specifically: BaseException, source_data: Optional[bytes] = None) -> None:
        super().__init__('Error decoding data: {}'.format(specifically))
        self.specifically = specifically
        self.source_data = source_data

    def _diagnostics(self) -> Tuple:
        return (str(self.specifically), self.source_data)


class ImageDecodeError(NetworkError):
    """
    Not raised by the pipeline itself. Available to callers that fail to decode
    an image fetched from a remote source.
    """

    def __init__(self) -> None:
        super().__init__('Could not decode image data')


class UrlInvalid(NetworkError):
    """
    The resource locator of a request is malformed. Wraps the offending string.
    """

    def __init__(self, url_string: Optional[str] = None) -> None:
        super().__init__('Invalid URL: {}'.format(url_string))
        self.url_string = url_string

    def _diagnostics(self) -> Tuple:
        return (self.url_string,)


class NoStatusCodeResponse(NetworkError):
    """
    The transport didn't produce a response with an HTTP status code.
    """

    def __init__(self) -> None:
        super().__init__('The response did not include a status code')


class HttpNonAcceptableStatusCode(NetworkError):
    """
    The status code of the response is not one the request accepts. Wraps the
    code and any body that came with it, which often explains the failure.
    """

    def __init__(self, code: int, data: Optional[bytes] = None) -> None:
        super().__init__('Unacceptable HTTP status code: {}'.format(code))
        self.code = code
        self.data = data

    def _diagnostics(self) -> Tuple:
        return (self.code, self.data)


class DatabaseFailure(NetworkError):
    """
    Not raised by the pipeline itself. Available to callers whose persistence
    layer fails while handling a response. Wraps the original error.
    """

    def __init__(self, specifically: BaseException) -> None:
        super().__init__('Database failure: {}'.format(specifically))
        self.specifically = specifically

    def _diagnostics(self) -> Tuple:
        return (str(self.specifically),)


class DataWasNull(NetworkError):
    """
    The body was the JSON literal `null`.

    Some APIs (Firebase, for one) answer `null` when a query yields no results.
    That is often fine, so callers can catch this specifically and, say, show
    an empty list instead of an error:

        try:
            items = result.get()
        except DataWasNull:
            items = []
    """

    def __init__(self) -> None:
        super().__init__('The response data was null')


class UnspecifiedError(NetworkError):
    """
    Escape hatch for when none of the other kinds apply. Optionally carries a
    reason.
    """

    def __init__(self, reason: Optional[str] = None) -> None:
        super().__init__('Unspecified error: {}'.format(reason))
        self.reason = reason

    def _diagnostics(self) -> Tuple:
        return (self.reason,)


class GraphQLError(NetworkError):
    """
    A GraphQL server reported a logical error in an otherwise successful
    response.
    """

    def __init__(self, error: GQLError) -> None:
        super().__init__('GraphQL error: {}'.format(error.message))
        self.error = error

    def _diagnostics(self) -> Tuple:
        return (self.error,)
