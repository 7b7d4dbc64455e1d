"""
Defines the types that flow through the request pipeline.

These types are as simple as possible in order to most conveniently consume and
produce instances of them. None of them know anything about the transport that
ends up carrying them.
"""

from dataclasses import dataclass, field, replace
import json
from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Union

from .util import DataclassJSONEncoder


DEFAULT_EXPECTED_RESPONSE_CODES = frozenset(range(200, 300))


@dataclass(frozen=True)
class NetworkRequest:
    """
    Describes a request to send through a transport.

    Note that only `url` identifies the request as far as the response cache is
    concerned. Two requests to the same URL with different methods or bodies
    share a cache entry.
    """

    url: str
    """
    The resource locator being requested. Also the cache key.
    """

    method: str = 'GET'
    """
    The HTTP method of the request. E.g., "GET".
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    """
    All the headers being sent with the request.
    """

    body: Optional[bytes] = None
    """
    The payload of the request, if any.
    """

    expected_response_codes: FrozenSet[int] = DEFAULT_EXPECTED_RESPONSE_CODES
    """
    The HTTP status codes considered a success. Anything else is reported as
    `HttpNonAcceptableStatusCode`. A single int is accepted as well.
    """

    timeout: float = 60.0
    """
    Seconds the transport waits on the server before giving up.
    """

    def __post_init__(self) -> None:
        codes = self.expected_response_codes
        if isinstance(codes, int):
            codes = (codes,)
        codes = frozenset(codes)
        if not codes:
            raise ValueError('A request must accept at least one response code')
        object.__setattr__(self, 'expected_response_codes', codes)
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    def __hash__(self) -> int:
        return hash((self.url, self.method, frozenset(self.headers.items()), self.body,
                     self.expected_response_codes, self.timeout))

    @classmethod
    def for_url(cls, url: str) -> 'NetworkRequest':
        return cls(url=url)

    def with_header(self, key: str, value: str) -> 'NetworkRequest':
        headers = dict(self.headers)
        headers[key] = value
        return replace(self, headers=headers)

    def with_json_body(self, payload: Any) -> 'NetworkRequest':
        """
        Encode `payload` as the JSON body of a copy of this request.

        Dataclasses are encoded as JSON objects, everything else must be
        natively JSON serializable.
        """
        body = json.dumps(payload, cls=DataclassJSONEncoder).encode('utf-8')
        return replace(self, body=body).with_header('Content-Type', 'application/json')

    def with_expected_response_codes(self, codes: Union[int, Iterable[int]]) -> 'NetworkRequest':
        return replace(self, expected_response_codes=codes)


@dataclass
class Response:
    """
    Represents the status metadata of a response, without the body.

    The body travels next to it as plain bytes. We deliberately do not use the
    `requests` response type here so that any transport can produce one of
    these.
    """

    status: Optional[int]
    """
    The status code of the response. E.g., 200 or 400. `None` if the response
    lacked a status line.
    """

    reason: str = ''
    """
    The reason string, which relates to the status code.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    """
    All the headers sent with the response.
    """

    url: Optional[str] = None
    """
    The final URL of the response, after any redirects.
    """

    http_version: Optional[str] = None
    """
    The HTTP version the response was sent with. E.g., "HTTP/1.1". `None` if
    the transport doesn't know.
    """


@dataclass
class GQLLocation:
    line: int
    column: int


@dataclass
class GQLError:
    """
    A single entry of the `errors` list of a GraphQL response.
    """

    message: str
    locations: Optional[List[GQLLocation]] = None
    path: Optional[List[Union[str, int]]] = None
    extensions: Optional[Mapping[str, Any]] = None


@dataclass
class GQLErrorContainer:
    """
    The part of a GraphQL response body that reports logical errors.

    GraphQL servers answer with HTTP 200 even when a query fails, so the body
    is the only place to find out.
    """

    errors: List[GQLError]
