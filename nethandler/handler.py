import json
import logging
import threading
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from .cache import Cache, NetworkCache
from .classifier import classify_response
from .errors import BadData, DataCodingError, DataWasNull, UrlInvalid
from .model import NetworkRequest, Response
from .result import Failure, Result, Success
from .transport import LoadingTask, RequestsTransport, Transport
from .util import NULL_LITERAL, DataclassJSONDecoder, empty_collection, is_valid_url


logger = logging.getLogger(__name__)


T = TypeVar('T')


class NetworkHandler:
    """
    Fetches data through a transport, with an optional in-memory cache and
    optional decoding of JSON bodies.

    There are three ways to fetch, each building on the previous one:

    - `fetch_optional_data()` delivers the body, which may be `None`.
    - `fetch_data()` requires a body.
    - `fetch_decoded()` decodes the body into a given type.

    Each delivers exactly one result to its completion callback and returns a
    handle to cancel the transport operation, or `None` when no transport was
    involved.

    When a fetch uses the cache, the body is looked up by URL first and stored
    by URL after a successful transport call. Cache headers are ignored and
    entries live until they are evicted, removed, or the cache is reset. Note
    that entries are unique to the URL, not the request.
    """

    def __init__(self,
                 transport: Optional[Transport] = None,
                 cache: Optional[Cache] = None,
                 print_errors_to_console: bool = False,
                 graphql_error_support: bool = False,
                 null_data_is_valid: bool = False,
                 decoder_options: Optional[Dict[str, Any]] = None) -> None:
        """
        @param transport
          The transport used by fetches that don't pass their own. Defaults to a
          `RequestsTransport`, created on first use.
        @param cache
          The response cache. Defaults to an unbounded `NetworkCache`.
        @param print_errors_to_console
          Log every failure at warning level.
        @param graphql_error_support
          GraphQL servers answer 200 even when a query fails. Turning this on
          makes 2xx bodies that hold a GraphQL error list fail with
          `GraphQLError`.
        @param null_data_is_valid
          When a decode into a collection type meets a `null` body, deliver an
          empty collection instead of `DataWasNull`.
        @param decoder_options
          Keyword arguments for `json.loads()`, applied to every decode.
        """
        self.__transport = transport
        self.__owns_transport = False
        self.__transport_lock = threading.Lock()
        self.cache = cache if cache is not None else NetworkCache()
        self.print_errors_to_console = print_errors_to_console
        self.graphql_error_support = graphql_error_support
        self.null_data_is_valid = null_data_is_valid
        self.decoder_options = dict(decoder_options or {})

    @property
    def transport(self) -> Transport:
        with self.__transport_lock:
            if self.__transport is None:
                self.__transport = RequestsTransport()
                self.__owns_transport = True
            return self.__transport

    def close(self) -> None:
        """
        Close the default transport, if the handler created it. A transport
        passed in by the caller is left to the caller.
        """
        with self.__transport_lock:
            if not self.__owns_transport:
                return
            transport = self.__transport
            self.__transport = None
            self.__owns_transport = False
        logger.info('Closing the default transport')
        transport.close()

    def __enter__(self) -> 'NetworkHandler':
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def fetch_optional_data(self,
                            request: NetworkRequest,
                            completion: Callable[[Result[Optional[bytes]]], None],
                            use_cache: bool = False,
                            transport: Optional[Transport] = None) -> Optional[LoadingTask]:
        """
        Fetch the body of a response, primarily for when you don't actually care
        about it.

        @param request
          The request to send.
        @param completion
          Receives `Success` with the body, which may be `None`, or `Failure`.
        @param use_cache
          Look for the body in the cache first, and cache it after a successful
          transport call.
        @param transport
          The transport to send the request with instead of the default one.
        @return
          A handle to the transport operation, or `None` if the request was
          answered without one.
        """
        if not is_valid_url(request.url):
            self._fail(completion, UrlInvalid(request.url))
            return None

        if use_cache:
            data = self.cache.get(request.url)
            if data is not None:
                logger.info('Cache hit for {}'.format(request.url))
                completion(Success(data))
                return None
            logger.info('Cache miss for {}'.format(request.url))

        transport = transport if transport is not None else self.transport

        def on_load(data: Optional[bytes], response: Optional[Response], error: Optional[BaseException]) -> None:
            result = classify_response(data, response, error, request.expected_response_codes,
                                       graphql_error_support=self.graphql_error_support)
            if isinstance(result, Failure):
                self._fail(completion, result.error)
                return

            if use_cache and result.value is not None:
                logger.info('Caching {} bytes for {}'.format(len(result.value), request.url))
                self.cache.set(request.url, result.value)
                transport.remove_cached_response(request)
            completion(result)

        return transport.load_data(request, on_load)

    def fetch_data(self,
                   request: NetworkRequest,
                   completion: Callable[[Result[bytes]], None],
                   use_cache: bool = False,
                   transport: Optional[Transport] = None) -> Optional[LoadingTask]:
        """
        Fetch the body of a response. A response without one fails with
        `BadData`.

        Takes the same arguments as `fetch_optional_data()`.
        """
        def on_optional_data(result: Result[Optional[bytes]]) -> None:
            if isinstance(result, Success) and result.value is None:
                self._fail(completion, BadData(None))
                return
            completion(result)

        return self.fetch_optional_data(request, on_optional_data, use_cache=use_cache, transport=transport)

    def fetch_decoded(self,
                      request: NetworkRequest,
                      target_type: Type[T],
                      completion: Callable[[Result[T]], None],
                      use_cache: bool = False,
                      transport: Optional[Transport] = None) -> Optional[LoadingTask]:
        """
        Fetch the body of a response and decode it from JSON into `target_type`.

        A body that doesn't decode fails with `DataCodingError`, unless it is
        the literal `null`, which fails with `DataWasNull` instead. See
        `util.from_json()` for the types that can be decoded into.

        Takes the same arguments as `fetch_optional_data()`, plus `target_type`.
        """
        def on_data(result: Result[bytes]) -> None:
            if isinstance(result, Failure):
                completion(result)
                return
            completion(self.decode(result.value, target_type))

        return self.fetch_data(request, on_data, use_cache=use_cache, transport=transport)

    def decode(self, data: bytes, target_type: Type[T]) -> Result[T]:
        try:
            value = json.loads(data, cls=DataclassJSONDecoder, class_type=target_type, **self.decoder_options)
        except Exception as e:
            # Whatever decoding the body raises is a coding error of the body.
            if data == NULL_LITERAL:
                empty = empty_collection(target_type) if self.null_data_is_valid else None
                if empty is not None:
                    return Success(empty)
                return self._failure(DataWasNull())
            logger.info('Error decoding data into {}: {}'.format(target_type, e))
            return self._failure(DataCodingError(e, data))
        return Success(value)

    def _fail(self, completion: Callable[[Failure], None], error) -> None:
        completion(self._failure(error))

    def _failure(self, error) -> Failure:
        if self.print_errors_to_console:
            logger.warning('Request failed: {!r}'.format(error))
        return Failure(error)
