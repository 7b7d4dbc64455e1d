"""
Turns the raw outcome of a transport call into a result.

The checks run in a fixed order: the status code is validated first, then a
GraphQL error body is looked for, then the transport error, and only then is
the response a success.
"""

import json
import logging
from typing import AbstractSet, Optional

from .errors import (GraphQLError, HttpNonAcceptableStatusCode, NetworkError, NoStatusCodeResponse,
                     OtherError)
from .model import GQLError, GQLErrorContainer, Response
from .result import Failure, Result, Success
from .util import DataclassJSONDecoder


logger = logging.getLogger(__name__)


def classify_response(data: Optional[bytes],
                      response: Optional[Response],
                      error: Optional[BaseException],
                      expected_response_codes: AbstractSet[int],
                      graphql_error_support: bool = False) -> Result[Optional[bytes]]:
    """
    Decide whether a transport call succeeded.

    @param data
      The body delivered by the transport, if any.
    @param response
      The status metadata delivered by the transport, if any.
    @param error
      The error delivered by the transport, if any.
    @param expected_response_codes
      The status codes the request accepts.
    @param graphql_error_support
      Whether to look for a GraphQL error list in the body.
    @return
      `Success` with `data`, which may be `None`, or `Failure` with the kind of
      error that applies.
    """
    if response is None or response.status is None:
        logger.info('Did not receive a proper response code')
        return Failure(NoStatusCodeResponse())

    if response.status not in expected_response_codes:
        logger.info('Received an unexpected http response: {}'.format(response.status))
        return Failure(HttpNonAcceptableStatusCode(response.status, data))

    if graphql_error_support and data is not None:
        graphql_error = decode_graphql_error(data)
        if graphql_error is not None:
            logger.info('Response body carries a GraphQL error: {}'.format(graphql_error.message))
            return Failure(GraphQLError(graphql_error))

    if error is not None:
        logger.info('The transport reported an error: {}'.format(error))
        if isinstance(error, NetworkError):
            return Failure(error)
        return Failure(OtherError(error))

    return Success(data)


def decode_graphql_error(data: bytes) -> Optional[GQLError]:
    """
    Return the first error of a GraphQL error body, or `None` if `data` is not
    one or its error list is empty.
    """
    try:
        container = json.loads(data, cls=DataclassJSONDecoder, class_type=GQLErrorContainer)
    except Exception:
        # Any body that isn't an error container is an ordinary payload,
        # including ones nested too deeply to parse.
        return None
    if not container.errors:
        return None
    return container.errors[0]
