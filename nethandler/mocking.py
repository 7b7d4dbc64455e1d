import logging
import threading
from typing import Callable, List, Optional, Tuple

from .model import NetworkRequest, Response
from .transport import Completion, LoadingTask, Transport


logger = logging.getLogger(__name__)


VerificationHandler = Callable[[Optional[bytes]], Tuple[Optional[int], Optional[bytes], Optional[BaseException]]]
"""
Receives the body of an outbound request and returns the status code, body and
error to answer it with.
"""


class MockTransport(Transport):
    """
    A transport that never touches the network.

    It answers every request with canned data, or with whatever a verification
    handler computes from the request body, after `mock_delay` seconds on a
    timer thread. A `mock_response_code` of `None` simulates a response without
    a status line.
    """

    def __init__(self,
                 mock_data: Optional[bytes] = None,
                 mock_error: Optional[BaseException] = None,
                 mock_response_code: Optional[int] = 200,
                 mock_delay: float = 0.1,
                 input_verification_handler: Optional[VerificationHandler] = None) -> None:
        self.mock_data = mock_data
        self.mock_error = mock_error
        self.mock_response_code = mock_response_code
        self.mock_delay = mock_delay
        self.http_version = 'HTTP/2'
        self.input_verification_handler = input_verification_handler
        self.__lock = threading.Lock()
        self.__requests: List[NetworkRequest] = []
        self.__removed_from_cache: List[NetworkRequest] = []

    @classmethod
    def verifying(cls, handler: VerificationHandler, mock_delay: float = 0.1) -> 'MockTransport':
        return cls(mock_delay=mock_delay, input_verification_handler=handler)

    @property
    def requests(self) -> List[NetworkRequest]:
        with self.__lock:
            return list(self.__requests)

    @property
    def load_count(self) -> int:
        with self.__lock:
            return len(self.__requests)

    @property
    def removed_from_cache(self) -> List[NetworkRequest]:
        with self.__lock:
            return list(self.__removed_from_cache)

    def load_data(self, request: NetworkRequest, completion: Completion) -> LoadingTask:
        with self.__lock:
            self.__requests.append(request)

        if self.input_verification_handler is not None:
            code, data, error = self.input_verification_handler(request.body)
        else:
            code, data, error = self.mock_response_code, self.mock_data, self.mock_error

        response = None
        if code is not None:
            response = Response(status=code, url=request.url, http_version=self.http_version)

        task = LoadingTask(request)
        timer = threading.Timer(self.mock_delay, task.finish, args=(completion, data, response, error))
        timer.daemon = True

        def cancel():
            timer.cancel()
            task.finish(completion, None, None, None)

        task.on_cancel = cancel
        logger.info('Answering {} {} with {} in {}s'.format(request.method, request.url, code, self.mock_delay))
        timer.start()
        return task

    def remove_cached_response(self, request: NetworkRequest) -> None:
        with self.__lock:
            self.__removed_from_cache.append(request)
