from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
import logging
import threading
from typing import Callable, Optional, Tuple

import requests

from .model import NetworkRequest, Response


logger = logging.getLogger(__name__)


Completion = Callable[[Optional[bytes], Optional[Response], Optional[BaseException]], None]
"""
Receives the body, the status metadata and the error of a transport call.
"""


class TaskStatus(Enum):
    RUNNING = 'running'
    CANCELING = 'canceling'
    COMPLETED = 'completed'


class TaskCancelled(Exception):
    """
    Delivered as the transport error of a task that was cancelled.
    """


class LoadingTask:
    """
    A handle to an in-flight transport operation.

    The task makes sure its completion is delivered exactly once. Cancelling a
    running task still delivers it, with no response and a `TaskCancelled`
    error.
    """

    def __init__(self, request: NetworkRequest, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self.request = request
        self.on_cancel = on_cancel
        self.__lock = threading.Lock()
        self.__status = TaskStatus.RUNNING

    @property
    def status(self) -> TaskStatus:
        return self.__status

    def cancel(self) -> None:
        with self.__lock:
            if self.__status is not TaskStatus.RUNNING:
                return
            self.__status = TaskStatus.CANCELING
        logger.info('Cancelling the request to {}'.format(self.request.url))
        if self.on_cancel is not None:
            self.on_cancel()

    def finish(self, completion: Completion, data: Optional[bytes], response: Optional[Response],
               error: Optional[BaseException]) -> None:
        """
        Hand the outcome of the operation to `completion`, unless it already
        has been.
        """
        with self.__lock:
            if self.__status is TaskStatus.COMPLETED:
                return
            cancelled = self.__status is TaskStatus.CANCELING
            self.__status = TaskStatus.COMPLETED

        if cancelled:
            completion(None, None, TaskCancelled('The request to {} was cancelled'.format(self.request.url)))
        else:
            completion(data, response, error)


class Transport(ABC):
    """
    An abstraction of the network.

    A transport takes a request and eventually reports what came back. It knows
    nothing about caching or about what counts as a successful response.
    """

    @abstractmethod
    def load_data(self, request: NetworkRequest, completion: Completion) -> Optional[LoadingTask]:
        """
        Send a request.

        @param request
          The request to send.
        @param completion
          Called exactly once, possibly from another thread, with the body, the
          status metadata and the error of the call. Any of them may be `None`.
        @return
          A handle to cancel the operation, or `None` if there is nothing to
          cancel.
        """

    def remove_cached_response(self, request: NetworkRequest) -> None:
        """
        Forget any response the transport itself cached for `request`.

        Called once the response cache of the handler stores the body, so that
        it is not stored twice. Transports without a cache of their own have
        nothing to do.
        """

    def close(self) -> None:
        """
        Close any resources associated with the transport.
        """


class RequestsTransport(Transport):
    """
    Sends requests with a `requests.Session` on a pool of worker threads.
    """

    def __init__(self, session: Optional[requests.Session] = None, max_workers: int = 8) -> None:
        self.session = session if session is not None else requests.Session()
        self.__executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='nethandler')

    def load_data(self, request: NetworkRequest, completion: Completion) -> LoadingTask:
        task = LoadingTask(request)
        logger.info('Dispatching {} {}'.format(request.method, request.url))
        future = self.__executor.submit(self._send, request, task)
        task.on_cancel = future.cancel
        future.add_done_callback(lambda f: self._on_done(f, task, completion))
        return task

    def _send(self, request: NetworkRequest, task: LoadingTask) -> Tuple[bytes, Response]:
        requests_request = requests.Request(method=request.method,
                                            url=request.url,
                                            headers=dict(request.headers),
                                            data=request.body)
        prepared = self.session.prepare_request(requests_request)
        requests_response = self.session.send(prepared, timeout=request.timeout, stream=True)
        try:
            if task.status is TaskStatus.CANCELING:
                # Don't bother downloading a body nobody will see.
                return b'', to_response(requests_response)
            return requests_response.content, to_response(requests_response)
        finally:
            requests_response.close()

    def _on_done(self, future: Future, task: LoadingTask, completion: Completion) -> None:
        if future.cancelled():
            task.finish(completion, None, None, None)
            return

        error = future.exception()
        if error is not None:
            logger.info('Request to {} failed: {}'.format(task.request.url, error))
            task.finish(completion, None, None, error)
            return

        data, response = future.result()
        logger.info('Received {} from {}'.format(response.status, task.request.url))
        task.finish(completion, data, response, None)

    def close(self) -> None:
        self.__executor.shutdown(wait=False)
        self.session.close()


def to_response(requests_response: requests.Response) -> Response:
    version = {10: 'HTTP/1.0', 11: 'HTTP/1.1'}.get(getattr(requests_response.raw, 'version', None))
    return Response(status=requests_response.status_code,
                    reason=requests_response.reason or '',
                    headers=dict(requests_response.headers),
                    url=requests_response.url,
                    http_version=version)
