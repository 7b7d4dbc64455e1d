from abc import ABC, abstractmethod
from collections import OrderedDict
import logging
import threading
from typing import Optional


logger = logging.getLogger(__name__)


class Cache(ABC):
    """
    An abstraction of a response cache.

    A response cache has a relatively narrow scope: to remember the body of a
    response such that it can be recalled later for the same URL. Note that this
    deliberately precludes certain responsibilities such as HTTP cache
    validation. Entries live until they are evicted to make room, removed, or
    the cache is reset.

    Subscript access is supported as well: `cache[url]` returns `None` on a
    miss, `cache[url] = None` and `del cache[url]` remove the entry.
    """

    name = 'nethandler: Cache'

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Retrieve the data cached for `key`.

        @param key
          The URL to look up in the cache.
        @return
          The cached data, or `None` if there is none.
        """

    @abstractmethod
    def set(self, key: str, data: Optional[bytes]) -> None:
        """
        Add data to the cache, replacing any prior entry for `key`.

        @param key
          The URL under which to store `data`.
        @param data
          The data to cache. `None` removes the entry instead.
        """

    @abstractmethod
    def remove(self, key: str) -> Optional[bytes]:
        """
        Delete an entry from the cache.

        @param key
          The URL whose entry should be deleted.
        @return
          The data that was cached for `key`, or `None` if there was none.
        """

    @abstractmethod
    def reset(self) -> None:
        """
        Delete every entry in the cache.
        """

    def __getitem__(self, key: str) -> Optional[bytes]:
        return self.get(key)

    def __setitem__(self, key: str, data: Optional[bytes]) -> None:
        self.set(key, data)

    def __delitem__(self, key: str) -> None:
        self.remove(key)


class NetworkCache(Cache):
    """
    A bounded, thread safe, in-memory cache of response bodies.

    Every entry costs its size in bytes. Whenever there are more entries than
    `count_limit`, or they cost more than `total_cost_limit` in total, the least
    recently used entries are evicted until both limits are respected again. A
    limit of 0 means no limit. Reading an entry with `get()` counts as using it.
    """

    name = 'nethandler: NetworkCache'

    def __init__(self, count_limit: int = 0, total_cost_limit: int = 0) -> None:
        self.__lock = threading.RLock()
        # Least recently used first.
        self.__entries: 'OrderedDict[str, bytes]' = OrderedDict()
        self.__total_cost = 0
        self.__count_limit = _check_limit(count_limit)
        self.__total_cost_limit = _check_limit(total_cost_limit)

    @property
    def count_limit(self) -> int:
        return self.__count_limit

    @count_limit.setter
    def count_limit(self, limit: int) -> None:
        with self.__lock:
            self.__count_limit = _check_limit(limit)
            self._evict()

    @property
    def total_cost_limit(self) -> int:
        return self.__total_cost_limit

    @total_cost_limit.setter
    def total_cost_limit(self, limit: int) -> None:
        with self.__lock:
            self.__total_cost_limit = _check_limit(limit)
            self._evict()

    @property
    def total_cost(self) -> int:
        return self.__total_cost

    def get(self, key: str) -> Optional[bytes]:
        with self.__lock:
            data = self.__entries.get(key)
            if data is not None:
                self.__entries.move_to_end(key)
        return data

    def set(self, key: str, data: Optional[bytes]) -> None:
        if data is None:
            self.remove(key)
            return

        with self.__lock:
            previous = self.__entries.pop(key, None)
            if previous is not None:
                self.__total_cost -= len(previous)
            self.__entries[key] = data
            self.__total_cost += len(data)
            self._evict()

    def remove(self, key: str) -> Optional[bytes]:
        with self.__lock:
            data = self.__entries.pop(key, None)
            if data is not None:
                self.__total_cost -= len(data)
        return data

    def reset(self) -> None:
        with self.__lock:
            self.__entries.clear()
            self.__total_cost = 0
        logger.info('Cleared all entries from {}'.format(self.name))

    def _evict(self) -> None:
        # Callers hold the lock.
        while self.__entries and self._over_limit():
            key, data = self.__entries.popitem(last=False)
            self.__total_cost -= len(data)
            logger.info('Evicted {} ({} bytes) from {}'.format(key, len(data), self.name))

    def _over_limit(self) -> bool:
        if self.__count_limit and len(self.__entries) > self.__count_limit:
            return True
        if self.__total_cost_limit and self.__total_cost > self.__total_cost_limit:
            return True
        return False

    def __contains__(self, key: str) -> bool:
        with self.__lock:
            return key in self.__entries

    def __len__(self) -> int:
        with self.__lock:
            return len(self.__entries)


def _check_limit(limit: int) -> int:
    if limit < 0:
        raise ValueError('Cache limits cannot be negative: {}'.format(limit))
    return limit
