"""
The result envelope handed to every completion callback of the pipeline.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import NetworkError


T = TypeVar('T')


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def get(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: NetworkError

    @property
    def is_success(self) -> bool:
        return False

    def get(self):
        """
        Raise the carried error, so callers can `except` specific kinds.
        """
        raise self.error


Result = Union[Success[T], Failure]
