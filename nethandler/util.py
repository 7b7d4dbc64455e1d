from collections import abc
import dataclasses
from enum import Enum
import json
import types
import typing
from typing import Any, Optional, Type, Union

import requests


NULL_LITERAL = b'null'


class DecodingError(ValueError):
    """
    Raised when a JSON value does not fit the type it is decoded into.
    """

    def __init__(self, message: str, path: str) -> None:
        super().__init__('{} (at {})'.format(message, path))
        self.path = path


class DataclassJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


class DataclassJSONDecoder(json.JSONDecoder):
    """
    Decodes a JSON document straight into `class_type`.

    Meant to be used through `json.loads(s, cls=DataclassJSONDecoder,
    class_type=...)`. See `from_json()` for the supported types.
    """

    def __init__(self, class_type: Type, **kwargs) -> None:
        super().__init__(**kwargs)
        self.__class_type = class_type

    def decode(self, s):
        result = super().decode(s)
        return from_json(self.__class_type, result)


_UNION_TYPES = (Union, types.UnionType)
_SEQUENCE_ORIGINS = (list, abc.Sequence, abc.MutableSequence, abc.Collection, abc.Iterable)
_MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def from_json(target: Any, value: Any, path: str = '$') -> Any:
    """
    Convert a decoded JSON value into an instance of `target`.

    Supports dataclasses (recursively, ignoring unknown keys), lists and other
    sequences, tuples, dicts and mappings with string keys, `Optional` and
    `Union`, enums, `Any`, and the JSON primitives.

    @raise DecodingError
      If `value` does not have the shape of `target`.
    """
    if target is Any:
        return value

    origin = typing.get_origin(target)
    args = typing.get_args(target)

    if origin in _UNION_TYPES:
        if value is None and type(None) in args:
            return None
        for candidate in args:
            if candidate is type(None):
                continue
            try:
                return from_json(candidate, value, path)
            except DecodingError:
                continue
        raise DecodingError('Value does not match any of {}'.format(target), path)

    if dataclasses.is_dataclass(target):
        return _dataclass_from_json(target, value, path)

    if target in _SEQUENCE_ORIGINS or origin in _SEQUENCE_ORIGINS:
        if not isinstance(value, list):
            raise DecodingError('Expected an array', path)
        item_type = args[0] if args else Any
        return [from_json(item_type, item, '{}[{}]'.format(path, index))
                for index, item in enumerate(value)]

    if target is tuple or origin is tuple:
        if not isinstance(value, list):
            raise DecodingError('Expected an array', path)
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            item_type = args[0] if args else Any
            return tuple(from_json(item_type, item, '{}[{}]'.format(path, index))
                         for index, item in enumerate(value))
        if len(args) != len(value):
            raise DecodingError('Expected an array of {} items'.format(len(args)), path)
        return tuple(from_json(item_type, item, '{}[{}]'.format(path, index))
                     for index, (item_type, item) in enumerate(zip(args, value)))

    if target in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
        if not isinstance(value, dict):
            raise DecodingError('Expected an object', path)
        value_type = args[1] if len(args) == 2 else Any
        return {key: from_json(value_type, item, '{}.{}'.format(path, key))
                for key, item in value.items()}

    if isinstance(target, type) and issubclass(target, Enum):
        try:
            return target(value)
        except ValueError:
            raise DecodingError('{!r} is not a valid {}'.format(value, target.__name__), path)

    if target is type(None) or target is None:
        if value is not None:
            raise DecodingError('Expected null', path)
        return None

    if target is bool:
        if not isinstance(value, bool):
            raise DecodingError('Expected a boolean', path)
        return value

    if target is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodingError('Expected an integer', path)
        return value

    if target is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodingError('Expected a number', path)
        return float(value)

    if target is str:
        if not isinstance(value, str):
            raise DecodingError('Expected a string', path)
        return value

    raise DecodingError('Cannot decode into {}'.format(target), path)


def _dataclass_from_json(target: Type, value: Any, path: str) -> Any:
    if not isinstance(value, dict):
        raise DecodingError('Expected an object for {}'.format(target.__name__), path)

    hints = typing.get_type_hints(target)
    kwargs = {}
    for f in dataclasses.fields(target):
        if not f.init:
            continue
        field_path = '{}.{}'.format(path, f.name)
        hint = hints.get(f.name, Any)
        if f.name in value:
            kwargs[f.name] = from_json(hint, value[f.name], field_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            if not _is_optional(hint):
                raise DecodingError('Missing key "{}"'.format(f.name), field_path)
            kwargs[f.name] = None
    return target(**kwargs)


def _is_optional(hint: Any) -> bool:
    return typing.get_origin(hint) in _UNION_TYPES and type(None) in typing.get_args(hint)


def empty_collection(target: Any) -> Optional[Any]:
    """
    Return an empty instance of `target` if it is a collection type, else `None`.
    """
    origin = typing.get_origin(target) or target
    if origin in _SEQUENCE_ORIGINS:
        return []
    if origin is tuple:
        return ()
    if origin in _MAPPING_ORIGINS:
        return {}
    return None


def is_valid_url(url: Optional[str]) -> bool:
    """
    Check whether `url` is something `requests` is able to send to.
    """
    if not url:
        return False
    try:
        requests.models.PreparedRequest().prepare_url(url, None)
    except requests.exceptions.RequestException:
        return False
    return True
