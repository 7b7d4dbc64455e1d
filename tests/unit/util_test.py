from dataclasses import dataclass, field
from ddt import ddt, data, unpack
from enum import Enum
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from unittest import TestCase

from nethandler import util
from nethandler.util import DataclassJSONDecoder, DataclassJSONEncoder, DecodingError


class Color(Enum):
    RED = 'red'
    BLUE = 'blue'


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Shape:
    name: str
    points: List[Point]
    color: Optional[Color] = None
    tags: Dict[str, str] = field(default_factory=dict)
    note: Optional[str] = None


@ddt
class TestFromJson(TestCase):
    @data(
        (int, 3, 3),
        (float, 3, 3.0),
        (float, 2.5, 2.5),
        (str, 'a', 'a'),
        (bool, True, True),
        (Any, {'a': [1]}, {'a': [1]}),
        (Optional[int], None, None),
        (Optional[int], 4, 4),
        (Union[int, str], 'a', 'a'),
        (int | None, None, None),
        (List[int], [1, 2], [1, 2]),
        (list, [1, 'a'], [1, 'a']),
        (Sequence[str], ['a'], ['a']),
        (Tuple[int, ...], [1, 2], (1, 2)),
        (Tuple[int, str], [1, 'a'], (1, 'a')),
        (Dict[str, int], {'a': 1}, {'a': 1}),
        (Mapping[str, Any], {'a': None}, {'a': None}),
        (Color, 'red', Color.RED),
        (Point, {'x': 1, 'y': 2}, Point(1, 2)),
        # Unknown keys are ignored.
        (Point, {'x': 1, 'y': 2, 'z': 3}, Point(1, 2)),
        (List[Point], [{'x': 1, 'y': 2}], [Point(1, 2)]),
        # Nested dataclasses, enums, defaults and missing optional keys.
        (Shape,
         {'name': 'line', 'points': [{'x': 0, 'y': 0}, {'x': 1, 'y': 1}], 'color': 'blue'},
         Shape('line', [Point(0, 0), Point(1, 1)], Color.BLUE)),
    )
    @unpack
    def test_converts_matching_values(self, target, value, expected):
        self.assertEqual(expected, util.from_json(target, value))

    @data(
        (int, 'a', '$'),
        (int, True, '$'),
        (int, 1.5, '$'),
        (float, False, '$'),
        (str, 1, '$'),
        (bool, 0, '$'),
        (Point, None, '$'),
        (Point, [1, 2], '$'),
        (Point, {'x': 1}, '$.y'),
        (Point, {'x': 1, 'y': 'a'}, '$.y'),
        (List[int], {'a': 1}, '$'),
        (List[int], [1, 'a'], '$[1]'),
        (Tuple[int, str], [1], '$'),
        (Dict[str, int], [], '$'),
        (Color, 'green', '$'),
        (Optional[int], 'a', '$'),
        (type(None), 1, '$'),
        (Shape, {'name': 'line', 'points': [{'x': 0}]}, '$.points[0].y'),
    )
    @unpack
    def test_rejects_mismatching_values(self, target, value, expected_path):
        with self.assertRaises(DecodingError) as context:
            util.from_json(target, value)
        self.assertEqual(expected_path, context.exception.path)

    def test_unsupported_targets_are_rejected(self):
        with self.assertRaises(DecodingError):
            util.from_json(bytes, 'abc')


class TestDataclassJSON(TestCase):
    def test_decoder_builds_the_class_type(self):
        result = json.loads(b'{"x": 3, "y": 4}', cls=DataclassJSONDecoder, class_type=Point)
        self.assertEqual(Point(3, 4), result)

    def test_decoder_reports_syntax_errors_as_value_errors(self):
        with self.assertRaises(ValueError):
            json.loads(b'{"x": 3', cls=DataclassJSONDecoder, class_type=Point)

    def test_encoder_handles_dataclasses_and_enums(self):
        encoded = json.dumps(Shape('dot', [Point(1, 1)], Color.RED), cls=DataclassJSONEncoder)
        self.assertEqual(
            {'name': 'dot', 'points': [{'x': 1, 'y': 1}], 'color': 'red', 'tags': {}, 'note': None},
            json.loads(encoded))


@ddt
class TestEmptyCollection(TestCase):
    @data(
        (list, []),
        (List[int], []),
        (Sequence[Point], []),
        (Tuple[int, ...], ()),
        (dict, {}),
        (Dict[str, int], {}),
        (Point, None),
        (int, None),
        (Optional[List[int]], None),
    )
    @unpack
    def test_empty_collection(self, target, expected):
        self.assertEqual(expected, util.empty_collection(target))


@ddt
class TestIsValidUrl(TestCase):
    @data(
        ('https://example.com/a?b=c', True),
        ('http://localhost:8080', True),
        ('', False),
        (None, False),
        ('not a url', False),
        ('example.com/path', False),
        ('http://', False),
    )
    @unpack
    def test_is_valid_url(self, url, expected):
        self.assertEqual(expected, util.is_valid_url(url))
