from ddt import ddt, data, unpack
from unittest import TestCase

from nethandler import errors
from nethandler.model import GQLError, GQLLocation
from nethandler.result import Failure, Success


@ddt
class TestNetworkErrorEquality(TestCase):
    @data(
        (errors.OtherError(ValueError('boom')), errors.OtherError(ValueError('boom'))),
        # Wrapped errors compare by their text, not their type.
        (errors.OtherError(ValueError('boom')), errors.OtherError(RuntimeError('boom'))),
        (errors.BadData(b'abc'), errors.BadData(b'abc')),
        (errors.BadData(), errors.BadData(None)),
        (errors.DataCodingError(ValueError('bad'), b'{'), errors.DataCodingError(ValueError('bad'), b'{')),
        (errors.ImageDecodeError(), errors.ImageDecodeError()),
        (errors.UrlInvalid('nope'), errors.UrlInvalid('nope')),
        (errors.NoStatusCodeResponse(), errors.NoStatusCodeResponse()),
        (errors.HttpNonAcceptableStatusCode(404, b'missing'), errors.HttpNonAcceptableStatusCode(404, b'missing')),
        (errors.DatabaseFailure(IOError('disk')), errors.DatabaseFailure(IOError('disk'))),
        (errors.DataWasNull(), errors.DataWasNull()),
        (errors.UnspecifiedError('why'), errors.UnspecifiedError('why')),
        (errors.GraphQLError(GQLError('oops', [GQLLocation(1, 2)])),
         errors.GraphQLError(GQLError('oops', [GQLLocation(1, 2)]))),
    )
    @unpack
    def test_equal(self, left, right):
        self.assertEqual(left, right)
        self.assertEqual(hash(left), hash(right))

    @data(
        (errors.OtherError(ValueError('boom')), errors.OtherError(ValueError('bang'))),
        (errors.BadData(b'abc'), errors.BadData(None)),
        (errors.DataCodingError(ValueError('bad'), b'{'), errors.DataCodingError(ValueError('bad'), b'[')),
        (errors.UrlInvalid('nope'), errors.UrlInvalid(None)),
        (errors.HttpNonAcceptableStatusCode(404), errors.HttpNonAcceptableStatusCode(500)),
        (errors.HttpNonAcceptableStatusCode(404, b'a'), errors.HttpNonAcceptableStatusCode(404, b'b')),
        (errors.UnspecifiedError('why'), errors.UnspecifiedError()),
        (errors.GraphQLError(GQLError('oops')), errors.GraphQLError(GQLError('other'))),
        # Different kinds never compare equal.
        (errors.DataWasNull(), errors.NoStatusCodeResponse()),
        (errors.OtherError(ValueError('x')), errors.DatabaseFailure(ValueError('x'))),
        (errors.BadData(None), errors.DataWasNull()),
    )
    @unpack
    def test_not_equal(self, left, right):
        self.assertNotEqual(left, right)

    def test_foreign_objects_are_not_equal(self):
        self.assertNotEqual(errors.DataWasNull(), ValueError())
        self.assertNotEqual(errors.DataWasNull(), None)

    def test_errors_carry_their_payload(self):
        error = errors.HttpNonAcceptableStatusCode(418, b'teapot')
        self.assertEqual(418, error.code)
        self.assertEqual(b'teapot', error.data)
        self.assertIn('418', str(error))


class TestResult(TestCase):
    def test_success_returns_its_value(self):
        result = Success(b'data')
        self.assertTrue(result.is_success)
        self.assertEqual(b'data', result.get())

    def test_failure_raises_its_error(self):
        result = Failure(errors.DataWasNull())
        self.assertFalse(result.is_success)
        with self.assertRaises(errors.DataWasNull):
            result.get()

    def test_failures_compare_by_error(self):
        self.assertEqual(Failure(errors.BadData(None)), Failure(errors.BadData(None)))
        self.assertNotEqual(Failure(errors.BadData(None)), Failure(errors.DataWasNull()))
        self.assertNotEqual(Success(None), Failure(errors.BadData(None)))
