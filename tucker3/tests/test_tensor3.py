"""Tests for the tensor3.py module."""

import unittest

import numpy as np

from tucker3.tensor3 import Tensor3, Tensor3ConstIterator, Tensor3Iterator
from tucker3.utils import UsageError


class TestTensor3(unittest.TestCase):
    """Test cases for the Tensor3 class."""

    def setUp(self):
        """Set up test fixture."""
        np.random.seed(42)
        self.shape = (3, 4, 2)
        self.values = np.random.rand(*self.shape)
        self.tensor = Tensor3.from_array(self.values)

    def test_init(self):
        """Test initialization of Tensor3."""
        tensor = Tensor3((2, 3, 4))
        self.assertEqual(tensor.shape, (2, 3, 4))
        self.assertEqual(tensor.size, 24)
        self.assertEqual(tensor.slices, 4)
        self.assertEqual(tensor.frobenius_norm(), 0.0)
        self.assertTrue(tensor.array.flags["F_CONTIGUOUS"])

    def test_invalid_shape(self):
        """Extents must be three positive integers."""
        with self.assertRaises(UsageError):
            Tensor3((2, 3))
        with self.assertRaises(UsageError):
            Tensor3((2, 0, 3))

    def test_fixed_shape(self):
        """Assigning values of another shape is refused."""
        with self.assertRaises(UsageError):
            self.tensor.array = np.zeros((3, 4, 3))
        self.tensor.array = np.ones(self.shape)
        self.assertEqual(self.tensor.shape, self.shape)
        self.assertTrue(np.all(self.tensor.array == 1))

    def test_copy_is_independent(self):
        """A copy does not share storage with the original."""
        duplicate = self.tensor.copy()
        duplicate[0, 0, 0] = -1.0
        self.assertEqual(self.tensor.at(0, 0, 0), self.values[0, 0, 0])
        self.assertFalse(np.shares_memory(duplicate.array, self.tensor.array))

    def test_frontal_slice(self):
        """Frontal slices are writable I1 x I2 views."""
        frontal = self.tensor.get_frontal_slice(1)
        self.assertEqual(frontal.shape, (3, 4))
        self.assertTrue(np.array_equal(frontal, self.values[:, :, 1]))
        frontal[2, 3] = 7.0
        self.assertEqual(self.tensor.at(2, 3, 1), 7.0)
        self.assertEqual(len(self.tensor.frontal_slices()), 2)
        with self.assertRaises(IndexError):
            self.tensor.get_frontal_slice(2)

    def test_frobenius_norm(self):
        """Test the Frobenius norm."""
        self.assertAlmostEqual(self.tensor.frobenius_norm(), np.sqrt(np.sum(self.values**2)))

    def test_zero(self):
        """Test zero-filling."""
        self.tensor.zero()
        self.assertTrue(np.all(self.tensor.array == 0))

    def test_matricization_shapes(self):
        """Test the shapes of the three matricizations."""
        self.assertEqual(self.tensor.lateral_matricization().shape, (3, 8))
        self.assertEqual(self.tensor.frontal_matricization().shape, (4, 6))
        self.assertEqual(self.tensor.horizontal_matricization().shape, (2, 12))

    def test_matricization_layout(self):
        """Check the column order of every matricization element by element."""
        i1_max, i2_max, i3_max = self.shape
        lateral = self.tensor.lateral_matricization()
        frontal = self.tensor.frontal_matricization()
        horizontal = self.tensor.horizontal_matricization()
        for i1 in range(i1_max):
            for i2 in range(i2_max):
                for i3 in range(i3_max):
                    value = self.values[i1, i2, i3]
                    self.assertEqual(lateral[i1, i2 + i3 * i2_max], value)
                    self.assertEqual(frontal[i2, i1 + i3 * i1_max], value)
                    self.assertEqual(horizontal[i3, i1 + i2 * i1_max], value)

    def test_matricization_round_trip(self):
        """Folding any matricization reproduces the tensor exactly."""
        for axis in range(3):
            matrix = self.tensor.matricization(axis)
            folded = Tensor3.from_matricization(matrix, axis, self.shape)
            self.assertTrue(np.array_equal(folded.array, self.values))

    def test_matricization_is_permutation(self):
        """Every matricization holds the same multiset of values."""
        reference = np.sort(self.values.ravel())
        for axis in range(3):
            values = np.sort(self.tensor.matricization(axis).ravel())
            self.assertTrue(np.array_equal(values, reference))

    def test_matricization_out(self):
        """Matricizing into a preallocated matrix."""
        out = np.zeros((4, 6))
        result = self.tensor.frontal_matricization(out=out)
        self.assertIs(result, out)
        self.assertTrue(np.array_equal(out, self.tensor.frontal_matricization()))
        with self.assertRaises(UsageError):
            self.tensor.lateral_matricization(out=np.zeros((3, 7)))
        with self.assertRaises(UsageError):
            self.tensor.matricization(3)

    def test_nmode_product(self):
        """Test the n-mode product on a Tensor3."""
        matrix = np.random.rand(5, 4)
        result = self.tensor.nmode_product(matrix, 1)
        self.assertIsInstance(result, Tensor3)
        self.assertEqual(result.shape, (3, 5, 2))
        expected = matrix @ self.tensor.frontal_matricization()
        self.assertTrue(np.allclose(result.frontal_matricization(), expected))


class TestTensor3Iterator(unittest.TestCase):
    """Test cases for the element iterators."""

    def setUp(self):
        """Set up test fixture."""
        self.shape = (2, 3, 4)
        self.values = np.arange(24, dtype=float).reshape(self.shape, order="F")
        self.tensor = Tensor3.from_array(self.values)

    def test_completeness_and_order(self):
        """Iteration visits every element once, slice by slice, column-major within a slice."""
        visited = []
        it, it_end = self.tensor.begin(), self.tensor.end()
        while it != it_end:
            visited.append(it.get())
            it.advance()
        self.assertEqual(len(visited), 24)
        self.assertEqual(visited, list(range(24)))

        expected = []
        for i3 in range(self.shape[2]):
            expected.extend(self.values[:, :, i3].ravel(order="F"))
        self.assertEqual(list(self.tensor), expected)

    def test_begin_and_end(self):
        """Begin sits on slice 0, end on the last slice past its last element."""
        it, it_end = self.tensor.begin(), self.tensor.end()
        self.assertEqual(it.slice_index, 0)
        self.assertEqual(it.position, 0)
        self.assertEqual(it_end.slice_index, 3)
        self.assertEqual(it_end.position, 24)
        self.assertNotEqual(it, it_end)

    def test_equality_ignores_slice_index(self):
        """An exhausted iterator equals a fresh end iterator."""
        it = self.tensor.begin()
        for _ in range(24):
            it.advance()
        self.assertEqual(it, self.tensor.end())
        # Advancing past the end stays at the end
        it.advance()
        self.assertEqual(it, self.tensor.end())

    def test_equality_requires_same_tensor(self):
        """Iterators over different tensors are never equal."""
        other = self.tensor.copy()
        self.assertNotEqual(self.tensor.begin(), other.begin())
        self.assertEqual(self.tensor.begin(), self.tensor.begin())

    def test_mutable_iterator(self):
        """Writing through an iterator changes the tensor."""
        it, it_end = self.tensor.begin(), self.tensor.end()
        while it != it_end:
            it.set(it.get() * 2)
            it.advance()
        self.assertTrue(np.array_equal(self.tensor.array, 2 * self.values))

    def test_const_iterator(self):
        """A const iterator reads but does not write."""
        it = self.tensor.cbegin()
        self.assertIsInstance(it, Tensor3ConstIterator)
        self.assertEqual(it.get(), 0.0)
        with self.assertRaises(UsageError):
            it.set(1.0)

    def test_null_iterator(self):
        """Advancing an iterator without a tensor is a usage error."""
        it = Tensor3Iterator()
        with self.assertRaises(UsageError):
            it.advance()

    def test_single_slice(self):
        """A tensor with one slice and one element."""
        tensor = Tensor3((1, 1, 1), data=np.full((1, 1, 1), 5.0))
        self.assertEqual(list(tensor), [5.0])


if __name__ == '__main__':
    unittest.main()
