"""Tests for the utils.py module."""

import unittest

import numpy as np

from tucker3.utils import (
    NotFoundError,
    UsageError,
    check_axis,
    matricized_shape,
    mode_n_folding,
    mode_n_product,
    mode_n_unfolding,
    multilinear_product,
    other_axes,
)


class TestUtils(unittest.TestCase):
    """Test cases for utility functions."""

    def setUp(self):
        """Set up test fixture."""
        # Create a sample tensor for testing
        self.tensor_3d = np.array([
            [
                [1, 13],
                [4, 16],
                [7, 19],
                [10, 22]
            ],
            [
                [2, 14],
                [5, 17],
                [8, 20],
                [11, 23]
            ],
            [
                [3, 15],
                [6, 18],
                [9, 21],
                [12, 24]
            ]
        ])

        # Expected mode-n unfoldings for the test tensor (based on Kolda's definition)
        self.mode0_unfolding = np.array([
            [1, 4, 7, 10, 13, 16, 19, 22],
            [2, 5, 8, 11, 14, 17, 20, 23],
            [3, 6, 9, 12, 15, 18, 21, 24]
        ])

        self.mode1_unfolding = np.array([
            [1, 2, 3, 13, 14, 15],
            [4, 5, 6, 16, 17, 18],
            [7, 8, 9, 19, 20, 21],
            [10, 11, 12, 22, 23, 24]
        ])

        self.mode2_unfolding = np.array([
            [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12],
            [13, 14, 15, 16, 17, 18, 19, 20, 21, 22, 23, 24]
        ])

    def test_mode_n_unfolding(self):
        """Test mode-n unfolding function."""
        mode0 = mode_n_unfolding(self.tensor_3d, 0)
        self.assertTrue(np.array_equal(mode0, self.mode0_unfolding))

        mode1 = mode_n_unfolding(self.tensor_3d, 1)
        self.assertTrue(np.array_equal(mode1, self.mode1_unfolding))

        mode2 = mode_n_unfolding(self.tensor_3d, 2)
        self.assertTrue(np.array_equal(mode2, self.mode2_unfolding))

    def test_mode_n_folding(self):
        """Folding inverts unfolding for every mode."""
        for mode, unfolding in enumerate(
            [self.mode0_unfolding, self.mode1_unfolding, self.mode2_unfolding]
        ):
            folded = mode_n_folding(unfolding, mode, self.tensor_3d.shape)
            self.assertTrue(np.array_equal(folded, self.tensor_3d))

    def test_mode_n_folding_shape_mismatch(self):
        """Folding a matrix of the wrong shape is a usage error."""
        with self.assertRaises(UsageError):
            mode_n_folding(self.mode0_unfolding, 1, self.tensor_3d.shape)

    def test_mode_n_product(self):
        """Test mode-n product function."""
        np.random.seed(3)
        matrix = np.random.rand(5, self.tensor_3d.shape[1])

        result = mode_n_product(self.tensor_3d, matrix, 1)

        expected_shape = list(self.tensor_3d.shape)
        expected_shape[1] = matrix.shape[0]
        self.assertEqual(result.shape, tuple(expected_shape))

        # The product acts on the mode-1 unfolding as a left multiplication
        expected = matrix @ mode_n_unfolding(self.tensor_3d, 1)
        self.assertTrue(np.allclose(mode_n_unfolding(result, 1), expected))

    def test_mode_n_product_mismatch(self):
        """Multiplying with a non-conforming matrix is a usage error."""
        with self.assertRaises(UsageError):
            mode_n_product(self.tensor_3d, np.ones((2, 3)), 1)

    def test_multilinear_product(self):
        """Identity matrices leave the tensor unchanged."""
        identities = [np.eye(extent) for extent in self.tensor_3d.shape]
        result = multilinear_product(self.tensor_3d, identities)
        self.assertTrue(np.allclose(result, self.tensor_3d))
        self.assertTrue(result.flags["F_CONTIGUOUS"])

        with self.assertRaises(UsageError):
            multilinear_product(self.tensor_3d, identities[:2])

    def test_axis_table(self):
        """Test the per-axis helpers."""
        self.assertEqual(other_axes(0), (1, 2))
        self.assertEqual(other_axes(1), (0, 2))
        self.assertEqual(other_axes(2), (0, 1))
        self.assertEqual(matricized_shape((3, 4, 2), 0), (3, 8))
        self.assertEqual(matricized_shape((3, 4, 2), 1), (4, 6))
        self.assertEqual(matricized_shape((3, 4, 2), 2), (2, 12))
        with self.assertRaises(UsageError):
            check_axis(3)

    def test_errors(self):
        """Test the exception classes."""
        with self.assertRaises(NotFoundError):
            raise NotFoundError("Test error message")
        self.assertEqual(str(UsageError("bad shape")), "'bad shape'")


if __name__ == '__main__':
    unittest.main()
