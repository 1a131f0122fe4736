"""Utility functions for Tucker3 decomposition."""

import numpy as np


class NotFoundError(Exception):
    """Exception raised when a required tensor is not found."""

    def __init__(self, value):
        self.value = value

    def __str__(self):
        return repr(self.value)


class UsageError(Exception):
    """Exception raised when an operation is called with non-conforming arguments."""

    def __init__(self, value):
        self.value = value

    def __str__(self):
        return repr(self.value)


# axis -> (matricization name, the two remaining axes in column order)
AXES = {
    0: ("lateral", (1, 2)),
    1: ("frontal", (0, 2)),
    2: ("horizontal", (0, 1)),
}


def check_axis(axis):
    """Validate a 0-based axis index of a 3-axis array."""
    if axis not in AXES:
        raise UsageError(f"Axis must be one of {sorted(AXES)}, got {axis}")
    return axis


def other_axes(axis):
    """Return the two axes that are not `axis`, in increasing order."""
    return AXES[check_axis(axis)][1]


def as_array(tensor):
    """Return the numpy array behind `tensor` (a Tensor3 or anything array-like)."""
    if hasattr(tensor, "array"):
        return tensor.array
    return np.asarray(tensor)


def matricized_shape(shape, axis):
    """Shape of the mode-`axis` matricization of an array with `shape`."""
    first, second = other_axes(axis)
    return (shape[axis], shape[first] * shape[second])


def mode_n_unfolding(tensor, mode):
    """Computes mode-n unfolding/matricization of a tensor in the sense of Kolda&Bader.

    Args:
        tensor (ndarray): Input tensor
        mode (int): Mode to unfold along (0-indexed)

    Returns:
        ndarray: Unfolded tensor
    """
    tensor = as_array(tensor)
    nDims = len(tensor.shape)
    dims = [dim for dim in range(nDims)]
    modeIdx = dims.pop(mode)
    dims = [modeIdx] + dims
    tensor = tensor.transpose(dims)
    return tensor.reshape(tensor.shape[0], -1, order="F")


def mode_n_folding(matrix, mode, shape):
    """Inverse of `mode_n_unfolding`: folds a matricization back into a tensor.

    Args:
        matrix (ndarray): Mode-n matricization
        mode (int): Mode the matrix was unfolded along (0-indexed)
        shape (tuple): Shape of the folded tensor

    Returns:
        ndarray: Folded tensor of the given shape
    """
    matrix = np.asarray(matrix)
    shape = tuple(shape)
    dims = list(range(len(shape)))
    dims.pop(mode)
    dims = [mode] + dims
    if matrix.shape != (shape[mode], int(np.prod([shape[d] for d in dims[1:]]))):
        raise UsageError(
            f"Matrix of shape {matrix.shape} is not a mode-{mode} matricization of {shape}"
        )
    tensor = matrix.reshape([shape[d] for d in dims], order="F")
    return tensor.transpose(np.argsort(dims).tolist())


def mode_n_product(tensor, matrix, mode):
    """Compute the n-mode product of a tensor and a matrix.

    Args:
        tensor (ndarray): Input tensor
        matrix (ndarray): Matrix to multiply with
        mode (int): Mode along which to multiply

    Returns:
        ndarray: Result of the n-mode product
    """
    tensor = as_array(tensor)
    matrix = np.asarray(matrix)
    if matrix.shape[1] != tensor.shape[mode]:
        raise UsageError(
            f"Cannot multiply mode {mode} of extent {tensor.shape[mode]} "
            f"with a matrix of shape {matrix.shape}"
        )
    dims = [idx for idx in range(len(tensor.shape) + len(matrix.shape) - 2)]
    tensor_ax, matrix_ax = mode, 1  # Mode axis of tensor, second axis of matrix
    dims.pop(tensor_ax)
    dims.append(tensor_ax)
    tensor = np.tensordot(tensor, matrix, axes=([tensor_ax], [matrix_ax]))
    tensor = tensor.transpose(np.argsort(dims).tolist())
    return tensor


def multilinear_product(tensor, matrices):
    """Apply one matrix per mode: tensor x_0 M0 x_1 M1 x_2 M2.

    Args:
        tensor (ndarray): Input tensor
        matrices (sequence): One matrix per mode of `tensor`

    Returns:
        ndarray: Fortran-ordered result
    """
    tensor = as_array(tensor)
    if len(matrices) != len(tensor.shape):
        raise UsageError(f"Expected {len(tensor.shape)} matrices, got {len(matrices)}")
    for mode, matrix in enumerate(matrices):
        tensor = mode_n_product(tensor, matrix, mode)
    return np.asfortranarray(tensor)
