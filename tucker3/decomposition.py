"""Decomposition methods for Tucker3.

The SVD and the pseudo-inverse are used strictly as capabilities: every
function that needs one takes it as an argument (`svd=` / `pinv=`) and
defaults to the numpy-backed `compute_svd` / `compute_pseudoinverse`.

References:
    - De Lathauwer, De Moor, Vandewalle 2000a: https://doi.org/10.1137/S0895479896305696
    - De Lathauwer, De Moor, Vandewalle 2000b: https://doi.org/10.1137/S0895479898346995
    - Kolda & Bader 2009: https://doi.org/10.1137/07070111X
"""

from warnings import warn

import numpy as np

from tucker3.tensor3 import Tensor3
from tucker3.utils import (
    AXES,
    UsageError,
    as_array,
    check_axis,
    mode_n_product,
    mode_n_unfolding,
    multilinear_product,
    other_axes,
)


def compute_svd(a, rank):
    """Dominant left singular vectors of a matrix.

    Args:
        a (ndarray): Input matrix of shape (M, N)
        rank (int): Number of left singular vectors to return (at most M)

    Returns:
        tuple: (success, u, s) - success flag, the M x rank left singular
        vectors and the singular values. `u` and `s` are None on failure.
    """
    a = np.asarray(a, dtype=float)
    if not np.all(np.isfinite(a)):
        return False, None, None

    # Orthonormal completion is needed when asking for more vectors than min(M, N)
    full_matrices = rank > min(a.shape)
    try:
        u, s, _ = np.linalg.svd(a, full_matrices=full_matrices)
    except np.linalg.LinAlgError:
        # Fallback to QR decomposition if SVD fails
        try:
            q, r = np.linalg.qr(a, mode="complete" if full_matrices else "reduced")
            u, s, _ = np.linalg.svd(r, full_matrices=full_matrices)
            u = q @ u
        except np.linalg.LinAlgError:
            return False, None, None

    return True, u[:, :rank], s


def compute_pseudoinverse(a):
    """Moore-Penrose pseudo-inverse of an M x N matrix (returned as N x M)."""
    return np.linalg.pinv(np.asarray(a, dtype=float))


def hosvd_mode(tensor, axis, rank, svd=compute_svd):
    """Basis for one axis: the `rank` dominant left singular vectors of its matricization.

    If the SVD reports failure the basis degrades to the zero matrix of the
    right shape, so the other axes still get a valid basis.

    Args:
        tensor (Tensor3 or ndarray): Input tensor
        axis (int): Axis to compute the basis for
        rank (int): Number of basis vectors
        svd (callable): SVD capability, see `compute_svd`

    Returns:
        ndarray: Basis matrix of shape (tensor.shape[axis], rank)
    """
    tensor = as_array(tensor)
    check_axis(axis)
    extent = tensor.shape[axis]
    if rank > extent:
        raise UsageError(f"Rank {rank} exceeds extent {extent} of axis {axis}")

    success, u, _ = svd(mode_n_unfolding(tensor, axis), rank)
    if not success:
        warn(f"SVD of the {AXES[axis][0]} matricization failed, using a zero basis for axis {axis}")
        return np.zeros((extent, rank))
    return np.array(u, dtype=float)


def hosvd(tensor, ranks, svd=compute_svd):
    """Higher-Order Singular Value Decomposition bases, one axis after the other.

    Args:
        tensor (Tensor3 or ndarray): Input tensor
        ranks (sequence): Ranks (J1, J2, J3)
        svd (callable): SVD capability

    Returns:
        list: [U1, U2, U3]
    """
    return [hosvd_mode(tensor, axis, rank, svd=svd) for axis, rank in enumerate(ranks)]


def hosvd_on_eigs(tensor, ranks):
    """HOSVD bases through n-mode PCA.

    For every axis the covariance matrix of the matricization is formed and
    its eigenvectors, sorted by decreasing eigenvalue, are used as basis.
    """
    tensor = as_array(tensor)
    bases = []
    for axis, rank in enumerate(ranks):
        if rank > tensor.shape[axis]:
            raise UsageError(f"Rank {rank} exceeds extent {tensor.shape[axis]} of axis {axis}")
        unfolding = mode_n_unfolding(tensor, axis)
        covariance = unfolding @ unfolding.T
        eigenvalues, eigenvectors = np.linalg.eigh(covariance)
        order = np.argsort(eigenvalues)[::-1]
        bases.append(eigenvectors[:, order[:rank]])
    return bases


def optimize_mode(tensor, axis, bases, pinv=compute_pseudoinverse):
    """Project a tensor through the pseudo-inverses of the other two bases.

    For axis 0 this gives tensor x_1 pinv(U2) x_2 pinv(U3), of shape
    (I1, J2, J3); the other axes are handled symmetrically. `bases[axis]` is
    not used.

    Returns:
        ndarray: The projected tensor
    """
    projection = as_array(tensor)
    for other in other_axes(axis):
        projection = mode_n_product(projection, pinv(bases[other]), other)
    return np.asfortranarray(projection)


def _check_bases(shape, bases):
    if len(bases) != 3:
        raise UsageError(f"Expected three basis matrices, got {len(bases)}")
    for axis, basis in enumerate(bases):
        if np.ndim(basis) != 2 or np.shape(basis)[0] != shape[axis]:
            raise UsageError(
                f"Basis {axis} of shape {np.shape(basis)} does not match extent {shape[axis]}"
            )


def derive_core(tensor, bases, pinv=compute_pseudoinverse):
    """Core = tensor x_0 pinv(U1) x_1 pinv(U2) x_2 pinv(U3).

    Works for any full-column-rank bases.

    Returns:
        Tensor3: Core of shape (J1, J2, J3)
    """
    data = as_array(tensor)
    _check_bases(data.shape, bases)
    return Tensor3.from_array(multilinear_product(data, [pinv(basis) for basis in bases]))


def derive_core_orthogonal_bases(tensor, bases):
    """Core = tensor x_0 U1^T x_1 U2^T x_2 U3^T.

    Only valid if every basis has orthonormal columns.

    Returns:
        Tensor3: Core of shape (J1, J2, J3)
    """
    data = as_array(tensor)
    _check_bases(data.shape, bases)
    return Tensor3.from_array(multilinear_product(data, [np.transpose(basis) for basis in bases]))


def reconstruct(core, bases):
    """Expand a core with its bases: core x_0 U1 x_1 U2 x_2 U3.

    Returns:
        Tensor3: Tensor of shape (I1, I2, I3)
    """
    core = as_array(core)
    if len(bases) != 3:
        raise UsageError(f"Expected three basis matrices, got {len(bases)}")
    for axis, basis in enumerate(bases):
        if np.shape(basis)[1] != core.shape[axis]:
            raise UsageError(
                f"Basis {axis} of shape {np.shape(basis)} does not match rank {core.shape[axis]}"
            )
    return Tensor3.from_array(multilinear_product(core, bases))
