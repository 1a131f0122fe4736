"""Tucker3.

Tucker3 is a package for the Tucker3 decomposition of 3-axis tensors.
"""

__version__ = "0.1.0"

# Import core classes
from tucker3.decomposition import (
    compute_pseudoinverse,
    compute_svd,
    derive_core,
    derive_core_orthogonal_bases,
    hosvd,
    hosvd_mode,
    hosvd_on_eigs,
    optimize_mode,
    reconstruct,
)
from tucker3.tensor3 import Tensor3, Tensor3ConstIterator, Tensor3Iterator
from tucker3.tucker import MAX_ITERATIONS, MIN_IMPROVEMENT, Tucker3Tensor
from tucker3.utils import (
    NotFoundError,
    UsageError,
    mode_n_folding,
    mode_n_product,
    mode_n_unfolding,
    multilinear_product,
)

__all__ = [
    "Tucker3Tensor",
    "Tensor3",
    "Tensor3Iterator",
    "Tensor3ConstIterator",
    "MIN_IMPROVEMENT",
    "MAX_ITERATIONS",
    "compute_svd",
    "compute_pseudoinverse",
    "hosvd",
    "hosvd_mode",
    "hosvd_on_eigs",
    "optimize_mode",
    "derive_core",
    "derive_core_orthogonal_bases",
    "reconstruct",
    "mode_n_unfolding",
    "mode_n_folding",
    "mode_n_product",
    "multilinear_product",
    "NotFoundError",
    "UsageError",
]
