"""Tucker3 tensor decomposition.

A Tucker3 tensor approximates a 3-axis array of shape (I1, I2, I3) by a core
tensor of shape (J1, J2, J3) and three basis matrices U1 (I1 x J1),
U2 (I2 x J2) and U3 (I3 x J3):

    data ~ core x_1 U1 x_2 U2 x_3 U3

The bases are initialized with a higher-order SVD and refined with the
higher-order orthogonal iteration (HOOI), an alternating least-squares scheme
that maximizes the Frobenius norm of the approximation.

References:
    - Tucker 1966: https://doi.org/10.1007/BF02289464
    - De Lathauwer, De Moor, Vandewalle 2000a: https://doi.org/10.1137/S0895479896305696
    - De Lathauwer, De Moor, Vandewalle 2000b: https://doi.org/10.1137/S0895479898346995
    - Kolda & Bader 2009: https://doi.org/10.1137/07070111X
"""

from warnings import warn

import numpy as np

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
from tucker3.tensor3 import Tensor3
from tucker3.utils import NotFoundError, UsageError, check_axis

MIN_IMPROVEMENT = 0.1
MAX_ITERATIONS = 3


def _dims(values, what):
    values = tuple(int(value) for value in values)
    if len(values) != 3 or min(values) < 1:
        raise UsageError(f"{what} must be three positive integers, got {values}")
    return values


class Tucker3Tensor:
    """Tucker3 decomposition of a fixed-shape 3-axis array.

    The object owns its core and bases. Getters return copies and setters copy
    the given values in, so nothing is shared with the caller.

    Attributes:
        min_improvement: HOOI keeps iterating while the norm of the
            approximation improves by more than this
        max_iterations: Upper bound on the number of HOOI refinement steps
        svd_solver: SVD capability, see `compute_svd`
        pinv_solver: Pseudo-inverse capability, see `compute_pseudoinverse`
        iterations: Number of refinement steps done by the last `hoii`
        norm_history: Frobenius norms of the approximation measured by the
            last `hoii`, starting with the HOSVD-only approximation
    """

    def __init__(
        self,
        ranks,
        shape,
        core=None,
        u1=None,
        u2=None,
        u3=None,
        min_improvement=MIN_IMPROVEMENT,
        max_iterations=MAX_ITERATIONS,
        svd_solver=compute_svd,
        pinv_solver=compute_pseudoinverse,
    ):
        """Initialize a Tucker3Tensor.

        Components that are not given start out as zeros.

        Args:
            ranks (tuple): Core extents (J1, J2, J3)
            shape (tuple): Extents of the approximated array (I1, I2, I3)
            core (Tensor3 or ndarray, optional): Core of shape `ranks`
            u1, u2, u3 (ndarray, optional): Basis matrices of shape (Ik, Jk)
            min_improvement (float): HOOI improvement threshold
            max_iterations (int): HOOI iteration cap
            svd_solver (callable): SVD capability
            pinv_solver (callable): Pseudo-inverse capability
        """
        self._ranks = _dims(ranks, "Ranks")
        self._shape = _dims(shape, "Shape")
        self._core = Tensor3(self._ranks)
        self._bases = [np.zeros((extent, rank)) for extent, rank in zip(self._shape, self._ranks)]

        if core is not None:
            self.core = core
        for axis, basis in enumerate((u1, u2, u3)):
            if basis is not None:
                self.set_basis(axis, basis)

        self.min_improvement = min_improvement
        self.max_iterations = max_iterations
        self.svd_solver = svd_solver
        self.pinv_solver = pinv_solver
        self.iterations = 0
        self.norm_history = []

    @classmethod
    def from_components(cls, core, u1, u2, u3, **kwargs):
        """Create a Tucker3Tensor whose dimensions are taken from the components."""
        ranks = np.shape(core.array if isinstance(core, Tensor3) else core)
        shape = (np.shape(u1)[0], np.shape(u2)[0], np.shape(u3)[0])
        return cls(ranks, shape, core=core, u1=u1, u2=u2, u3=u3, **kwargs)

    @classmethod
    def decompose(cls, data, ranks, **kwargs):
        """Decompose `data` into a Tucker3Tensor with the given ranks."""
        data = data if isinstance(data, Tensor3) else Tensor3.from_array(data)
        tucker = cls(ranks, data.shape, **kwargs)
        tucker.decomposition(data)
        return tucker

    @property
    def ranks(self):
        return self._ranks

    @property
    def shape(self):
        return self._shape

    @property
    def core(self):
        return self._core.copy()

    @core.setter
    def core(self, core):
        values = core.array if isinstance(core, Tensor3) else np.asarray(core)
        if values.shape != self._ranks:
            raise UsageError(f"Core of shape {values.shape} does not match ranks {self._ranks}")
        self._core.array = values

    def get_basis(self, axis):
        return self._bases[check_axis(axis)].copy()

    def set_basis(self, axis, basis):
        check_axis(axis)
        basis = np.array(basis, dtype=float)
        expected = (self._shape[axis], self._ranks[axis])
        if basis.shape != expected:
            raise UsageError(f"Basis {axis} of shape {basis.shape} does not match {expected}")
        self._bases[axis] = basis

    @property
    def u1(self):
        return self.get_basis(0)

    @u1.setter
    def u1(self, basis):
        self.set_basis(0, basis)

    @property
    def u2(self):
        return self.get_basis(1)

    @u2.setter
    def u2(self, basis):
        self.set_basis(1, basis)

    @property
    def u3(self):
        return self.get_basis(2)

    @u3.setter
    def u3(self, basis):
        self.set_basis(2, basis)

    @property
    def bases(self):
        return [basis.copy() for basis in self._bases]

    def __repr__(self):
        return f"Tucker3Tensor(ranks={self._ranks}, shape={self._shape})"

    def _check_data(self, data):
        if data is None:
            raise NotFoundError("No tensor is given. Please check if you provided correct input(s)")
        if not isinstance(data, Tensor3):
            data = Tensor3.from_array(data)
        if data.shape != self._shape:
            raise UsageError(f"Data of shape {data.shape} does not match {self._shape}")
        for axis, (rank, extent) in enumerate(zip(self._ranks, self._shape)):
            if rank > extent:
                raise UsageError(f"Rank {rank} exceeds extent {extent} of axis {axis}")
        return data

    def reconstruction(self):
        """Expand core and bases into an approximation of shape (I1, I2, I3).

        Returns:
            Tensor3: The approximated data
        """
        return reconstruct(self._core, self._bases)

    def error(self, data, relative=False):
        """Frobenius norm of the difference between `data` and the reconstruction."""
        data = self._check_data(data)
        error = np.linalg.norm(self.reconstruction().array - data.array)
        if relative:
            data_norm = data.frobenius_norm()
            if data_norm == 0:
                return np.inf
            error /= data_norm
        return float(error)

    def decomposition(self, data):
        """Compute core and bases for `data` with HOSVD initialization and HOOI refinement."""
        return self.hoii(data)

    def hosvd(self, data):
        """Set the bases to the HOSVD bases of `data`. The core is left untouched."""
        data = self._check_data(data)
        self._bases = hosvd(data, self._ranks, svd=self.svd_solver)
        return self

    def hosvd_on_eigs(self, data):
        """Set the bases through n-mode PCA of `data`. The core is left untouched."""
        data = self._check_data(data)
        self._bases = hosvd_on_eigs(data, self._ranks)
        return self

    def derive_core(self, data):
        """Set the core using pseudo-inverses of the current bases."""
        data = self._check_data(data)
        self._core = derive_core(data, self._bases, pinv=self.pinv_solver)
        return self

    def derive_core_orthogonal_bases(self, data):
        """Set the core using transposes of the current bases. Requires orthonormal bases."""
        data = self._check_data(data)
        self._core = derive_core_orthogonal_bases(data, self._bases)
        return self

    def hoii(self, data):
        """Higher-order orthogonal iteration.

        The bases are initialized with the HOSVD and then refined one axis at a
        time: `data` is projected through the other two bases and the axis basis
        is replaced by the dominant left singular vectors of that projection.
        Later axes see the bases already updated in the same iteration.

        Iteration continues while the Frobenius norm of the approximation grows
        by more than `min_improvement` and fewer than `max_iterations` steps
        were done. The first improvement is measured as the norm of `data`
        minus the norm of the HOSVD approximation.

        Args:
            data (Tensor3 or ndarray): Array of shape `self.shape`

        Returns:
            Tucker3Tensor: self
        """
        data = self._check_data(data)

        self.hosvd(data)
        self._core = derive_core_orthogonal_bases(data, self._bases)

        f_norm = self.reconstruction().frobenius_norm()
        last_f_norm = f_norm
        improvement = data.frobenius_norm() - f_norm
        self.iterations = 0
        self.norm_history = [f_norm]

        while improvement > self.min_improvement and self.iterations < self.max_iterations:
            for axis in range(3):
                projection = optimize_mode(data, axis, self._bases, pinv=self.pinv_solver)
                self._bases[axis] = hosvd_mode(
                    projection, axis, self._ranks[axis], svd=self.svd_solver
                )

            self._core = derive_core_orthogonal_bases(data, self._bases)

            f_norm = self.reconstruction().frobenius_norm()
            improvement = f_norm - last_f_norm
            last_f_norm = f_norm
            self.norm_history.append(f_norm)
            self.iterations += 1

        if improvement > self.min_improvement:
            warn(
                f"HOOI stopped after {self.iterations} iterations while still improving by {improvement:.3e}"
            )

        self._core = derive_core_orthogonal_bases(data, self._bases)
        return self

    def reduce_ranks(self, other):
        """Truncate a higher-rank decomposition of the same shape to `self.ranks`.

        The first Jk columns of every basis and the leading J1 x J2 x J3 block of
        the core are copied; nothing is re-optimized.
        """
        if other.shape != self._shape:
            raise UsageError(f"Shape {other.shape} does not match {self._shape}")
        if any(rank > other_rank for rank, other_rank in zip(self._ranks, other.ranks)):
            raise UsageError(f"Cannot reduce ranks {other.ranks} to {self._ranks}")

        for axis, rank in enumerate(self._ranks):
            self._bases[axis] = other._bases[axis][:, :rank].copy()
        j1, j2, j3 = self._ranks
        self._core.array = other._core.array[:j1, :j2, :j3]
        return self

    def _check_same_ranks(self, other):
        if other.ranks != self._ranks:
            raise UsageError(f"Ranks {other.ranks} do not match {self._ranks}")

    def _check_factor(self, other, factor):
        if int(factor) != factor or factor < 1:
            raise UsageError(f"Subsampling factor must be a positive integer, got {factor}")
        factor = int(factor)
        for axis, (extent, other_extent) in enumerate(zip(self._shape, other.shape)):
            if len(range(0, other_extent, factor)) != extent:
                raise UsageError(
                    f"Subsampling extent {other_extent} by {factor} does not give {extent} "
                    f"rows on axis {axis}"
                )
        return factor

    def subsampling(self, other, factor):
        """Keep every `factor`-th row of the bases of a larger decomposition.

        The core of `other` is reused unchanged.
        """
        self._check_same_ranks(other)
        factor = self._check_factor(other, factor)
        for axis in range(3):
            self._bases[axis] = other._bases[axis][::factor].copy()
        self._core.array = other._core.array
        return self

    def subsampling_on_average(self, other, factor):
        """Like `subsampling`, but every row is the mean of a run of `factor` rows.

        The last run of an axis may be shorter than `factor`.
        """
        self._check_same_ranks(other)
        factor = self._check_factor(other, factor)
        for axis in range(3):
            basis = other._bases[axis]
            self._bases[axis] = np.array(
                [basis[start : start + factor].mean(axis=0) for start in range(0, len(basis), factor)]
            )
        self._core.array = other._core.array
        return self

    def region_of_interest(self, other, starts, ends):
        """Select the rows [start_k, end_k) of every basis of a larger decomposition.

        Args:
            other (Tucker3Tensor): Source with the same ranks
            starts (sequence): First row per axis
            ends (sequence): One past the last row per axis

        The core of `other` is reused unchanged.
        """
        self._check_same_ranks(other)
        starts, ends = tuple(starts), tuple(ends)
        if len(starts) != 3 or len(ends) != 3:
            raise UsageError("Expected a start and an end index for each of the three axes")
        for axis, (start, end) in enumerate(zip(starts, ends)):
            if not 0 <= start < end <= other.shape[axis]:
                raise UsageError(
                    f"Invalid range [{start}, {end}) for extent {other.shape[axis]} on axis {axis}"
                )
            if end - start != self._shape[axis]:
                raise UsageError(
                    f"Range [{start}, {end}) does not give {self._shape[axis]} rows on axis {axis}"
                )

        for axis, (start, end) in enumerate(zip(starts, ends)):
            self._bases[axis] = other._bases[axis][start:end].copy()
        self._core.array = other._core.array
        return self

    @property
    def export_size(self):
        """Number of scalars written by `export_to`: I1*J1 + I2*J2 + I3*J3 + J1*J2*J3."""
        return sum(basis.size for basis in self._bases) + self._core.size

    def export_to(self):
        """Serialize to a flat buffer: U1, U2, U3 (column-major), then the core.

        The core is written in iterator order. The buffer carries no header, the
        reader has to know ranks and shape.

        Returns:
            ndarray: 1-D array of `export_size` values
        """
        values = [basis.ravel(order="F") for basis in self._bases]
        values.append(np.fromiter(self._core, dtype=float, count=self._core.size))
        return np.concatenate(values)

    def import_from(self, data):
        """Read bases and core from a flat buffer written by `export_to`.

        Raises:
            IndexError: If `data` holds fewer than `export_size` values
        """
        data = np.asarray(data, dtype=float).ravel()
        if len(data) < self.export_size:
            raise IndexError(
                f"Buffer of {len(data)} values is too short, {self.export_size} are needed"
            )

        offset = 0
        for axis, basis in enumerate(self._bases):
            values = data[offset : offset + basis.size]
            self._bases[axis] = values.reshape(basis.shape, order="F").copy()
            offset += basis.size

        it, it_end = self._core.begin(), self._core.end()
        while it != it_end:
            it.set(data[offset])
            it.advance()
            offset += 1
        return self

    @property
    def compression_ratio(self):
        """Number of elements of the full array over the number of stored elements."""
        return float(np.prod(self._shape)) / self.export_size
