"""Fixed-shape dense 3-axis arrays.

A `Tensor3` of shape (I1, I2, I3) is stored as an ordered sequence of I3
frontal slices, each a column-major I1 x I2 matrix. The backing numpy array is
kept Fortran-contiguous so that this layout is exactly the memory layout, which
is what the element iterator walks.

Matricizations follow Kolda & Bader (2009):
    - lateral (axis 0):    I1 x I2*I3, column = i2 + i3*I2
    - frontal (axis 1):    I2 x I1*I3, column = i1 + i3*I1
    - horizontal (axis 2): I3 x I1*I2, column = i1 + i2*I1
"""

import numpy as np

from tucker3.utils import (
    UsageError,
    check_axis,
    matricized_shape,
    mode_n_folding,
    mode_n_product,
    mode_n_unfolding,
)


class Tensor3:
    """Dense 3-axis array whose extents are fixed at construction.

    Attributes:
        _data: Fortran-ordered backing array of shape (I1, I2, I3)
        _flat: Flat view on `_data` in storage order
    """

    def __init__(self, shape, data=None, dtype=float):
        """Initialize a Tensor3.

        Args:
            shape (tuple): Extents (I1, I2, I3), each at least 1
            data (array-like, optional): Initial values, zeros if not given
            dtype: Element type
        """
        shape = tuple(int(extent) for extent in shape)
        if len(shape) != 3 or min(shape) < 1:
            raise UsageError(f"Tensor3 needs three positive extents, got {shape}")
        self._data = np.zeros(shape, dtype=dtype, order="F")
        self._flat = self._data.reshape(-1, order="F")
        if data is not None:
            self.array = data

    @classmethod
    def from_array(cls, array, dtype=float):
        """Create a Tensor3 with the shape and a copy of the values of `array`."""
        array = np.asarray(array)
        return cls(array.shape, data=array, dtype=dtype)

    @classmethod
    def from_matricization(cls, matrix, axis, shape, dtype=float):
        """Fold a mode-`axis` matricization back into a Tensor3 of `shape`."""
        return cls(shape, data=mode_n_folding(matrix, check_axis(axis), shape), dtype=dtype)

    @property
    def shape(self):
        """Get the extents (I1, I2, I3)."""
        return self._data.shape

    @property
    def size(self):
        return self._data.size

    @property
    def slices(self):
        """Number of frontal slices (I3)."""
        return self._data.shape[2]

    @property
    def array(self):
        """Fortran-ordered view of the values. Writes go to the tensor."""
        return self._data

    @array.setter
    def array(self, values):
        values = np.asarray(values)
        if values.shape != self.shape:
            raise UsageError(f"Cannot assign an array of shape {values.shape} to {self.shape}")
        self._data[...] = values

    @property
    def flat(self):
        """Flat view of the values in storage (slice-major, column-major) order."""
        return self._flat

    def to_numpy(self):
        return self._data.copy(order="F")

    def copy(self):
        return Tensor3(self.shape, data=self._data, dtype=self._data.dtype)

    def at(self, i1, i2, i3):
        return self._data[i1, i2, i3]

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value):
        self._data[index] = value

    def __repr__(self):
        return f"Tensor3(shape={self.shape})"

    def zero(self):
        self._data[...] = 0

    def frobenius_norm(self):
        """Root of the sum of squares of all elements."""
        return float(np.linalg.norm(self._flat))

    def get_frontal_slice(self, index):
        """Return frontal slice `index` as an I1 x I2 view."""
        if not 0 <= index < self.slices:
            raise IndexError(f"Frontal slice {index} out of range for {self.slices} slices")
        return self._data[:, :, index]

    def frontal_slices(self):
        return [self._data[:, :, k] for k in range(self.slices)]

    def matricization(self, axis, out=None):
        """Unfold the tensor along `axis` (0, 1 or 2).

        Args:
            axis (int): Axis whose index becomes the row index
            out (ndarray, optional): Matrix of the matricized shape to write into

        Returns:
            ndarray: The matricization (``out`` if it was given)
        """
        matrix = mode_n_unfolding(self._data, check_axis(axis))
        if out is None:
            return np.array(matrix, order="F")
        if out.shape != matricized_shape(self.shape, axis):
            raise UsageError(
                f"Output of shape {out.shape} does not match the mode-{axis} "
                f"matricization {matricized_shape(self.shape, axis)}"
            )
        out[...] = matrix
        return out

    def lateral_matricization(self, out=None):
        return self.matricization(0, out=out)

    def frontal_matricization(self, out=None):
        return self.matricization(1, out=out)

    def horizontal_matricization(self, out=None):
        return self.matricization(2, out=out)

    def nmode_product(self, matrix, axis):
        """Return the tensor x_axis `matrix` as a new Tensor3."""
        result = mode_n_product(self._data, matrix, check_axis(axis))
        return Tensor3.from_array(result, dtype=self._data.dtype)

    def begin(self):
        return Tensor3Iterator(self, begin=True)

    def end(self):
        return Tensor3Iterator(self, begin=False)

    def cbegin(self):
        return Tensor3ConstIterator(self, begin=True)

    def cend(self):
        return Tensor3ConstIterator(self, begin=False)

    def __iter__(self):
        it, it_end = self.cbegin(), self.cend()
        while it != it_end:
            yield it.get()
            it.advance()


class Tensor3Iterator:
    """Forward iterator over the elements of a Tensor3.

    The iterator walks frontal slices in order and, within a slice, the
    elements in column-major order. Its position is the offset into the
    tensor's storage, so two iterators are equal when they refer to the same
    tensor and the same offset; the slice index does not take part. An end
    iterator sits on the last slice with its position at that slice's end.
    """

    def __init__(self, tensor=None, begin=True):
        self._tensor = tensor
        self._slice_index = 0
        self._position = 0
        self._position_end = 0

        if tensor is None:
            return

        if begin:
            self._slice_index = 0
            self._position, self._position_end = self._slice_bounds(0)
        else:
            self._slice_index = tensor.slices - 1
            start, stop = self._slice_bounds(self._slice_index)
            self._position, self._position_end = stop, start

    def _slice_bounds(self, index):
        slice_size = self._tensor.shape[0] * self._tensor.shape[1]
        return index * slice_size, (index + 1) * slice_size

    @property
    def slice_index(self):
        return self._slice_index

    @property
    def position(self):
        return self._position

    def get(self):
        """Dereference: value of the current element."""
        return self._tensor.flat[self._position]

    def set(self, value):
        """Assign the current element."""
        self._tensor.flat[self._position] = value

    def advance(self):
        """Step to the next element, moving on to the next slice at a slice end."""
        if self._tensor is None:
            raise UsageError("Attempt to advance an iterator that is not bound to a tensor")

        if self._position != self._position_end:
            self._position += 1
        if self._position == self._position_end and self._slice_index + 1 < self._tensor.slices:
            self._slice_index += 1
            self._position, self._position_end = self._slice_bounds(self._slice_index)
        return self

    def __eq__(self, other):
        if not isinstance(other, Tensor3Iterator):
            return NotImplemented
        return other._tensor is self._tensor and other._position == self._position

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return (
            f"{type(self).__name__}(slice={self._slice_index}, position={self._position})"
        )


class Tensor3ConstIterator(Tensor3Iterator):
    """Read-only variant of `Tensor3Iterator`."""

    def set(self, value):
        raise UsageError("Cannot assign through a const iterator")
