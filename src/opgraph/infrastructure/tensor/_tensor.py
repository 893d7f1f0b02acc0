"""
NumPy-backed dense tensor.

The tensor owns a flat, contiguous NumPy buffer in row-major order together
with a `TensorShape`. Operators access elements through `handle`, a flat
writable view of that buffer; everything else (`to_numpy`, `copy_from_numpy`)
is host interop for callers and tests.

Notes
-----
- Storage defaults to float32. Other floating dtypes (e.g. float64 for
  gradient checking) can be requested at construction.
- Tensors are allocated zero-initialized.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ._tensor_shape import ShapeLike, TensorShape


class Tensor:
    """
    Dense row-major tensor with NumPy storage.

    Parameters
    ----------
    shape : TensorShape | Iterable[int]
        Tensor shape.
    dtype : np.dtype, optional
        Floating point storage dtype. Defaults to float32.
    """

    __slots__ = ("_shape", "_data")

    def __init__(self, shape: ShapeLike, *, dtype: Any = np.float32) -> None:
        self._shape = TensorShape.of(shape)
        self._data = np.zeros(self._shape.numel(), dtype=dtype)

    def __repr__(self) -> str:
        return f"Tensor(shape={self._shape.dims}, dtype={self._data.dtype})"

    @classmethod
    def from_numpy(cls, arr: Any, *, dtype: Any = None) -> "Tensor":
        """
        Create a tensor holding a copy of `arr`.

        Parameters
        ----------
        arr : Any
            Array-like object accepted by `np.asarray`, including scalars.
        dtype : np.dtype, optional
            Storage dtype. Defaults to the array's dtype when it is floating,
            float32 otherwise.

        Returns
        -------
        Tensor
            New tensor with the same shape as `arr`.
        """
        a = np.asarray(arr)
        if dtype is None:
            dtype = a.dtype if np.issubdtype(a.dtype, np.floating) else np.float32
        t = cls(a.shape, dtype=dtype)
        t.copy_from_numpy(a)
        return t

    @property
    def shape(self) -> TensorShape:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def handle(self) -> np.ndarray:
        """
        Flat view of the storage for raw element access.

        Writes through this view modify the tensor in place.
        """
        return self._data

    def numel(self) -> int:
        return self._shape.numel()

    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the data reshaped to `shape`.

        Returns
        -------
        np.ndarray
            Array of shape `shape.dims` and the tensor's dtype.
        """
        return self._data.reshape(self._shape.dims).copy()

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Copy array-like data into this tensor.

        Parameters
        ----------
        arr : Any
            Array-like object accepted by `np.asarray`.

        Raises
        ------
        ValueError
            If the array shape does not match this tensor's shape.
        """
        a = np.asarray(arr, dtype=self._data.dtype)
        if a.shape != self._shape.dims:
            raise ValueError(
                f"Shape mismatch: tensor has shape {self._shape.dims}, "
                f"array has shape {a.shape}"
            )
        self._data[...] = a.reshape(-1)

    def fill(self, value: float) -> None:
        self._data.fill(value)
