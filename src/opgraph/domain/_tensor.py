"""
Tensor and shape interface definitions.

This module defines the domain-level interfaces for shape and tensor objects
using structural typing. Operators only depend on these protocols, so any
backend that exposes a contiguous row-major float buffer can satisfy them.

Notes
-----
The concrete NumPy-backed implementations live in
`opgraph.infrastructure.tensor`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ITensorShape(Protocol):
    """
    Shape interface: an ordered sequence of dimension sizes.
    """

    @property
    def dims(self) -> tuple[int, ...]:
        """Return the dimension sizes as a tuple."""
        ...

    @property
    def ndim(self) -> int:
        """Return the number of dimensions."""
        ...

    def dim_size(self, axis: int) -> int:
        """
        Return the size of dimension `axis`.

        Parameters
        ----------
        axis : int
            Dimension index. Negative values count from the end.

        Returns
        -------
        int
            Size of that dimension.
        """
        ...

    def numel(self) -> int:
        """Return the number of elements (product of all dimensions)."""
        ...


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a dense, row-major buffer of floating point values with
    an associated shape. Operators read inputs and write outputs through the
    flat `handle` view, which gives raw element access by linear index.
    """

    @property
    def shape(self) -> ITensorShape:
        """Return the tensor's shape."""
        ...

    @property
    def handle(self) -> Any:
        """
        Return a flat, writable view of the underlying storage.

        Returns
        -------
        Any
            Backend-native one-dimensional array (e.g. `np.ndarray`).
        """
        ...

    def numel(self) -> int:
        """Return the number of elements."""
        ...

    def to_numpy(self) -> Any:
        """Return a copy of the data shaped like `shape`."""
        ...

    def copy_from_numpy(self, arr: Any) -> None:
        """Copy array-like data into the tensor (shape must match)."""
        ...

    def fill(self, value: float) -> None:
        """Fill every element with `value`."""
        ...
