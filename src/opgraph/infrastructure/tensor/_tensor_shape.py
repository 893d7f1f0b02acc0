"""
Concrete tensor shape.

`TensorShape` is an immutable, hashable sequence of non-negative dimension
sizes. A shape with no dimensions (`TensorShape(())`) describes a scalar and
holds exactly one element.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Union

ShapeLike = Union["TensorShape", Iterable[int]]


class TensorShape:
    """
    Ordered sequence of dimension sizes.

    Parameters
    ----------
    dims : Iterable[int], optional
        Dimension sizes. Defaults to the empty (0-d) shape.

    Raises
    ------
    ValueError
        If any dimension is negative.
    TypeError
        If any dimension is not an integer.
    """

    __slots__ = ("_dims",)

    def __init__(self, dims: Iterable[int] = ()) -> None:
        out = []
        for d in dims:
            if isinstance(d, bool):
                raise TypeError(f"Dimension sizes must be integers, got {d!r}")
            if not isinstance(d, int):
                # NumPy integer scalars are accepted via __index__.
                try:
                    d = d.__index__()
                except AttributeError:
                    raise TypeError(
                        f"Dimension sizes must be integers, got {d!r}"
                    ) from None
            if d < 0:
                raise ValueError(f"Dimension sizes must be non-negative, got {d}")
            out.append(d)
        self._dims: tuple[int, ...] = tuple(out)

    @classmethod
    def of(cls, shape: ShapeLike) -> "TensorShape":
        """Return `shape` unchanged if already a TensorShape, else wrap it."""
        if isinstance(shape, TensorShape):
            return shape
        return cls(shape)

    @property
    def dims(self) -> tuple[int, ...]:
        return self._dims

    @property
    def ndim(self) -> int:
        return len(self._dims)

    def dim_size(self, axis: int) -> int:
        """
        Return the size of dimension `axis`.

        Raises
        ------
        IndexError
            If `axis` is out of range for this shape.
        """
        return self._dims[axis]

    def numel(self) -> int:
        n = 1
        for d in self._dims:
            n *= d
        return n

    def __iter__(self) -> Iterator[int]:
        return iter(self._dims)

    def __len__(self) -> int:
        return len(self._dims)

    def __getitem__(self, axis: int) -> int:
        return self._dims[axis]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TensorShape):
            return self._dims == other._dims
        if isinstance(other, tuple):
            return self._dims == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"TensorShape({self._dims})"
