"""
Shared numeric helpers for operator kernels.

All kernels follow the same conventions:

- inputs are read and outputs written through `Tensor.handle`, the flat
  row-major view of the storage, so linear index `i` addresses the same
  element in every same-shaped buffer;
- outputs are pre-sized by the caller and written in place with slice
  assignment (`out[...] = ...`), which also casts to the output dtype;
- kernels are vectorized NumPy expressions evaluated in a single thread.
  Where a reduction is involved, the summation order is NumPy's (pairwise
  summation along the reduced axis).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._tensor import ITensor, ITensorShape


def check_same_numel(op: str, tensors: Sequence[ITensor]) -> int:
    """
    Ensure all `tensors` hold the same number of elements and return it.

    Raises
    ------
    ShapeMismatchError
        If the element counts differ.
    """
    counts = [t.numel() for t in tensors]
    if any(c != counts[0] for c in counts):
        raise ShapeMismatchError(op, f"element counts differ: {counts}")
    return counts[0]


def check_same_shapes(op: str, shapes: Sequence[ITensorShape]) -> None:
    first = shapes[0]
    for s in shapes[1:]:
        if s != first:
            raise ShapeMismatchError(
                op, f"operands must share one shape, got {first.dims} and {s.dims}"
            )


def check_numel(op: str, tensor: ITensor, expected: int) -> None:
    if tensor.numel() != expected:
        raise ShapeMismatchError(
            op, f"output buffer holds {tensor.numel()} elements, expected {expected}"
        )


def check_ndim(op: str, shape: ITensorShape, ndim: int) -> None:
    if shape.ndim != ndim:
        raise ShapeMismatchError(
            op, f"expected a {ndim}-D operand, got shape {shape.dims}"
        )


def as_matrix(t: ITensor) -> np.ndarray:
    """Return the storage of a 2-D tensor as an `(rows, cols)` view."""
    return t.handle.reshape(t.shape.dim_size(0), t.shape.dim_size(1))


def row_softmax(y: np.ndarray) -> np.ndarray:
    """
    Softmax of each row of a 2-D array, without max subtraction.

    Large inputs overflow to inf (and NaN after normalisation). Floating
    point warnings are suppressed here; callers decide how to report
    non-finite results.
    """
    with np.errstate(over="ignore", invalid="ignore"):
        e = np.exp(y)
        return e / np.sum(e, axis=1, keepdims=True)
