"""
Matrix multiplication operator.

Implements:

    out[m, n] = sum_k A'[m, k] * B'[k, n]

where `A'` is `A` or `A^T` depending on the node attribute `trans_a`, and
likewise `B'` with `trans_b`. Both operands are stored row-major in their
physical (un-transposed) shapes; transposition only changes how they are
read, following the usual GEMM convention.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._node import INode
from ...domain._operator import Operator, OpKind
from ...domain._tensor import ITensor, ITensorShape
from ..tensor._tensor_shape import TensorShape
from ._attributes import MatMulAttrs
from ._builders import matmul
from ._numeric import as_matrix, check_ndim, check_numel
from ._registry import OperatorRegistry


def _gemm_dims(
    op: str, shape_a: ITensorShape, shape_b: ITensorShape, attrs: MatMulAttrs
) -> tuple[int, int, int]:
    """
    Return `(m, n, k)` for the logical product of the two operands.

    Raises
    ------
    ShapeMismatchError
        If an operand is not 2-D or the contraction sizes differ.
    """
    check_ndim(op, shape_a, 2)
    check_ndim(op, shape_b, 2)

    m = shape_a.dim_size(1) if attrs.trans_a else shape_a.dim_size(0)
    k = shape_a.dim_size(0) if attrs.trans_a else shape_a.dim_size(1)
    k_b = shape_b.dim_size(1) if attrs.trans_b else shape_b.dim_size(0)
    n = shape_b.dim_size(0) if attrs.trans_b else shape_b.dim_size(1)

    if k != k_b:
        raise ShapeMismatchError(
            op,
            f"contraction sizes differ: {shape_a.dims} (trans_a={attrs.trans_a}) "
            f"vs {shape_b.dims} (trans_b={attrs.trans_b})",
        )
    return m, n, k


@OperatorRegistry.register(OpKind.MATMUL)
class MatMulOp(Operator):
    """
    Matrix product with optional operand transposition.

    Backward
    --------
    With `g` the output gradient, the input gradients for each flag
    combination are (`MatMul(x, y, ta, tb)` reading `x`/`y` transposed when
    `ta`/`tb` is set):

        (F, F):  dA = MatMul(g, B, F, T)   dB = MatMul(A, g, T, F)
        (T, F):  dA = MatMul(B, g, F, T)   dB = MatMul(A, g, F, F)
        (F, T):  dA = MatMul(g, B, F, F)   dB = MatMul(g, A, T, F)
        (T, T):  dA = MatMul(B, g, T, T)   dB = MatMul(g, A, T, T)

    Each follows from `d(XY)/dX = g Y^T`, `d(XY)/dY = X^T g`, transposed
    back to the stored layout of the operand.

    Notes
    -----
    The product is evaluated with `np.matmul` on transposed views of the
    flat buffers; accumulation order is NumPy's.
    """

    __slots__ = ()
    arity = 2

    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        self._check_arity(in_tensors)
        self._check_outputs(out_tensors)
        attrs = MatMulAttrs.from_node(node)
        a, b = in_tensors
        out = out_tensors[0]

        m, n, _ = _gemm_dims(self.name, a.shape, b.shape, attrs)
        check_numel(self.name, out, m * n)

        a_view = as_matrix(a)
        b_view = as_matrix(b)
        if attrs.trans_a:
            a_view = a_view.T
        if attrs.trans_b:
            b_view = b_view.T

        out.handle[...] = np.matmul(a_view, b_view).reshape(-1)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        attrs = MatMulAttrs.from_node(node)
        m, n, _ = _gemm_dims(self.name, in_shapes[0], in_shapes[1], attrs)
        return [TensorShape((m, n))]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        a, b = node.get_input_nodes()
        attrs = MatMulAttrs.from_node(node)

        if not attrs.trans_a and not attrs.trans_b:
            grad_a = matmul(in_grad, b, False, True)
            grad_b = matmul(a, in_grad, True, False)
        elif attrs.trans_a and not attrs.trans_b:
            grad_a = matmul(b, in_grad, False, True)
            grad_b = matmul(a, in_grad, False, False)
        elif not attrs.trans_a and attrs.trans_b:
            grad_a = matmul(in_grad, b, False, False)
            grad_b = matmul(in_grad, a, True, False)
        else:
            grad_a = matmul(b, in_grad, True, True)
            grad_b = matmul(in_grad, a, True, True)

        return [grad_a, grad_b]
