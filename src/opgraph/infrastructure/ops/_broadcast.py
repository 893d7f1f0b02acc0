"""
Shape-changing operators: `ReduceSumAxisZero` and `BroadCastTo`.

The two are adjoint to each other under this shape model:

- `ReduceSumAxisZero(x)` views `x` as `(dim0, rest)` and sums over `dim0`,
  producing a tensor of shape `x.shape[1:]`.
- `BroadCastTo(x, template)` stacks `template.dim0` contiguous copies of
  `x`, producing a tensor of the template's shape.

so the gradient of each is expressed with the other.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._node import INode
from ...domain._operator import Operator, OpKind
from ...domain._tensor import ITensor, ITensorShape
from ..tensor._tensor_shape import TensorShape
from ._builders import broadcast_to, reduce_sum_axis_zero, zeros
from ._numeric import check_numel
from ._registry import OperatorRegistry


@OperatorRegistry.register(OpKind.REDUCE_SUM_AXIS_ZERO)
class ReduceSumAxisZeroOp(Operator):
    """
    Sum over the leading axis.

        out[r] = sum_i in[i, r]

    Notes
    -----
    - A 1-D input reduces to the 0-d shape `()`, which holds one element.
    - A leading dimension of size 0 produces zeros.
    - A 0-d input has no axis 0 and is rejected by `infer`.
    """

    __slots__ = ()
    arity = 1

    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        self._check_arity(in_tensors)
        self._check_outputs(out_tensors)
        (x,) = in_tensors
        out = out_tensors[0]
        if x.shape.ndim == 0:
            raise ShapeMismatchError(self.name, "cannot reduce a 0-d tensor")

        outer = x.shape.dim_size(0)
        rest = TensorShape(x.shape.dims[1:]).numel()
        check_numel(self.name, out, rest)

        out.handle[...] = np.sum(x.handle.reshape(outer, rest), axis=0)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        (shape,) = in_shapes
        if shape.ndim == 0:
            raise ShapeMismatchError(self.name, "cannot reduce a 0-d shape")
        return [TensorShape(shape.dims[1:])]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        (x,) = node.get_input_nodes()
        return [broadcast_to(in_grad, x)]


@OperatorRegistry.register(OpKind.BROADCAST_TO)
class BroadCastToOp(Operator):
    """
    Replicate the source along a new leading axis.

    Inputs are `(source, template)`. The template's values are never read;
    its leading dimension gives the number of copies and its full shape is
    the output shape. The template must therefore have shape
    `(n,) + source.shape`, so that `ReduceSumAxisZero` of the output has
    the source shape again.

    Backward:

        d source   = ReduceSumAxisZero(g)
        d template = Zeros(template)
    """

    __slots__ = ()
    arity = 2

    def _check_template(self, src: ITensorShape, template: ITensorShape) -> int:
        if template.ndim == 0:
            raise ShapeMismatchError(self.name, "template must have a leading axis")
        n_times = template.dim_size(0)
        if tuple(template.dims[1:]) != tuple(src.dims):
            raise ShapeMismatchError(
                self.name,
                f"cannot stack {n_times} copies of shape {src.dims} "
                f"into shape {template.dims}",
            )
        return n_times

    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        self._check_arity(in_tensors)
        self._check_outputs(out_tensors)
        src, template = in_tensors
        out = out_tensors[0]

        n_times = self._check_template(src.shape, template.shape)
        check_numel(self.name, out, n_times * src.numel())

        out.handle[...] = np.tile(src.handle, n_times)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        src, template = in_shapes
        self._check_template(src, template)
        return [template]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        _, template = node.get_input_nodes()
        return [reduce_sum_axis_zero(in_grad), zeros(template)]
