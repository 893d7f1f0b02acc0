"""
Loss operators.

`SoftmaxCrossEntropy` fuses a row-wise softmax of the logits with the
categorical cross entropy against (one-hot or soft) labels, averaged over
rows:

    loss = (1 / m) * sum_i sum_j -labels[i, j] * log(softmax(logits)[i, j])

The output is a single-element tensor of shape `(1,)`.
"""

from __future__ import annotations

import warnings
from typing import Sequence

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._node import INode
from ...domain._operator import Operator, OpKind
from ...domain._tensor import ITensor, ITensorShape
from ..tensor._tensor_shape import TensorShape
from ._builders import (
    broadcast_to,
    devide,
    minus,
    multiply,
    ones,
    reduce_sum_axis_zero,
    softmax,
    zeros,
)
from ._numeric import (
    as_matrix,
    check_ndim,
    check_numel,
    check_same_shapes,
    row_softmax,
)
from ._registry import OperatorRegistry


def _expand_like(scalar: INode, like: INode) -> INode:
    """
    Broadcast a `(1,)` node to the `(m, n)` shape of `like`.

    The value is first reduced to the 0-d shape `()`, then stacked to `(n,)`
    (templated on the column sums of `like`) and to `(m, n)`.
    """
    row = broadcast_to(reduce_sum_axis_zero(scalar), reduce_sum_axis_zero(like))
    return broadcast_to(row, like)


@OperatorRegistry.register(OpKind.SOFTMAX_CROSS_ENTROPY)
class SoftmaxCrossEntropyOp(Operator):
    """
    Softmax followed by mean categorical cross entropy.

    Preconditions
    -------------
    `infer` (and `compute`) require 2-D logits with at least one row and
    labels of the same shape; anything else raises `ShapeMismatchError`.
    When they hold, the output shape is always `(1,)`.

    Warnings
    --------
    A non-finite loss emits a `RuntimeWarning` attributed to the caller of
    `Evaluator.run` (or of `compute`'s caller, when called directly).

    Backward
    --------
    With `g` the (1-element) output gradient and `m` the number of rows:

        d logits = (Softmax(logits) - labels) * g / m
        d labels = Zeros(labels)

    `g` and `m` are expanded to the logits' shape with `BroadCastTo`
    (`m` as the column sums of `Ones(logits)`), so the rule uses catalog
    operators only.
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
        logits, labels = in_tensors
        out = out_tensors[0]
        check_ndim(self.name, logits.shape, 2)
        check_same_shapes(self.name, (logits.shape, labels.shape))
        check_numel(self.name, out, 1)

        m = logits.shape.dim_size(0)
        prob = row_softmax(as_matrix(logits))

        with np.errstate(divide="ignore", invalid="ignore"):
            total = np.sum(-as_matrix(labels) * np.log(prob))
            loss = total / m
        if not np.isfinite(loss):
            warnings.warn(
                f"{self.name} produced a non-finite loss; "
                "logits may be too large for the unstabilised softmax.",
                RuntimeWarning,
                stacklevel=3,
            )
        out.handle[0] = loss

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        check_ndim(self.name, in_shapes[0], 2)
        check_same_shapes(self.name, in_shapes)
        if in_shapes[0].dim_size(0) == 0:
            raise ShapeMismatchError(self.name, "logits must have at least one row")
        return [TensorShape((1,))]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        logits, labels = node.get_input_nodes()
        grad_full = _expand_like(in_grad, logits)
        rows = broadcast_to(reduce_sum_axis_zero(ones(logits)), logits)
        grad_logits = devide(multiply(minus(softmax(logits), labels), grad_full), rows)
        return [grad_logits, zeros(labels)]
