"""
Activation operators: `Relu`, its backward helper `ReluGrad`, and `Softmax`.

Notes
-----
- `Softmax` is computed without max subtraction. Large logits overflow; the
  result is still written, and a `RuntimeWarning` is emitted. The warning
  is attributed to the caller of `Evaluator.run`, two frames above
  `compute`.
- `Softmax` has no backward rule. Differentiating through it raises
  `UnsupportedGradientError`. Use `SoftmaxCrossEntropy` for training.
"""

from __future__ import annotations

import warnings
from typing import Sequence

import numpy as np

from ...domain._errors import UnsupportedGradientError
from ...domain._node import INode
from ...domain._operator import Operator, OpKind
from ...domain._tensor import ITensor, ITensorShape
from ._builders import relu_grad, zeros
from ._numeric import (
    as_matrix,
    check_ndim,
    check_same_numel,
    check_same_shapes,
    row_softmax,
)
from ._registry import OperatorRegistry


@OperatorRegistry.register(OpKind.RELU)
class ReluOp(Operator):
    """
    Rectified linear unit.

        out[i] = max(in[i], 0)

    Backward:

        dx = ReluGrad(g, x)    (g where x > 0, else 0)
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
        check_same_numel(self.name, (x, out))
        out.handle[...] = np.maximum(x.handle, 0.0)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        return [in_shapes[0]]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        (x,) = node.get_input_nodes()
        return [relu_grad(in_grad, x)]


@OperatorRegistry.register(OpKind.RELU_GRAD)
class ReluGradOp(Operator):
    """
    Gradient mask of ReLU.

    Inputs are `(grad, x)` of one shape:

        out[i] = grad[i] if x[i] > 0 else 0

    The mask is piecewise constant in `x`, so:

        d grad = ReluGrad(g, x)
        d x    = Zeros(x)
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
        grad, x = in_tensors
        out = out_tensors[0]
        check_same_numel(self.name, (grad, x, out))
        out.handle[...] = np.where(x.handle > 0, grad.handle, 0.0)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        check_same_shapes(self.name, in_shapes)
        return [in_shapes[0]]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        _, x = node.get_input_nodes()
        return [relu_grad(in_grad, x), zeros(x)]


@OperatorRegistry.register(OpKind.SOFTMAX)
class SoftmaxOp(Operator):
    """
    Row-wise softmax of a 2-D input.

        out[i, j] = exp(x[i, j]) / sum_k exp(x[i, k])
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
        check_ndim(self.name, x.shape, 2)
        check_same_numel(self.name, (x, out))

        y = row_softmax(as_matrix(x))
        if not np.all(np.isfinite(y)):
            warnings.warn(
                f"{self.name} produced non-finite values; "
                "inputs are too large for the unstabilised exponential.",
                RuntimeWarning,
                stacklevel=3,
            )
        out.handle[...] = y.reshape(-1)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        check_ndim(self.name, in_shapes[0], 2)
        return [in_shapes[0]]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        raise UnsupportedGradientError(self.name)
