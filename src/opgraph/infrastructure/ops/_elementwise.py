"""
Elementwise arithmetic operators.

Implements the binary operators `Add`, `Minus`, `Multiply`, `Devide` and
their scalar-constant counterparts `AddByConst`, `MinusByConst`,
`MultiplyByConst`, `DevideByConst`.

Forward
-------
For every linear index `i`:

    out[i] = in0[i] OP in1[i]        (binary)
    out[i] = in0[i] OP const_val     (*ByConst, `const_val` node attribute)

Shapes
------
No broadcasting: binary operands must share one shape, and the output has
the shape of input 0.

Notes
-----
Division performs no zero guard; inf/NaN propagate with IEEE semantics and
NumPy floating point warnings are suppressed.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Sequence

import numpy as np

from ...domain._node import INode
from ...domain._operator import Operator, OpKind
from ...domain._tensor import ITensor, ITensorShape
from ._attributes import ConstAttrs
from ._builders import devide, devide_by_const, multiply, multiply_by_const
from ._numeric import check_same_numel, check_same_shapes
from ._registry import OperatorRegistry


class _BinaryElementwiseOp(Operator):
    """
    Shared forward/shape logic for two-operand elementwise operators.
    """

    __slots__ = ()
    arity = 2

    @staticmethod
    @abstractmethod
    def _apply(a: np.ndarray, b: np.ndarray) -> np.ndarray: ...

    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        self._check_arity(in_tensors)
        self._check_outputs(out_tensors)
        a, b = in_tensors
        out = out_tensors[0]
        check_same_numel(self.name, (a, b, out))

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            out.handle[...] = self._apply(a.handle, b.handle)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        check_same_shapes(self.name, in_shapes)
        return [in_shapes[0]]


class _ConstElementwiseOp(Operator):
    """
    Shared forward/shape logic for tensor-by-constant operators.
    """

    __slots__ = ()
    arity = 1

    @staticmethod
    @abstractmethod
    def _apply(a: np.ndarray, c: float) -> np.ndarray: ...

    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        self._check_arity(in_tensors)
        self._check_outputs(out_tensors)
        attrs = ConstAttrs.from_node(node)
        (x,) = in_tensors
        out = out_tensors[0]
        check_same_numel(self.name, (x, out))

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            out.handle[...] = self._apply(x.handle, attrs.const_val)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        return [in_shapes[0]]


@OperatorRegistry.register(OpKind.ADD)
class AddOp(_BinaryElementwiseOp):
    """`out = a + b`; gradient `{g, g}`."""

    __slots__ = ()

    @staticmethod
    def _apply(a, b):
        return a + b

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        return [in_grad, in_grad]


@OperatorRegistry.register(OpKind.ADD_BY_CONST)
class AddByConstOp(_ConstElementwiseOp):
    __slots__ = ()

    @staticmethod
    def _apply(a, c):
        return a + c

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        return [in_grad]


@OperatorRegistry.register(OpKind.MINUS)
class MinusOp(_BinaryElementwiseOp):
    """`out = a - b`; gradient `{g, -g}`."""

    __slots__ = ()

    @staticmethod
    def _apply(a, b):
        return a - b

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        return [in_grad, multiply_by_const(in_grad, -1.0)]


@OperatorRegistry.register(OpKind.MINUS_BY_CONST)
class MinusByConstOp(_ConstElementwiseOp):
    __slots__ = ()

    @staticmethod
    def _apply(a, c):
        return a - c

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        return [in_grad]


@OperatorRegistry.register(OpKind.MULTIPLY)
class MultiplyOp(_BinaryElementwiseOp):
    """
    `out = a * b`.

    Backward (product rule):

        da = g * b
        db = g * a
    """

    __slots__ = ()

    @staticmethod
    def _apply(a, b):
        return a * b

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        a, b = node.get_input_nodes()
        return [multiply(in_grad, b), multiply(in_grad, a)]


@OperatorRegistry.register(OpKind.MULTIPLY_BY_CONST)
class MultiplyByConstOp(_ConstElementwiseOp):
    __slots__ = ()

    @staticmethod
    def _apply(a, c):
        return a * c

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        attrs = ConstAttrs.from_node(node)
        return [multiply_by_const(in_grad, attrs.const_val)]


@OperatorRegistry.register(OpKind.DEVIDE)
class DevideOp(_BinaryElementwiseOp):
    """
    `out = a / b`.

    Backward, with `y` the division node itself:

        da = g / b
        db = -g * a / b**2 = (-g * y) / b

    The second form reuses the forward node instead of recomputing `a / b`.
    """

    __slots__ = ()

    @staticmethod
    def _apply(a, b):
        return a / b

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        _, b = node.get_input_nodes()
        lhs = devide(in_grad, b)
        rhs = devide(multiply(multiply_by_const(in_grad, -1.0), node), b)
        return [lhs, rhs]


@OperatorRegistry.register(OpKind.DEVIDE_BY_CONST)
class DevideByConstOp(_ConstElementwiseOp):
    __slots__ = ()

    @staticmethod
    def _apply(a, c):
        return a / c

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        attrs = ConstAttrs.from_node(node)
        return [devide_by_const(in_grad, attrs.const_val)]
