"""
Constant-fill operators: `Zeros` and `Ones`.

Both take a single input that only provides the output shape; its values are
never read. Their gradient is zero with respect to anything, expressed as a
fresh `Zeros` node over the original input.
"""

from __future__ import annotations

from typing import ClassVar, Sequence

from ...domain._node import INode
from ...domain._operator import Operator, OpKind
from ...domain._tensor import ITensor, ITensorShape
from ._builders import zeros
from ._numeric import check_same_numel
from ._registry import OperatorRegistry


class _FillOp(Operator):
    __slots__ = ()
    arity = 1
    fill_value: ClassVar[float]

    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        self._check_arity(in_tensors)
        self._check_outputs(out_tensors)
        check_same_numel(self.name, (in_tensors[0], out_tensors[0]))
        out_tensors[0].fill(self.fill_value)

    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        self._check_arity(in_shapes, "shapes")
        return [in_shapes[0]]

    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        (x,) = node.get_input_nodes()
        return [zeros(x)]


@OperatorRegistry.register(OpKind.ZEROS)
class ZerosOp(_FillOp):
    __slots__ = ()
    fill_value = 0.0


@OperatorRegistry.register(OpKind.ONES)
class OnesOp(_FillOp):
    __slots__ = ()
    fill_value = 1.0
