"""
Operator catalog.

Importing this package registers every operator with `OperatorRegistry`
and verifies that each `OpKind` has an implementation.
"""

from ._registry import OperatorRegistry, create_operator
from ._elementwise import (
    AddOp,
    AddByConstOp,
    MinusOp,
    MinusByConstOp,
    MultiplyOp,
    MultiplyByConstOp,
    DevideOp,
    DevideByConstOp,
)
from ._matmul import MatMulOp
from ._fill import ZerosOp, OnesOp
from ._broadcast import ReduceSumAxisZeroOp, BroadCastToOp
from ._activations import ReluOp, ReluGradOp, SoftmaxOp
from ._losses import SoftmaxCrossEntropyOp

OperatorRegistry.check_complete()

__all__ = [
    "OperatorRegistry",
    "create_operator",
    "AddOp",
    "AddByConstOp",
    "MinusOp",
    "MinusByConstOp",
    "MultiplyOp",
    "MultiplyByConstOp",
    "DevideOp",
    "DevideByConstOp",
    "MatMulOp",
    "ZerosOp",
    "OnesOp",
    "ReduceSumAxisZeroOp",
    "BroadCastToOp",
    "ReluOp",
    "ReluGradOp",
    "SoftmaxOp",
    "SoftmaxCrossEntropyOp",
]
