"""
Operator interface definitions.

This module defines the closed set of operator kinds (`OpKind`) and the
abstract base class every concrete operator implements. An operator is the
unit that knows, for one kind of computation, how to:

- `compute`: evaluate the forward result into caller-allocated outputs,
- `infer`: derive output shapes from input shapes alone,
- `gradient`: build the backward expressions for each input as new nodes.

Operators are stateless apart from their name. Per-call parameters (constant
values, transpose flags) are read from the node they are invoked on, so one
operator instance can be shared by any number of nodes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Sequence

from ._errors import ArityError
from ._node import INode
from ._tensor import ITensor, ITensorShape


class OpKind(Enum):
    """
    Enumeration of supported operator kinds.

    The value of each member is the canonical operator name accepted by the
    operator factory.
    """

    ADD = "Add"
    ADD_BY_CONST = "AddByConst"
    MINUS = "Minus"
    MINUS_BY_CONST = "MinusByConst"
    MULTIPLY = "Multiply"
    MULTIPLY_BY_CONST = "MultiplyByConst"
    DEVIDE = "Devide"
    DEVIDE_BY_CONST = "DevideByConst"
    MATMUL = "MatMul"
    ZEROS = "Zeros"
    ONES = "Ones"
    REDUCE_SUM_AXIS_ZERO = "ReduceSumAxisZero"
    BROADCAST_TO = "BroadCastTo"
    SOFTMAX = "Softmax"
    SOFTMAX_CROSS_ENTROPY = "SoftmaxCrossEntropy"
    RELU = "Relu"
    RELU_GRAD = "ReluGrad"


class Operator(ABC):
    """
    Abstract base class for graph operators.

    Subclasses set the class attributes `kind` and `arity` and implement
    `compute`, `infer` and `gradient`.

    Notes
    -----
    - `__slots__` keeps instances immutable in practice: the only state is
      the name assigned at construction.
    - Arity is checked at entry of `compute` and `infer` through
      `_check_arity`; a mismatch is a programmer error and raises
      `ArityError`.
    """

    __slots__ = ("_name",)

    kind: ClassVar[OpKind]
    arity: ClassVar[int]

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        """Return the name this operator was created under."""
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"

    @abstractmethod
    def compute(
        self,
        node: INode,
        in_tensors: Sequence[ITensor],
        out_tensors: Sequence[ITensor],
    ) -> None:
        """
        Evaluate the operator into pre-sized output tensors.

        Parameters
        ----------
        node : INode
            The node being evaluated (source of attributes).
        in_tensors : Sequence[ITensor]
            Input values, positionally matching the node's inputs.
        out_tensors : Sequence[ITensor]
            Output buffers already sized according to `infer`. Written in place.
        """
        ...

    @abstractmethod
    def infer(
        self, node: INode, in_shapes: Sequence[ITensorShape]
    ) -> list[ITensorShape]:
        """
        Derive output shapes from input shapes.

        Parameters
        ----------
        node : INode
            The node being inferred (source of attributes).
        in_shapes : Sequence[ITensorShape]
            Input shapes, positionally matching the node's inputs.

        Returns
        -------
        list[ITensorShape]
            One shape per output.
        """
        ...

    @abstractmethod
    def gradient(self, node: INode, in_grad: INode) -> list[INode]:
        """
        Build gradient expressions for each input of `node`.

        Parameters
        ----------
        node : INode
            The forward node whose inputs receive gradients.
        in_grad : INode
            Node holding the gradient of the loss w.r.t. the output of `node`.

        Returns
        -------
        list[INode]
            Newly constructed nodes, one per input of `node`, in input order.

        Raises
        ------
        UnsupportedGradientError
            If the operator has no backward rule.
        """
        ...

    def _check_arity(self, values: Sequence[object], what: str = "inputs") -> None:
        if len(values) != self.arity:
            raise ArityError(self._name, self.arity, len(values), what)

    def _check_outputs(self, out_tensors: Sequence[object]) -> None:
        if len(out_tensors) != 1:
            raise ArityError(self._name, 1, len(out_tensors), "outputs")
