"""
opgraph: operator library and reverse-mode differentiation for a minimal
tensor-computation graph.
"""

from .domain import (
    ArityError,
    NodeAttributeError,
    ShapeMismatchError,
    UnknownOperatorError,
    UnsupportedGradientError,
    Operator,
    OpKind,
)
from .infrastructure.tensor import Tensor, TensorShape
from .infrastructure.graph._node import Node
from .infrastructure.ops import OperatorRegistry, create_operator
from .infrastructure.ops._builders import (
    make_node,
    placeholder,
    add,
    add_by_const,
    minus,
    minus_by_const,
    multiply,
    multiply_by_const,
    devide,
    devide_by_const,
    matmul,
    zeros,
    ones,
    reduce_sum_axis_zero,
    broadcast_to,
    softmax,
    softmax_cross_entropy,
    relu,
    relu_grad,
)
from .infrastructure.graph._evaluator import Evaluator, topological_sort
from .infrastructure.graph._gradients import gradients

__version__ = "0.1.0"
