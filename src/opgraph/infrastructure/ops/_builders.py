"""
Explicit node-construction helpers.

Every operator has one constructor function here. Gradient rules build
their backward subgraphs exclusively through these calls, e.g.

    matmul(in_grad, b, trans_a=False, trans_b=True)

rather than through operator overloading on `Node`. Each call returns a new
`Node`; existing nodes are only referenced as inputs, never modified.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from ...domain._operator import OpKind
from ..graph._node import Node
from ._registry import OperatorRegistry


def make_node(
    kind: Union[str, OpKind],
    inputs: Sequence[Node],
    name: Optional[str] = None,
    **attrs: Any,
) -> Node:
    """
    Create a node evaluating operator `kind` over `inputs`.

    Parameters
    ----------
    kind : str | OpKind
        Canonical operator name or kind.
    inputs : Sequence[Node]
        Ordered input nodes.
    name : str, optional
        Debug name for the new node.
    **attrs
        Node attributes (e.g. `const_val=2.0`).

    Returns
    -------
    Node
        The new node.

    Raises
    ------
    UnknownOperatorError
        If `kind` is not a registered operator.
    """
    return Node(OperatorRegistry.create(kind), inputs, attrs, name)


def placeholder(name: str) -> Node:
    """Create an input node whose value is fed at evaluation time."""
    return Node(None, (), None, name)


def add(a: Node, b: Node) -> Node:
    return make_node(OpKind.ADD, (a, b))


def add_by_const(a: Node, const_val: float) -> Node:
    return make_node(OpKind.ADD_BY_CONST, (a,), const_val=float(const_val))


def minus(a: Node, b: Node) -> Node:
    return make_node(OpKind.MINUS, (a, b))


def minus_by_const(a: Node, const_val: float) -> Node:
    return make_node(OpKind.MINUS_BY_CONST, (a,), const_val=float(const_val))


def multiply(a: Node, b: Node) -> Node:
    return make_node(OpKind.MULTIPLY, (a, b))


def multiply_by_const(a: Node, const_val: float) -> Node:
    return make_node(OpKind.MULTIPLY_BY_CONST, (a,), const_val=float(const_val))


def devide(a: Node, b: Node) -> Node:
    return make_node(OpKind.DEVIDE, (a, b))


def devide_by_const(a: Node, const_val: float) -> Node:
    return make_node(OpKind.DEVIDE_BY_CONST, (a,), const_val=float(const_val))


def matmul(a: Node, b: Node, trans_a: bool = False, trans_b: bool = False) -> Node:
    """Matrix product of `a` and `b`, each optionally read transposed."""
    return make_node(
        OpKind.MATMUL, (a, b), trans_a=bool(trans_a), trans_b=bool(trans_b)
    )


def zeros(a: Node) -> Node:
    """Zeros shaped like `a`."""
    return make_node(OpKind.ZEROS, (a,))


def ones(a: Node) -> Node:
    """Ones shaped like `a`."""
    return make_node(OpKind.ONES, (a,))


def reduce_sum_axis_zero(a: Node) -> Node:
    return make_node(OpKind.REDUCE_SUM_AXIS_ZERO, (a,))


def broadcast_to(a: Node, template: Node) -> Node:
    """Replicate `a` along a new leading axis to the shape of `template`."""
    return make_node(OpKind.BROADCAST_TO, (a, template))


def softmax(a: Node) -> Node:
    return make_node(OpKind.SOFTMAX, (a,))


def softmax_cross_entropy(logits: Node, labels: Node) -> Node:
    return make_node(OpKind.SOFTMAX_CROSS_ENTROPY, (logits, labels))


def relu(a: Node) -> Node:
    return make_node(OpKind.RELU, (a,))


def relu_grad(grad: Node, a: Node) -> Node:
    """`grad` masked by `a > 0`."""
    return make_node(OpKind.RELU_GRAD, (grad, a))
