"""
Reverse-mode construction of gradient graphs.

`gradients` walks the graph from an output node back to the requested
nodes, asking each operator for the symbolic gradients of its inputs and
summing the contributions of multiple consumers with `Add` nodes. The
result is a list of new nodes; evaluating them with `Evaluator` yields the
numeric gradients.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..ops._builders import add, ones, zeros
from ._evaluator import topological_sort
from ._node import Node


def gradients(
    output: Node,
    wrt: Sequence[Node],
    output_grad: Optional[Node] = None,
) -> list[Node]:
    """
    Build nodes for the gradient of `output` with respect to each of `wrt`.

    Parameters
    ----------
    output : Node
        Node to differentiate.
    wrt : Sequence[Node]
        Nodes to differentiate with respect to.
    output_grad : Node, optional
        Seed gradient w.r.t. `output`. Defaults to `Ones(output)`.

    Returns
    -------
    list[Node]
        One gradient node per entry of `wrt`. Nodes that `output` does not
        depend on get `Zeros(node)`.

    Raises
    ------
    UnsupportedGradientError
        If the traversal has to pass through an operator without a
        backward rule.
    RuntimeError
        If an operator returns a number of gradients different from its
        number of inputs.

    Notes
    -----
    Only nodes lying on a path from `output` to some node in `wrt` are
    differentiated, so a non-differentiable operator elsewhere in the graph
    does not prevent the computation.
    """
    topo = topological_sort(output)

    targets = set(wrt)
    relevant: set[Node] = set()
    for node in topo:
        if node in targets or any(i in relevant for i in node.inputs):
            relevant.add(node)

    grads: dict[Node, Node] = {
        output: output_grad if output_grad is not None else ones(output)
    }

    for node in reversed(topo):
        if node.is_placeholder or node not in relevant or node not in grads:
            continue

        input_grads = node.op.gradient(node, grads[node])
        if len(input_grads) != len(node.inputs):
            raise RuntimeError(
                f"{node.op.name}.gradient must return one gradient per input. "
                f"Got {len(input_grads)} for {len(node.inputs)} inputs."
            )

        for parent, g in zip(node.inputs, input_grads):
            if parent not in relevant:
                continue
            if parent in grads:
                grads[parent] = add(grads[parent], g)
            else:
                grads[parent] = g

    return [grads[n] if n in grads else zeros(n) for n in wrt]
