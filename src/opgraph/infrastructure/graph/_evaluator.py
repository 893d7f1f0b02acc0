"""
Forward evaluation of computation graphs.

The evaluator visits nodes in topological order. For every operator node it
asks the operator for its output shape (`infer`), allocates a zeroed output
tensor of that shape, and lets the operator fill it (`compute`).
Placeholder values are supplied by the caller.

Shape propagation is also available on its own (`infer_shapes`); it never
allocates or reads tensor data.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, Union

import numpy as np

from ..tensor._tensor import Tensor
from ..tensor._tensor_shape import ShapeLike, TensorShape
from ._node import Node


def topological_sort(nodes: Union[Node, Iterable[Node]]) -> list[Node]:
    """
    Return all nodes reachable from `nodes`, inputs before consumers.

    Parameters
    ----------
    nodes : Node | Iterable[Node]
        Root node(s).

    Returns
    -------
    list[Node]
        Reachable nodes in a topological order (depth-first post-order).

    Notes
    -----
    Iterative so that deep chains do not hit the recursion limit.
    """
    roots = [nodes] if isinstance(nodes, Node) else list(nodes)

    ordered: list[Node] = []
    visited: set[int] = set()

    for root in roots:
        if id(root) in visited:
            continue
        visited.add(id(root))
        stack = [(root, iter(root.inputs))]
        while stack:
            node, it = stack[-1]
            child = next(it, None)
            if child is None:
                stack.pop()
                ordered.append(node)
            elif id(child) not in visited:
                visited.add(id(child))
                stack.append((child, iter(child.inputs)))

    return ordered


class Evaluator:
    """
    Computes the values (or shapes) of a fixed list of nodes.

    Parameters
    ----------
    eval_nodes : Sequence[Node]
        Nodes whose values are requested.
    dtype : np.dtype, optional
        Storage dtype of every tensor the evaluator allocates or converts
        from fed arrays. Defaults to float32.
    """

    def __init__(self, eval_nodes: Sequence[Node], *, dtype: Any = np.float32):
        self.eval_nodes = list(eval_nodes)
        self.dtype = np.dtype(dtype)

    def infer_shapes(
        self, feed_shapes: Mapping[Node, ShapeLike]
    ) -> list[TensorShape]:
        """
        Propagate shapes from the fed nodes to the requested nodes.

        Parameters
        ----------
        feed_shapes : Mapping[Node, ShapeLike]
            Shapes of the placeholders (or of any node to override).

        Returns
        -------
        list[TensorShape]
            Shape of each node in `eval_nodes`.

        Raises
        ------
        ValueError
            If a placeholder has no fed shape.
        """
        shapes: dict[Node, TensorShape] = {}
        for node in topological_sort(self.eval_nodes):
            if node in feed_shapes:
                shapes[node] = TensorShape.of(feed_shapes[node])
                continue
            if node.is_placeholder:
                raise ValueError(f"No shape fed for placeholder '{node.name}'")
            in_shapes = [shapes[i] for i in node.inputs]
            (shapes[node],) = node.op.infer(node, in_shapes)
        return [shapes[n] for n in self.eval_nodes]

    def run(self, feed: Mapping[Node, Union[Tensor, Any]]) -> list[Tensor]:
        """
        Evaluate the requested nodes.

        Parameters
        ----------
        feed : Mapping[Node, Tensor | array-like]
            Values of the placeholders (or of any node to override).
            Array-likes are converted to tensors of the evaluator's dtype.

        Returns
        -------
        list[Tensor]
            Value of each node in `eval_nodes`.

        Raises
        ------
        ValueError
            If a placeholder has no fed value.
        """
        values: dict[Node, Tensor] = {}
        for node in topological_sort(self.eval_nodes):
            if node in feed:
                values[node] = self._as_tensor(feed[node])
                continue
            if node.is_placeholder:
                raise ValueError(f"No value fed for placeholder '{node.name}'")

            in_tensors = [values[i] for i in node.inputs]
            out_shapes = node.op.infer(node, [t.shape for t in in_tensors])
            out_tensors = [Tensor(s, dtype=self.dtype) for s in out_shapes]
            node.op.compute(node, in_tensors, out_tensors)
            values[node] = out_tensors[0]

        return [values[n] for n in self.eval_nodes]

    def _as_tensor(self, value: Union[Tensor, Any]) -> Tensor:
        if isinstance(value, Tensor):
            return value
        return Tensor.from_numpy(value, dtype=self.dtype)
