"""
Concrete computation graph node.

A `Node` records an operator, an ordered tuple of input nodes and a mapping
of named attributes. Nodes are identity-hashed: two structurally identical
nodes are still distinct vertices of the graph.

Nodes without an operator are placeholders; their values are supplied to the
evaluator by the caller.
"""

from __future__ import annotations

import itertools
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar

from ...domain._errors import NodeAttributeError
from ...domain._operator import Operator

T = TypeVar("T")

_NODE_IDS = itertools.count()


class Node:
    """
    Vertex of the computation graph.

    Parameters
    ----------
    op : Operator | None
        Operator evaluated at this node, or None for a placeholder.
    inputs : Sequence[Node], optional
        Ordered input nodes.
    attrs : Mapping[str, Any], optional
        Named attributes (e.g. `const_val`, `trans_a`). Copied on construction.
    name : str, optional
        Debug name. Defaults to the operator name plus a unique id.
    """

    __slots__ = ("_op", "_inputs", "_attrs", "_name")

    def __init__(
        self,
        op: Optional[Operator],
        inputs: Sequence["Node"] = (),
        attrs: Optional[Mapping[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        for i in inputs:
            if not isinstance(i, Node):
                raise TypeError(f"Node inputs must be Node, got {type(i)!r}")
        self._op = op
        self._inputs: tuple[Node, ...] = tuple(inputs)
        self._attrs: dict[str, Any] = dict(attrs or {})
        if name is None:
            prefix = op.name if op is not None else "placeholder"
            name = f"{prefix}_{next(_NODE_IDS)}"
        self._name = name

    @property
    def op(self) -> Optional[Operator]:
        return self._op

    @property
    def inputs(self) -> tuple["Node", ...]:
        return self._inputs

    @property
    def attrs(self) -> Mapping[str, Any]:
        return dict(self._attrs)

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_placeholder(self) -> bool:
        return self._op is None

    def get_input_nodes(self) -> list["Node"]:
        return list(self._inputs)

    def get_attr(self, name: str, expected_type: Type[T]) -> T:
        """
        Return attribute `name`, checked against `expected_type`.

        Parameters
        ----------
        name : str
            Attribute name.
        expected_type : type
            `float` accepts int and float values (returned as float);
            `bool` accepts only bool values. Other types are checked
            with `isinstance`.

        Returns
        -------
        T
            The attribute value.

        Raises
        ------
        NodeAttributeError
            If the attribute is absent or has the wrong type.
        """
        if name not in self._attrs:
            raise NodeAttributeError(self._name, name, "missing")

        value = self._attrs[name]

        # bool is an int subclass; never let it stand in for a number.
        if expected_type is float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise NodeAttributeError(
                    self._name, name, f"expected float, got {type(value).__name__}"
                )
            return float(value)  # type: ignore[return-value]

        if expected_type is bool:
            if not isinstance(value, bool):
                raise NodeAttributeError(
                    self._name, name, f"expected bool, got {type(value).__name__}"
                )
            return value  # type: ignore[return-value]

        if not isinstance(value, expected_type):
            raise NodeAttributeError(
                self._name,
                name,
                f"expected {expected_type.__name__}, got {type(value).__name__}",
            )
        return value

    def __repr__(self) -> str:
        op_name = self._op.name if self._op is not None else None
        ins = ", ".join(i.name for i in self._inputs)
        return f"Node(name={self._name!r}, op={op_name!r}, inputs=[{ins}])"
