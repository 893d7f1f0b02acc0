"""
Graph node interface definitions.

Operators never construct or mutate the node they are invoked on; they only
read its attributes and its ordered input nodes. This protocol captures that
read-only surface.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Type, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class INode(Protocol):
    """
    Node interface.

    A node is a vertex of the computation graph. It records an operator
    (absent for placeholders), an ordered list of input nodes and a mapping
    of named attributes.
    """

    @property
    def op(self) -> Optional[Any]:
        """Return the operator of this node, or None for a placeholder."""
        ...

    @property
    def inputs(self) -> Sequence["INode"]:
        """Return the ordered input nodes."""
        ...

    @property
    def name(self) -> str:
        """Return the debug name of the node."""
        ...

    def get_attr(self, name: str, expected_type: Type[T]) -> T:
        """
        Return attribute `name`, checked against `expected_type`.

        Raises
        ------
        NodeAttributeError
            If the attribute is absent or of the wrong type.
        """
        ...

    def get_input_nodes(self) -> list["INode"]:
        """Return a copy of the ordered input node list."""
        ...
