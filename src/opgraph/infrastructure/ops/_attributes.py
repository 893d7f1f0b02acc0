"""
Fixed attribute structs for operator families.

Operators do not look attributes up ad hoc. Each family that needs
per-node parameters declares a frozen dataclass and reads it from the node
in one place with typed lookups, so a missing or mistyped attribute fails
with `NodeAttributeError` before any computation happens.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...domain._node import INode


@dataclass(frozen=True)
class ConstAttrs:
    """
    Attributes of the `*ByConst` operators.

    Attributes
    ----------
    const_val : float
        Scalar right-hand operand.
    """

    const_val: float

    @classmethod
    def from_node(cls, node: INode) -> "ConstAttrs":
        return cls(const_val=node.get_attr("const_val", float))


@dataclass(frozen=True)
class MatMulAttrs:
    """
    Attributes of `MatMul`.

    Attributes
    ----------
    trans_a : bool
        Read the left operand transposed.
    trans_b : bool
        Read the right operand transposed.
    """

    trans_a: bool
    trans_b: bool

    @classmethod
    def from_node(cls, node: INode) -> "MatMulAttrs":
        return cls(
            trans_a=node.get_attr("trans_a", bool),
            trans_b=node.get_attr("trans_b", bool),
        )
