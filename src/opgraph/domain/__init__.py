"""
Domain layer: backend-agnostic contracts and errors.
"""

from ._errors import (
    ArityError,
    NodeAttributeError,
    ShapeMismatchError,
    UnknownOperatorError,
    UnsupportedGradientError,
)
from ._node import INode
from ._operator import Operator, OpKind
from ._tensor import ITensor, ITensorShape

__all__ = [
    "ArityError",
    "NodeAttributeError",
    "ShapeMismatchError",
    "UnknownOperatorError",
    "UnsupportedGradientError",
    "INode",
    "Operator",
    "OpKind",
    "ITensor",
    "ITensorShape",
]
