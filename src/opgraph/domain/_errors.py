"""
Operator-related exceptions for opgraph.

This module defines the error taxonomy used by operator implementations,
the operator factory and the graph utilities. The errors fall into two
groups:

- Programmer errors (`ArityError`, `ShapeMismatchError`): an operator was
  wired with the wrong number of inputs or with incompatible shapes. These
  are not meant to be recovered from; they exist so the failure is loud and
  points at the offending operator.
- Graph-construction errors (`NodeAttributeError`, `UnknownOperatorError`,
  `UnsupportedGradientError`): surfaced to the caller that builds or
  differentiates a graph, never replaced by a default.
"""


class ArityError(RuntimeError):
    """
    Raised when an operator receives the wrong number of inputs or outputs.

    Attributes
    ----------
    op : str
        Name of the operator that was invoked.
    expected : int
        Number of values the operator declares.
    actual : int
        Number of values that were provided.
    """

    def __init__(self, op: str, expected: int, actual: int, what: str = "inputs"):
        """
        Initialize the ArityError.

        Parameters
        ----------
        op : str
            Operator name.
        expected : int
            Declared arity.
        actual : int
            Number of values received.
        what : str, optional
            Which sequence was checked (e.g. "inputs", "shapes", "outputs").
        """
        super().__init__(f"{op} expects {expected} {what}, got {actual}.")
        self.op = op
        self.expected = expected
        self.actual = actual


class ShapeMismatchError(ValueError):
    """
    Raised when input shapes (or buffer sizes) are incompatible with an operator.
    """

    def __init__(self, op: str, detail: str) -> None:
        super().__init__(f"{op}: {detail}")
        self.op = op


class NodeAttributeError(AttributeError):
    """
    Raised when a node attribute required by an operator is absent or has
    the wrong type.

    Attributes
    ----------
    node : str
        Debug name of the node.
    attr : str
        Name of the attribute that was requested.
    """

    def __init__(self, node: str, attr: str, detail: str) -> None:
        """
        Initialize the NodeAttributeError.

        Parameters
        ----------
        node : str
            Debug name of the node the attribute was read from.
        attr : str
            Attribute name.
        detail : str
            Human-readable reason (missing, wrong type, ...).
        """
        super().__init__(f"Attribute '{attr}' of node '{node}': {detail}")
        self.node = node
        self.attr = attr


class UnsupportedGradientError(RuntimeError):
    """
    Raised when backward differentiation is requested through an operator
    that has no gradient rule (e.g. Softmax).
    """

    def __init__(self, op: str) -> None:
        super().__init__(f"{op} has no gradient function.")
        self.op = op


class UnknownOperatorError(ValueError):
    """
    Raised when the operator factory is given a name it does not know.

    Attributes
    ----------
    name : str
        The requested operator name.
    """

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        listing = ", ".join(available) or "<none>"
        super().__init__(f"Unknown operator: {name!r}. Available: {listing}")
        self.name = name
