"""
Operator registry and factory.

This module maps canonical operator names to `Operator` subclasses and
constructs operator instances on demand.

Design
------
- Each concrete operator class registers itself for exactly one `OpKind`
  through the `OperatorRegistry.register` decorator.
- `OperatorRegistry.create` (and the module-level `create_operator`) resolve
  a name or `OpKind` to a freshly constructed operator.
- `OperatorRegistry.check_complete` verifies that every `OpKind` member has
  a registered operator. It runs once the operator modules are imported, so
  adding a kind without an implementation fails at import time.

Usage example
-------------
Registering an operator:

    @OperatorRegistry.register(OpKind.ADD)
    class AddOp(Operator):
        ...

Creating one:

    op = create_operator("Add")

Notes
-----
Unknown names raise `UnknownOperatorError`; there is no fallback operator.
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, Type, TypeVar, Union

from ...domain._errors import UnknownOperatorError
from ...domain._operator import Operator, OpKind

OpT = TypeVar("OpT", bound=Type[Operator])


class OperatorRegistry:
    """
    Class-level registry of operator implementations keyed by `OpKind`.
    """

    OPERATORS: ClassVar[Dict[OpKind, Type[Operator]]] = {}

    @classmethod
    def register(
        cls, kind: OpKind, *, overwrite: bool = False
    ) -> Callable[[OpT], OpT]:
        """
        Decorator to register an operator class for `kind`.

        Parameters
        ----------
        kind : OpKind
            Operator kind implemented by the decorated class.
        overwrite : bool, optional
            If False (default), raises if `kind` is already registered.
        """
        if not isinstance(kind, OpKind):
            raise TypeError(f"kind must be an OpKind, got {type(kind)!r}")

        def decorator(op_cls: OpT) -> OpT:
            if not overwrite and kind in cls.OPERATORS:
                raise ValueError(f"Operator already registered: {kind.value!r}")
            op_cls.kind = kind
            cls.OPERATORS[kind] = op_cls
            return op_cls

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """Return registered operator names (sorted)."""
        return tuple(sorted(k.value for k in cls.OPERATORS))

    @classmethod
    def resolve(cls, name: Union[str, OpKind]) -> OpKind:
        """
        Resolve a canonical name (or an `OpKind`) to its registered kind.

        Raises
        ------
        UnknownOperatorError
            If no operator is registered under `name`.
        """
        if isinstance(name, OpKind):
            kind = name
        else:
            try:
                kind = OpKind(name)
            except ValueError:
                raise UnknownOperatorError(str(name), cls.available()) from None
        if kind not in cls.OPERATORS:
            raise UnknownOperatorError(kind.value, cls.available())
        return kind

    @classmethod
    def create(cls, name: Union[str, OpKind]) -> Operator:
        """
        Construct a new operator instance for `name`.

        Parameters
        ----------
        name : str | OpKind
            Canonical operator name (e.g. "MatMul") or kind.

        Returns
        -------
        Operator
            Newly constructed operator.

        Raises
        ------
        UnknownOperatorError
            If `name` is not a registered operator.
        """
        kind = cls.resolve(name)
        return cls.OPERATORS[kind](kind.value)

    @classmethod
    def check_complete(cls) -> None:
        """
        Raise RuntimeError if some `OpKind` has no registered operator.
        """
        missing = [k.value for k in OpKind if k not in cls.OPERATORS]
        if missing:
            raise RuntimeError(
                "No operator registered for: " + ", ".join(sorted(missing))
            )


def create_operator(name: Union[str, OpKind]) -> Operator:
    """Construct a new operator instance for `name` (see `OperatorRegistry.create`)."""
    return OperatorRegistry.create(name)
