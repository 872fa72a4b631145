"""Domain models describing how components are built."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

__all__ = [
    "Strategy",
    "Reference",
    "Literal",
    "ListArgument",
    "ArgumentSpec",
    "ComponentDefinition",
    "ResolvedArgument",
]


class Strategy(Enum):
    """The mechanism used to instantiate a component."""

    CONSTRUCTOR = "constructor"
    STATIC_FACTORY = "static_factory"
    INSTANCE_FACTORY = "instance_factory"


@dataclass(frozen=True)
class Reference:
    """An argument whose value is another component.

    Attributes:
        id: The id of the referenced component.
    """

    id: str


@dataclass(frozen=True)
class Literal:
    """An argument whose value is a constant given in the definition.

    Attributes:
        raw_value: The value as it appears in the definition document.
        declared_type: One of ``int``, ``long``, ``float``, ``double``,
            ``boolean`` or ``string``. Unknown names are treated as ``string``.
    """

    raw_value: Any
    declared_type: str = "string"


@dataclass(frozen=True)
class ListArgument:
    """An argument whose value is a list of references, literals or raw values.

    Attributes:
        items: The list items. ``Reference`` and ``Literal`` items are resolved;
            any other item is converted using ``item_type`` unless it is a
            mapping, which is passed through unchanged.
        item_type: Declared type used for raw items.
    """

    items: tuple
    item_type: str = "string"


ArgumentSpec = Union[Reference, Literal, ListArgument]


@dataclass(frozen=True)
class ComponentDefinition:
    """Describes how to build a single component.

    Attributes:
        id: Unique key of the component in the definition set.
        target_type: Dotted name of the type to construct. Optional for
            instance factories, where it only documents the produced type.
        strategy: Which instantiation mechanism to use.
        factory_owner_id: For instance factories, the id of the component
            whose method is invoked.
        factory_method_name: For static and instance factories, the name of
            the method to invoke.
        arguments: Ordered argument specifications.
    """

    id: str
    target_type: Optional[str] = None
    strategy: Strategy = Strategy.CONSTRUCTOR
    factory_owner_id: Optional[str] = None
    factory_method_name: Optional[str] = None
    arguments: tuple[ArgumentSpec, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedArgument:
    """A concrete argument value together with the type used for matching."""

    value: Any
    type: Any
