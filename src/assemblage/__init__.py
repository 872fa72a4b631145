"""Assemblage component resolution engine.

Assemblage builds an application's object graph (LLM provider factories,
tools, agents, services) from declarative definitions. Each definition names a
type and says how to construct it: through a constructor, a static factory
method on the type, or a method on another component. Arguments are typed
literals or references to other components, which are built recursively and
kept as one instance per id.

Key Features:
    - Definitions loaded from JSON or YAML documents, defaults merged with overrides
    - Constructor, static factory and instance factory strategies
    - Overload selection using ``typing.overload`` signatures
    - Circular dependency detection reporting the full chain of ids
    - Pre-registration of existing instances

Basic Usage:
    >>> from assemblage.builders import make_registry
    >>>
    >>> registry = make_registry({"components": [
    ...     {"id": "holder", "class": "myapp.IntHolder",
    ...      "constructorArgs": [{"value": 5, "type": "int"}]},
    ...     {"id": "wrapper", "class": "myapp.Wrapper",
    ...      "constructorArgs": [{"ref": "holder"}]},
    ... ]})
    >>> registry.get_component("wrapper").holder.value
    5

The package consists of several modules:
    - registry: The singleton cache and ``get_component`` entry point
    - component_builder: Strategy dispatch and invocation
    - arguments: Literal conversion and reference resolution
    - matching: Constructor and method selection by argument types
    - manifest: Definition document parsing, loading and merging
    - builders: High-level registry construction functions
    - domain: Core domain models (ComponentDefinition, argument specifications)
    - errors: Framework-specific exceptions
"""

from assemblage.builders import load_registry, make_registry
from assemblage.domain import (
    ComponentDefinition,
    ListArgument,
    Literal,
    Reference,
    Strategy,
)
from assemblage.registry import ComponentRegistry

__all__ = [
    "ComponentDefinition",
    "ComponentRegistry",
    "ListArgument",
    "Literal",
    "Reference",
    "Strategy",
    "load_registry",
    "make_registry",
]
