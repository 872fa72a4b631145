"""High level entry points for constructing registries."""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional, Union

from assemblage.domain import ComponentDefinition
from assemblage.errors import InvalidDefinitionError
from assemblage.manifest import load_document, merge_documents, parse_definitions
from assemblage.registry import ComponentRegistry

__all__ = ["make_registry", "load_registry"]

DefinitionSource = Union[
    Mapping[str, Any],
    Iterable[ComponentDefinition],
]


def make_registry(
    source: DefinitionSource = (),
    singletons: Optional[Mapping[str, Any]] = None,
) -> ComponentRegistry:
    """Construct a :class:`ComponentRegistry` from definitions or a document.

    Args:
        source: One of a mapping of ids to :class:`ComponentDefinition`, an
            iterable of definitions, or a definition document (a mapping with
            a ``components`` list).
        singletons: Optional mapping of ids to existing instances, registered
            before anything is built.

    Returns:
        The registry. Nothing is built until a component is requested.

    Raises:
        InvalidDefinitionError: If a document is malformed or a mapping mixes
            definitions with other values.

    Example:
        >>> registry = make_registry(
        ...     {"components": [{"id": "n", "class": "int", "constructorArgs": [
        ...         {"value": "5", "type": "int"}]}]},
        ...     singletons={"config": {"debug": True}},
        ... )
        >>> registry.get_component("n")
        5
    """
    if isinstance(source, Mapping):
        definitions = _definitions_from_mapping(source)
    else:
        definitions = {definition.id: definition for definition in source}

    registry = ComponentRegistry(definitions)
    for component_id, instance in (singletons or {}).items():
        registry.register_singleton(component_id, instance)
    return registry


def load_registry(
    *paths: Union[str, Path],
    singletons: Optional[Mapping[str, Any]] = None,
) -> ComponentRegistry:
    """Load definition documents, merge them in order and build a registry.

    Later documents override earlier ones, so the usual call is
    ``load_registry(defaults_path, user_path)``.

    Args:
        paths: JSON or YAML definition documents.
        singletons: Optional mapping of ids to existing instances.

    Raises:
        InvalidDefinitionError: If a document cannot be read or is malformed.
    """
    document: dict[str, Any] = {}
    for path in paths:
        document = merge_documents(document, load_document(path))
    return make_registry(document, singletons)


def _definitions_from_mapping(
    source: Mapping[str, Any],
) -> dict[str, ComponentDefinition]:
    if all(isinstance(value, ComponentDefinition) for value in source.values()):
        definitions = dict(source)
        for component_id, definition in definitions.items():
            if component_id != definition.id:
                raise InvalidDefinitionError(
                    f"Definition registered under '{component_id}' has id "
                    f"'{definition.id}'"
                )
        return definitions
    if any(isinstance(value, ComponentDefinition) for value in source.values()):
        raise InvalidDefinitionError(
            "A definition mapping must contain only ComponentDefinition values"
        )
    return parse_definitions(source)
