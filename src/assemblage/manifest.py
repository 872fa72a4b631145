"""
Parsing of definition documents into component definitions.

A definition document is a mapping (usually loaded from JSON or YAML) with a
top-level ``components`` list. Each entry describes one component:

.. code-block:: yaml

    components:
      - id: holder
        class: myapp.values.IntHolder
        constructorArgs:
          - {value: 5, type: int}
      - id: wrapper
        class: myapp.values.Wrapper
        constructorArgs:
          - {ref: holder}
      - id: client
        factoryBean: client_factory
        factoryMethod: create
        factoryArgs:
          - {list: [a, b], listType: string}

An entry uses ``factoryBean`` and ``factoryMethod`` for an instance factory,
``staticFactoryMethod`` for a static factory on ``class``, and otherwise the
constructor of ``class``.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import yaml

from assemblage.domain import (
    ArgumentSpec,
    ComponentDefinition,
    ListArgument,
    Literal,
    Reference,
    Strategy,
)
from assemblage.errors import InvalidDefinitionError

__all__ = [
    "COMPONENTS_KEY",
    "parse_definitions",
    "parse_component",
    "parse_argument",
    "load_document",
    "merge_documents",
]

logger = logging.getLogger(__name__)

COMPONENTS_KEY = "components"


def parse_definitions(document: Mapping[str, Any]) -> dict[str, ComponentDefinition]:
    """
    Build the definition set described by a document.

    Args:
        document: A mapping with a ``components`` list. A document without
            the key describes no components.

    Returns:
        A dictionary mapping component ids to definitions, in document order.

    Raises:
        InvalidDefinitionError: If the document or any entry is malformed, or
            two entries share an id.
    """
    entries = document.get(COMPONENTS_KEY, [])
    if not isinstance(entries, list):
        raise InvalidDefinitionError(
            f"'{COMPONENTS_KEY}' must be a list, got {type(entries).__name__}"
        )

    definitions_by_id: dict[str, ComponentDefinition] = {}
    for entry in entries:
        definition = parse_component(entry)
        if definition.id in definitions_by_id:
            raise InvalidDefinitionError(
                f"Duplicate component id '{definition.id}' "
                f"in {[d.id for d in definitions_by_id.values()]}"
            )
        definitions_by_id[definition.id] = definition

    logger.debug("Parsed %d component definition(s)", len(definitions_by_id))
    return definitions_by_id


def parse_component(entry: Mapping[str, Any]) -> ComponentDefinition:
    """Build one definition from a document entry."""
    if not isinstance(entry, Mapping):
        raise InvalidDefinitionError(f"Component entry must be a mapping: {entry!r}")
    component_id = entry.get("id")
    if not isinstance(component_id, str) or not component_id:
        raise InvalidDefinitionError(f"Component entry has no 'id': {dict(entry)!r}")

    target_type = entry.get("class")
    if target_type is not None and not isinstance(target_type, str):
        raise InvalidDefinitionError("'class' must be a string", component_id)

    if "factoryBean" in entry:
        if "factoryMethod" not in entry:
            raise InvalidDefinitionError(
                "'factoryBean' requires a 'factoryMethod'", component_id
            )
        return ComponentDefinition(
            component_id,
            target_type,
            Strategy.INSTANCE_FACTORY,
            factory_owner_id=_required_string(entry, "factoryBean", component_id),
            factory_method_name=_required_string(entry, "factoryMethod", component_id),
            arguments=_parse_arguments(entry.get("factoryArgs"), component_id),
        )

    if "staticFactoryMethod" in entry:
        return ComponentDefinition(
            component_id,
            target_type,
            Strategy.STATIC_FACTORY,
            factory_method_name=_required_string(
                entry, "staticFactoryMethod", component_id
            ),
            arguments=_parse_arguments(entry.get("staticFactoryArgs"), component_id),
        )

    return ComponentDefinition(
        component_id,
        target_type,
        Strategy.CONSTRUCTOR,
        arguments=_parse_arguments(entry.get("constructorArgs"), component_id),
    )


def parse_argument(
    argument: Any, component_id: str, index: int = 0
) -> ArgumentSpec:
    """Build one argument specification from its document form.

    ``{"ref": id}`` is a reference, ``{"value": v, "type": t}`` a literal and
    ``{"list": [...], "listType": t}`` a list.
    """
    if not isinstance(argument, Mapping):
        raise InvalidDefinitionError(
            f"argument {index} must be a mapping, got {argument!r}", component_id
        )
    if "ref" in argument:
        return Reference(_required_string(argument, "ref", component_id))
    if "value" in argument:
        return Literal(argument["value"], argument.get("type") or "string")
    if "list" in argument:
        items = argument["list"]
        if not isinstance(items, list):
            raise InvalidDefinitionError(
                f"'list' of argument {index} must be a list", component_id
            )
        item_type = argument.get("listType") or "string"
        return ListArgument(
            tuple(_parse_list_item(item, item_type, component_id) for item in items),
            item_type,
        )
    raise InvalidDefinitionError(
        f"argument {index} must have 'ref', 'value' or 'list': {dict(argument)!r}",
        component_id,
    )


def _parse_list_item(item: Any, item_type: str, component_id: str) -> Any:
    if isinstance(item, Mapping):
        if "ref" in item:
            return Reference(_required_string(item, "ref", component_id))
        if "value" in item:
            return Literal(item["value"], item.get("type") or item_type)
    return item


def _parse_arguments(
    arguments: Optional[Sequence[Any]], component_id: str
) -> tuple[ArgumentSpec, ...]:
    if arguments is None:
        return ()
    if not isinstance(arguments, list):
        raise InvalidDefinitionError("arguments must be a list", component_id)
    return tuple(
        parse_argument(argument, component_id, index)
        for index, argument in enumerate(arguments)
    )


def _required_string(entry: Mapping[str, Any], key: str, component_id: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidDefinitionError(f"'{key}' must be a non-empty string", component_id)
    return value


def load_document(path: Union[str, Path]) -> dict[str, Any]:
    """
    Read a definition document from a JSON or YAML file.

    Args:
        path: A ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        The parsed document; an empty YAML file yields an empty document.

    Raises:
        InvalidDefinitionError: If the file cannot be read, its type is not
            supported or its content is not a mapping.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidDefinitionError(f"Cannot read {path}: {e}") from e
    try:
        if suffix == ".json":
            document = json.loads(content)
        elif suffix in (".yaml", ".yml"):
            document = yaml.safe_load(content) or {}
        else:
            raise InvalidDefinitionError(f"Unsupported definition file type: {path}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidDefinitionError(f"Cannot parse {path}: {e}") from e

    if not isinstance(document, dict):
        raise InvalidDefinitionError(f"{path} does not contain a mapping")
    logger.debug("Loaded definition document %s", path)
    return document


def merge_documents(
    defaults: Mapping[str, Any], overrides: Mapping[str, Any]
) -> dict[str, Any]:
    """
    Overlay ``overrides`` on ``defaults``.

    Top-level keys of ``overrides`` replace those of ``defaults``. The
    ``components`` list is the exception: it replaces the default list only
    when it is a non-empty list, so an override file without components keeps
    the default ones.
    """
    merged = dict(defaults)
    for key, value in overrides.items():
        if key == COMPONENTS_KEY and not (isinstance(value, list) and value):
            logger.debug("Override has no components, keeping the defaults")
            continue
        merged[key] = value
    return merged
