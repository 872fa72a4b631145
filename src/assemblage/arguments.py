"""Turn argument specifications into concrete values."""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, Sequence

from assemblage.domain import (
    ArgumentSpec,
    ListArgument,
    Literal,
    Reference,
    ResolvedArgument,
)
from assemblage.errors import ArgumentConversionError, InvalidDefinitionError

if TYPE_CHECKING:
    from assemblage.registry import ComponentRegistry

__all__ = ["ArgumentResolver", "convert_literal", "literal_type"]

logger = logging.getLogger(__name__)

_LITERAL_TYPES: dict[str, type] = {
    "int": int,
    "integer": int,
    "long": int,
    "float": float,
    "double": float,
    "boolean": bool,
    "bool": bool,
    "string": str,
    "str": str,
}


def literal_type(declared_type: Optional[str]) -> type:
    """The Python type a literal of ``declared_type`` converts to.

    Unknown type names fall back to ``str``.
    """
    if declared_type is None:
        return str
    resolved = _LITERAL_TYPES.get(declared_type.strip().lower())
    if resolved is None:
        logger.warning(
            "Unsupported literal type '%s', treating as string", declared_type
        )
        return str
    return resolved


def convert_literal(raw_value: Any, declared_type: Optional[str]) -> Any:
    """Convert a raw definition value to the native value of its declared type.

    Raises:
        ValueError: If the value cannot be converted.
    """
    target = literal_type(declared_type)
    if target is bool:
        return _to_bool(raw_value)
    if target is str:
        return str(raw_value)
    if isinstance(raw_value, bool):
        # bool is an int subtype, but True is not a sensible 1 or 1.0 here
        raise ValueError(f"boolean {raw_value!r} is not a number")
    if target is int and isinstance(raw_value, float):
        if not raw_value.is_integer():
            raise ValueError(f"{raw_value!r} is not an integer")
        return int(raw_value)
    if isinstance(raw_value, str):
        raw_value = raw_value.strip()
    return target(raw_value)


def _to_bool(raw_value: Any) -> bool:
    if isinstance(raw_value, bool):
        return raw_value
    if isinstance(raw_value, str):
        lowered = raw_value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ValueError(f"{raw_value!r} is not 'true' or 'false'")


class ArgumentResolver:
    """Resolve a definition's arguments, recursing into the registry for references.

    Arguments are resolved depth first, left to right. Referenced components
    are memoized by the registry, so each is built at most once.
    """

    def __init__(self, registry: "ComponentRegistry"):
        self._registry = registry

    def resolve(
        self, component_id: str, arguments: Sequence[ArgumentSpec]
    ) -> list[ResolvedArgument]:
        """Resolve ``arguments`` of the component ``component_id``.

        Returns:
            One ``ResolvedArgument`` per specification, in order.

        Raises:
            ArgumentConversionError: If a literal cannot be converted.
            MissingTypeInfoError: If a reference resolves to ``None`` and its
                definition declares no type.
            DependencyError: Any error raised while building a reference.
        """
        if arguments:
            logger.debug(
                "Resolving %d argument(s) for component '%s'",
                len(arguments),
                component_id,
            )
        return [
            self._resolve_argument(component_id, index, argument)
            for index, argument in enumerate(arguments)
        ]

    def _resolve_argument(
        self, component_id: str, index: int, argument: ArgumentSpec
    ) -> ResolvedArgument:
        if isinstance(argument, Reference):
            return self._resolve_reference(component_id, argument)
        if isinstance(argument, Literal):
            value = self._convert(
                component_id, index, argument.raw_value, argument.declared_type
            )
            return ResolvedArgument(value, literal_type(argument.declared_type))
        if isinstance(argument, ListArgument):
            values = self._resolve_list(component_id, index, argument)
            return ResolvedArgument(values, list)
        raise InvalidDefinitionError(
            f"argument {index} is not a reference, literal or list: {argument!r}",
            component_id,
        )

    def _resolve_reference(
        self, component_id: str, reference: Reference
    ) -> ResolvedArgument:
        logger.debug(
            "Resolving reference '%s' for component '%s'", reference.id, component_id
        )
        value = self._registry.get_component(reference.id)
        if value is not None:
            return ResolvedArgument(value, type(value))
        return ResolvedArgument(None, self._registry.type_of(reference.id, component_id))

    def _resolve_list(
        self, component_id: str, index: int, argument: ListArgument
    ) -> list:
        values = []
        for element_index, item in enumerate(argument.items):
            if isinstance(item, Reference):
                values.append(self._registry.get_component(item.id))
            elif isinstance(item, Literal):
                values.append(
                    self._convert(
                        component_id,
                        index,
                        item.raw_value,
                        item.declared_type,
                        element_index,
                    )
                )
            elif isinstance(item, Mapping):
                logger.warning(
                    "List element %d of argument %d for component '%s' is neither "
                    "a reference nor a value, passing it through unchanged",
                    element_index,
                    index,
                    component_id,
                )
                values.append(item)
            else:
                values.append(
                    self._convert(
                        component_id, index, item, argument.item_type, element_index
                    )
                )
        if not values:
            logger.warning(
                "List argument %d for component '%s' is empty", index, component_id
            )
        return values

    @staticmethod
    def _convert(
        component_id: str,
        index: int,
        raw_value: Any,
        declared_type: Optional[str],
        element_index: Optional[int] = None,
    ) -> Any:
        try:
            return convert_literal(raw_value, declared_type)
        except (TypeError, ValueError) as e:
            raise ArgumentConversionError(
                component_id, index, raw_value, declared_type or "string", element_index
            ) from e
