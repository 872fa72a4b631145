"""Instantiate components from their definitions."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Sequence

from assemblage.arguments import ArgumentResolver
from assemblage.domain import ComponentDefinition, ResolvedArgument, Strategy
from assemblage.errors import (
    DependencyError,
    InvalidDefinitionError,
    InvocationFailureError,
    StrategyMismatchError,
    TypeNotFoundError,
)
from assemblage.matching import MemberKind, find_constructor, find_method, member_kind
from assemblage.type_names import qualified_name, resolve_type

if TYPE_CHECKING:
    from assemblage.registry import ComponentRegistry

__all__ = ["ComponentBuilder"]

logger = logging.getLogger(__name__)


class ComponentBuilder:
    """Build a component by dispatching on its definition's strategy.

    Instance factories take precedence over static factories, which take
    precedence over constructors.
    """

    def __init__(self, registry: "ComponentRegistry"):
        self._registry = registry
        self._arguments = ArgumentResolver(registry)

    def build(self, definition: ComponentDefinition) -> Any:
        """Resolve the definition's arguments and invoke the matching candidate.

        Args:
            definition: The definition of the component being built.

        Returns:
            The newly created component.

        Raises:
            TypeNotFoundError: If the target type is missing or unknown.
            NoMatchingCandidateError: If no constructor or method accepts the
                resolved arguments.
            StrategyMismatchError: If a static factory names an instance method.
            InvocationFailureError: If the constructor or method raises.
        """
        if definition.strategy is Strategy.INSTANCE_FACTORY:
            return self._build_with_instance_factory(definition)
        if definition.strategy is Strategy.STATIC_FACTORY:
            return self._build_with_static_factory(definition)
        return self._build_with_constructor(definition)

    def _build_with_instance_factory(self, definition: ComponentDefinition) -> Any:
        owner_id = definition.factory_owner_id
        method_name = definition.factory_method_name
        if not owner_id or not method_name:
            raise InvalidDefinitionError(
                "instance factories need both a factory owner and a factory method",
                definition.id,
            )
        logger.debug(
            "Building '%s' with instance factory %s.%s",
            definition.id,
            owner_id,
            method_name,
        )
        owner = self._registry.get_component(owner_id)
        arguments = self._arguments.resolve(definition.id, definition.arguments)
        find_method(type(owner), method_name, _types_of(arguments))
        return _invoke(definition.id, getattr(owner, method_name), arguments)

    def _build_with_static_factory(self, definition: ComponentDefinition) -> Any:
        target = self._target_type(definition)
        method_name = definition.factory_method_name
        if not method_name:
            raise InvalidDefinitionError(
                "static factories need a factory method", definition.id
            )
        logger.debug(
            "Building '%s' with static factory %s.%s",
            definition.id,
            qualified_name(target),
            method_name,
        )
        arguments = self._arguments.resolve(definition.id, definition.arguments)
        if member_kind(target, method_name) == MemberKind.INSTANCE:
            raise StrategyMismatchError(
                definition.id,
                f"factory method '{method_name}' of {qualified_name(target)} "
                "is not a staticmethod or classmethod",
            )
        find_method(target, method_name, _types_of(arguments))
        return _invoke(definition.id, getattr(target, method_name), arguments)

    def _build_with_constructor(self, definition: ComponentDefinition) -> Any:
        target = self._target_type(definition)
        logger.debug(
            "Building '%s' with constructor of %s", definition.id, qualified_name(target)
        )
        arguments = self._arguments.resolve(definition.id, definition.arguments)
        find_constructor(target, _types_of(arguments))
        return _invoke(definition.id, target, arguments)

    @staticmethod
    def _target_type(definition: ComponentDefinition) -> type:
        if not definition.target_type:
            raise TypeNotFoundError(None, definition.id)
        return resolve_type(definition.target_type, definition.id)


def _types_of(arguments: Sequence[ResolvedArgument]) -> list[Any]:
    return [argument.type for argument in arguments]


def _invoke(
    component_id: str, target: Callable, arguments: Sequence[ResolvedArgument]
) -> Any:
    values = [argument.value for argument in arguments]
    try:
        return target(*values)
    except DependencyError:
        raise
    except Exception as e:
        raise InvocationFailureError(component_id, e) from e
