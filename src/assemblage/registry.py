"""The singleton cache and the entry point for obtaining components."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from assemblage.component_builder import ComponentBuilder
from assemblage.domain import ComponentDefinition
from assemblage.errors import (
    CircularDependencyError,
    DefinitionNotFoundError,
    MissingTypeInfoError,
)
from assemblage.type_names import resolve_type

__all__ = ["ComponentRegistry"]

logger = logging.getLogger(__name__)

Definitions = Union[Mapping[str, ComponentDefinition], Iterable[ComponentDefinition]]


class ComponentRegistry:
    """Builds components on demand and keeps one instance per id.

    Each id is at any moment either not yet built, in progress, or cached.
    A failed build leaves the id not yet built, so a later request retries
    from scratch; components cached before the failure stay cached.

    The registry is meant to be used from a single thread while an
    application boots. Callers that need to share it between threads must
    guard every call with one lock.

    Example:
        >>> registry = ComponentRegistry([
        ...     ComponentDefinition("greeting", "str", arguments=(Literal("hi"),)),
        ... ])
        >>> registry.get_component("greeting")
        'hi'
    """

    def __init__(self, definitions: Definitions = ()):
        if isinstance(definitions, Mapping):
            self._definitions: dict[str, ComponentDefinition] = dict(definitions)
        else:
            self._definitions = {
                definition.id: definition for definition in definitions
            }
        self._registered_types: dict[str, type] = {}
        self._cache: dict[str, Any] = {}
        # Insertion order is the order creation started in.
        self._in_progress: dict[str, None] = {}
        self._builder = ComponentBuilder(self)
        logger.debug(
            "Component registry initialised with %d definition(s)",
            len(self._definitions),
        )

    def get_component(self, component_id: str) -> Any:
        """Return the component with the given id, building it if necessary.

        Args:
            component_id: The id of the component.

        Returns:
            The cached instance, or a newly built one that is cached before it
            is returned.

        Raises:
            DefinitionNotFoundError: If there is no definition for the id.
            CircularDependencyError: If the id is already being built further
                up the current call chain.
            DependencyError: Any other error raised while building.
        """
        if component_id in self._cache:
            logger.debug("Returning cached instance for '%s'", component_id)
            return self._cache[component_id]

        if component_id in self._in_progress:
            raise CircularDependencyError(
                component_id, [*self._in_progress, component_id]
            )

        definition = self._definitions.get(component_id)
        if definition is None:
            raise DefinitionNotFoundError(component_id, list(self._definitions))

        self._in_progress[component_id] = None
        logger.debug("Starting creation of component '%s'", component_id)
        try:
            instance = self._builder.build(definition)
            if component_id in self._cache:
                logger.debug(
                    "'%s' was registered while it was being built, keeping the "
                    "registered instance",
                    component_id,
                )
                return self._cache[component_id]
            self._cache[component_id] = instance
            logger.info("Created component '%s'", component_id)
            return instance
        finally:
            self._in_progress.pop(component_id, None)
            logger.debug("Finished creation attempt for component '%s'", component_id)

    def register_singleton(self, component_id: str, instance: Any) -> None:
        """Bind an existing instance to an id.

        The instance replaces any cached one, and is returned by
        ``get_component`` without any definition for the id being invoked.

        Args:
            component_id: The id to bind.
            instance: The instance, which may be ``None``.
        """
        if component_id in self._cache:
            logger.warning("Overwriting existing instance for '%s'", component_id)
        self._cache[component_id] = instance
        if component_id in self._definitions or instance is None:
            self._registered_types.pop(component_id, None)
        else:
            self._registered_types[component_id] = type(instance)
        logger.debug("Registered instance for '%s'", component_id)

    def reset(self) -> None:
        """Discard every built or registered instance.

        Definitions are kept, so later requests build components afresh.
        """
        self._cache.clear()
        self._in_progress.clear()
        self._registered_types.clear()
        logger.debug("Component cache cleared")

    def is_cached(self, component_id: str) -> bool:
        return component_id in self._cache

    def type_of(self, component_id: str, requested_by: Optional[str] = None) -> type:
        """Return the type of the component with the given id.

        The runtime type of the cached instance is preferred; for ``None`` or
        unbuilt components the declared type of the definition is used.

        Args:
            component_id: The id to look up.
            requested_by: The component whose argument is being typed, used
                for error reporting.

        Raises:
            MissingTypeInfoError: If no type can be determined.
            TypeNotFoundError: If the declared type does not exist.
        """
        instance = self._cache.get(component_id)
        if instance is not None:
            return type(instance)
        if component_id in self._registered_types:
            return self._registered_types[component_id]

        definition = self._definitions.get(component_id)
        if definition is None or not definition.target_type:
            if requested_by is None:
                raise MissingTypeInfoError(component_id)
            raise MissingTypeInfoError(requested_by, component_id)
        return resolve_type(definition.target_type, component_id)
