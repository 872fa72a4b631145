"""Exceptions raised while resolving and building components."""

from typing import Any, Optional, Sequence

__all__ = [
    "DependencyError",
    "DefinitionNotFoundError",
    "CircularDependencyError",
    "TypeNotFoundError",
    "NoMatchingCandidateError",
    "StrategyMismatchError",
    "ArgumentConversionError",
    "InvocationFailureError",
    "MissingTypeInfoError",
    "InvalidDefinitionError",
]


class DependencyError(Exception):
    """Raised when a component cannot be resolved, built or defined."""

    pass


class DefinitionNotFoundError(DependencyError):
    def __init__(self, component_id: str, known_ids: Sequence[str] = ()):
        self.component_id = component_id
        message = f"Component definition not found for id '{component_id}'"
        if known_ids:
            message += f". Available definitions: {sorted(known_ids)}"
        super().__init__(message)


class CircularDependencyError(DependencyError):
    """Raised when a component is requested while it is still being built.

    Attributes:
        component_id: The id that was requested a second time.
        chain: Every id in progress at the point of detection, in the order
            creation started, followed by ``component_id``.
    """

    def __init__(self, component_id: str, chain: Sequence[str]):
        self.component_id = component_id
        self.chain = list(chain)
        super().__init__(
            f"Circular dependency detected for component '{component_id}': "
            + " -> ".join(self.chain)
        )


class TypeNotFoundError(DependencyError):
    def __init__(self, type_name: Optional[str], component_id: Optional[str] = None):
        self.type_name = type_name
        self.component_id = component_id
        if type_name is None:
            message = f"No type name given for component '{component_id}'"
        else:
            message = f"Type '{type_name}' could not be found"
            if component_id is not None:
                message += f" (component '{component_id}')"
        super().__init__(message)


class NoMatchingCandidateError(DependencyError):
    def __init__(
        self, type_name: str, member_name: Optional[str], arg_types: Sequence[Any]
    ):
        self.type_name = type_name
        self.member_name = member_name
        self.arg_types = tuple(arg_types)
        described = ", ".join(getattr(t, "__name__", repr(t)) for t in self.arg_types)
        target = (
            f"constructor of {type_name}"
            if member_name is None
            else f"method '{member_name}' of {type_name}"
        )
        super().__init__(f"No {target} accepts arguments ({described})")


class StrategyMismatchError(DependencyError):
    def __init__(self, component_id: str, reason: str):
        self.component_id = component_id
        self.reason = reason
        super().__init__(f"Component '{component_id}': {reason}")


class ArgumentConversionError(DependencyError):
    """Raised when a literal argument cannot be converted to its declared type."""

    def __init__(
        self,
        component_id: str,
        arg_index: int,
        raw_value: Any,
        target_type: str,
        element_index: Optional[int] = None,
    ):
        self.component_id = component_id
        self.arg_index = arg_index
        self.raw_value = raw_value
        self.target_type = target_type
        self.element_index = element_index
        position = f"argument {arg_index}"
        if element_index is not None:
            position += f", list element {element_index}"
        super().__init__(
            f"Cannot convert {raw_value!r} to {target_type} "
            f"for {position} of component '{component_id}'"
        )


class InvocationFailureError(DependencyError):
    def __init__(self, component_id: str, cause: BaseException):
        self.component_id = component_id
        self.cause = cause
        super().__init__(
            f"Error instantiating component '{component_id}': "
            f"{type(cause).__name__}: {cause}"
        )


class MissingTypeInfoError(DependencyError):
    """Raised when the type of a ``None`` dependency cannot be determined."""

    def __init__(self, component_id: str, reference_id: Optional[str] = None):
        self.component_id = component_id
        self.reference_id = reference_id
        if reference_id is None:
            message = f"No type information available for component '{component_id}'"
        else:
            message = (
                f"Cannot determine the type of null reference '{reference_id}' "
                f"used by component '{component_id}': its definition has no class"
            )
        super().__init__(message)


class InvalidDefinitionError(DependencyError):
    def __init__(self, message: str, component_id: Optional[str] = None):
        self.component_id = component_id
        if component_id is not None:
            message = f"Invalid definition for component '{component_id}': {message}"
        super().__init__(message)
