"""Look up types by name and compute the names used in definition documents."""

import builtins
import importlib
from typing import Any, Optional

from assemblage.errors import TypeNotFoundError

__all__ = ["resolve_type", "qualified_name"]


def qualified_name(target: Any) -> str:
    """Return the dotted name under which ``resolve_type`` finds ``target``.

    Example:
        >>> qualified_name(collections.OrderedDict)  # "collections.OrderedDict"
        >>> qualified_name(int)                      # "int"
    """
    if target.__module__ == "builtins":
        return target.__qualname__
    return f"{target.__module__}.{target.__qualname__}"


def resolve_type(type_name: str, component_id: Optional[str] = None) -> type:
    """Find a type by its name.

    Accepts ``package.module.Name``, ``package.module:Name`` and nested
    classes (``package.module.Outer.Inner``). Bare names such as ``str`` are
    looked up in ``builtins``.

    Args:
        type_name: The name of the type.
        component_id: The component being built, used for error reporting.

    Raises:
        TypeNotFoundError: If no module or attribute matches, or the name
            refers to something that is not a type.
    """
    name = type_name.strip()
    if not name:
        raise TypeNotFoundError(type_name, component_id)

    if ":" in name:
        module_name, _, attribute_path = name.partition(":")
        candidates = [(module_name, attribute_path)]
    else:
        parts = name.split(".")
        candidates = [
            (".".join(parts[:split]), ".".join(parts[split:]))
            for split in range(len(parts) - 1, 0, -1)
        ]
        candidates.append(("builtins", name))

    for module_name, attribute_path in candidates:
        try:
            module = _import_module(module_name)
        except Exception as e:
            # Also covers errors raised by module-level code.
            raise TypeNotFoundError(type_name, component_id) from e
        if module is None:
            continue
        value = _walk_attributes(module, attribute_path)
        if isinstance(value, type):
            return value

    raise TypeNotFoundError(type_name, component_id)


def _import_module(module_name: str) -> Optional[Any]:
    if module_name == "builtins":
        return builtins
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        # Only a missing module for this exact name means "try a shorter
        # prefix"; a missing import inside the module is a real failure.
        if e.name is not None and not (
            module_name == e.name or module_name.startswith(e.name + ".")
        ):
            raise
        return None


def _walk_attributes(target: Any, attribute_path: str) -> Optional[Any]:
    for attribute in attribute_path.split("."):
        target = getattr(target, attribute, None)
        if target is None:
            return None
    return target
