"""Select the constructor or method that accepts a vector of argument types.

Python has a single implementation per callable, so "overloads" are the
signatures declared with :func:`typing.overload`. When a callable declares
overloads those signatures are the candidates, in declaration order;
otherwise the callable's own signature is the only candidate.

Matching first looks for an exact match (parameter types identical to the
argument types). Failing that, every candidate whose parameters accept the
arguments is considered and the most specific one wins, ties going to the
earliest declared.
"""

import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from assemblage.errors import NoMatchingCandidateError
from assemblage.type_names import qualified_name

__all__ = [
    "Candidate",
    "MemberKind",
    "is_assignable",
    "constructor_candidates",
    "method_candidates",
    "member_kind",
    "select_candidate",
    "find_constructor",
    "find_method",
]

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

# Python's counterpart of primitive/wrapper equivalence: the implicit numeric
# promotions a type checker allows.
_NUMERIC_PROMOTIONS: dict[type, tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}


class MemberKind:
    STATIC = "static"
    CLASS = "class"
    INSTANCE = "instance"


@dataclass(frozen=True)
class Candidate:
    """A single callable signature that arguments can be matched against.

    Attributes:
        parameter_types: Annotated types of the positional parameters, with
            ``Any`` for unannotated ones.
        required: How many leading positional parameters have no default.
        variadic_type: Annotation of ``*args``, or ``None`` if absent.
        signature: The signature as declared, for diagnostics.
        positional: False when a required keyword-only parameter makes the
            callable impossible to invoke with positional arguments alone.
    """

    parameter_types: tuple[Any, ...]
    required: int
    variadic_type: Optional[Any]
    signature: Optional[inspect.Signature]
    positional: bool = True

    def accepts(self, arg_types: Sequence[Any]) -> bool:
        if not self.positional:
            return False
        if len(arg_types) < self.required:
            return False
        if len(arg_types) > len(self.parameter_types) and self.variadic_type is None:
            return False
        return all(
            is_assignable(arg_type, self._parameter_type(index))
            for index, arg_type in enumerate(arg_types)
        )

    def is_exact(self, arg_types: Sequence[Any]) -> bool:
        return (
            self.positional
            and self.variadic_type is None
            and len(arg_types) == len(self.parameter_types)
            and all(a is p for a, p in zip(arg_types, self.parameter_types))
        )

    def is_more_specific_than(self, other: "Candidate", arity: int) -> bool:
        """Whether each of this candidate's parameter types fits the other's."""
        return all(
            _is_narrower(self._parameter_type(index), other._parameter_type(index))
            for index in range(arity)
        )

    def _parameter_type(self, index: int) -> Any:
        if index < len(self.parameter_types):
            return self.parameter_types[index]
        return self.variadic_type

    def __str__(self) -> str:
        return str(self.signature) if self.signature is not None else "(*args)"


_PERMISSIVE = Candidate((), 0, Any, None)


def is_assignable(arg_type: Any, parameter_type: Any) -> bool:
    """Whether an ``arg_type`` value may be passed for a ``parameter_type`` parameter."""
    if parameter_type is Any or parameter_type is object:
        return True
    if parameter_type is None or parameter_type is type(None):
        return arg_type is type(None)

    origin = typing.get_origin(parameter_type)
    if origin is typing.Annotated:
        return is_assignable(arg_type, typing.get_args(parameter_type)[0])
    if origin is typing.Union or isinstance(parameter_type, types.UnionType):
        return any(
            is_assignable(arg_type, member) for member in typing.get_args(parameter_type)
        )
    if origin is typing.Literal:
        return any(arg_type is type(value) for value in typing.get_args(parameter_type))
    if origin is not None:
        return is_assignable(arg_type, origin)

    if isinstance(parameter_type, typing.TypeVar):
        bound = parameter_type.__bound__
        return bound is None or is_assignable(arg_type, bound)
    supertype = getattr(parameter_type, "__supertype__", None)
    if supertype is not None:
        return is_assignable(arg_type, supertype)
    if not isinstance(parameter_type, type) or not isinstance(arg_type, type):
        # String annotations that could not be evaluated and other
        # non-runtime constructs cannot be checked.
        return True

    try:
        if issubclass(arg_type, parameter_type):
            return True
    except TypeError:
        # Protocols that are not runtime_checkable
        return True
    return arg_type in _NUMERIC_PROMOTIONS.get(parameter_type, ())


def _is_narrower(narrow: Any, wide: Any) -> bool:
    if narrow is wide:
        return True
    if isinstance(narrow, type):
        return is_assignable(narrow, wide)
    if wide is Any or wide is object:
        return True
    return False


def _type_hints(func: Callable) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except Exception as e:
        logger.debug("Could not evaluate annotations of %r: %s", func, e)
        return {}


def _candidate_from(
    func: Callable, skip_first: bool, hints_source: Optional[Callable] = None
) -> Candidate:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return _PERMISSIVE

    if hints_source is not None:
        hints = _type_hints(hints_source)
    elif isinstance(func, type):
        # Class-level hints describe attributes, not call parameters.
        hints = {}
    else:
        hints = _type_hints(func)
    parameters = list(signature.parameters.values())
    if skip_first and parameters and parameters[0].kind in _POSITIONAL:
        parameters = parameters[1:]

    parameter_types = []
    required = 0
    variadic_type = None
    for parameter in parameters:
        annotation = hints.get(parameter.name, parameter.annotation)
        if annotation is inspect.Parameter.empty or isinstance(annotation, str):
            annotation = Any
        if parameter.kind in _POSITIONAL:
            parameter_types.append(annotation)
            if parameter.default is inspect.Parameter.empty:
                required = len(parameter_types)
        elif parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            variadic_type = annotation
        elif (
            parameter.kind == inspect.Parameter.KEYWORD_ONLY
            and parameter.default is inspect.Parameter.empty
        ):
            return Candidate((), 0, None, signature, positional=False)

    return Candidate(tuple(parameter_types), required, variadic_type, signature)


def constructor_candidates(target: type) -> list[Candidate]:
    """Signatures accepted by calling ``target``, ``self`` excluded."""
    init = target.__init__
    if inspect.isfunction(init):
        overloads = typing.get_overloads(init)
        if overloads:
            return [_candidate_from(func, skip_first=True) for func in overloads]
        return [_candidate_from(target, skip_first=False, hints_source=init)]
    if init is not object.__init__:
        return [_candidate_from(target, skip_first=False)]
    return [_candidate_from(target, skip_first=False, hints_source=target.__new__)]


def member_kind(owner_type: type, member_name: str) -> Optional[str]:
    """Classify a class attribute as a static, class or instance method.

    Returns ``None`` when the attribute is missing, private or not callable.
    """
    if member_name.startswith("_"):
        return None
    try:
        raw = inspect.getattr_static(owner_type, member_name)
    except AttributeError:
        return None
    if isinstance(raw, staticmethod):
        return MemberKind.STATIC
    if isinstance(raw, classmethod):
        return MemberKind.CLASS

    bound = getattr(owner_type, member_name)
    if not callable(bound):
        return None
    if getattr(bound, "__self__", None) is owner_type:
        return MemberKind.CLASS
    # Anything that binds on instance access takes a receiver.
    if inspect.isfunction(raw) or inspect.ismethoddescriptor(raw):
        return MemberKind.INSTANCE
    return MemberKind.STATIC


def method_candidates(owner_type: type, member_name: str) -> list[Candidate]:
    """Signatures of the named public method, receiver excluded."""
    kind = member_kind(owner_type, member_name)
    if kind is None:
        return []

    raw = inspect.getattr_static(owner_type, member_name)
    func = inspect.unwrap(getattr(raw, "__func__", raw))
    skip_first = kind != MemberKind.STATIC
    overloads = typing.get_overloads(func) if inspect.isfunction(func) else []
    if overloads:
        return [
            _candidate_from(getattr(overload, "__func__", overload), skip_first)
            for overload in overloads
        ]
    if inspect.isfunction(func):
        return [_candidate_from(func, skip_first)]
    if kind == MemberKind.INSTANCE:
        # Method descriptors and partialmethod keep the receiver when read
        # from the class.
        return [_candidate_from(getattr(owner_type, member_name), skip_first=True)]
    return [_candidate_from(getattr(owner_type, member_name), skip_first=False)]


def select_candidate(
    candidates: Sequence[Candidate], arg_types: Sequence[Any]
) -> Optional[Candidate]:
    """Pick the candidate to invoke, or ``None`` if none accepts the arguments."""
    for candidate in candidates:
        if candidate.is_exact(arg_types):
            return candidate

    best: Optional[Candidate] = None
    for candidate in candidates:
        if not candidate.accepts(arg_types):
            continue
        if best is None or (
            candidate.is_more_specific_than(best, len(arg_types))
            and not best.is_more_specific_than(candidate, len(arg_types))
        ):
            best = candidate
    return best


def find_constructor(target: type, arg_types: Sequence[Any]) -> Candidate:
    """Find the constructor signature of ``target`` that accepts ``arg_types``.

    Raises:
        NoMatchingCandidateError: If no constructor accepts the arguments.
    """
    candidate = select_candidate(constructor_candidates(target), arg_types)
    if candidate is None:
        raise NoMatchingCandidateError(qualified_name(target), None, arg_types)
    logger.debug("Matched constructor %s%s", qualified_name(target), candidate)
    return candidate


def find_method(owner_type: type, member_name: str, arg_types: Sequence[Any]) -> Candidate:
    """Find the signature of ``owner_type.member_name`` that accepts ``arg_types``.

    Raises:
        NoMatchingCandidateError: If the method does not exist or none of its
            signatures accept the arguments.
    """
    candidate = select_candidate(method_candidates(owner_type, member_name), arg_types)
    if candidate is None:
        raise NoMatchingCandidateError(qualified_name(owner_type), member_name, arg_types)
    logger.debug(
        "Matched method %s.%s%s", qualified_name(owner_type), member_name, candidate
    )
    return candidate
