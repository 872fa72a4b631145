import functools
from dataclasses import dataclass
from numbers import Number
from typing import Optional, overload


class IntHolder:
    def __init__(self, value: int):
        self.value = value


class Wrapper:
    def __init__(self, holder: IntHolder):
        self.holder = holder


class Overloaded:
    @overload
    def __init__(self, value: int) -> None: ...

    @overload
    def __init__(self, value: str) -> None: ...

    def __init__(self, value):
        self.kind = "int" if isinstance(value, int) else "str"
        self.value = value


class Measured:
    @overload
    def __init__(self, value: Number) -> None: ...

    @overload
    def __init__(self, value: int) -> None: ...

    def __init__(self, value):
        self.value = value


@dataclass
class Flag:
    enabled: bool


class Ratio:
    def __init__(self, value: float):
        self.value = value


class Node:
    def __init__(self, peer: object):
        self.peer = peer


class Tags:
    def __init__(self, names: list[str]):
        self.names = names


class Strict:
    def __init__(self, *, name: str):
        self.name = name


class Defaults:
    def __init__(self, name: str, retries: int = 3, *extras: str):
        self.name = name
        self.retries = retries
        self.extras = extras


class Broken:
    def __init__(self):
        raise RuntimeError("cannot start")


class CountingFactory:
    calls = 0

    @classmethod
    def create(cls) -> "CountingFactory":
        cls.calls += 1
        return cls()


class Settings:
    def __init__(self, name: str, retries: int):
        self.name = name
        self.retries = retries

    @staticmethod
    def from_values(name: str, retries: int) -> "Settings":
        return Settings(name, retries)

    @classmethod
    def default(cls) -> "Settings":
        return cls("default", 1)

    def describe(self) -> str:
        return f"{self.name} ({self.retries})"


class Database:
    @classmethod
    def missing(cls) -> Optional["Database"]:
        return None


class Repository:
    def __init__(self, database: Optional[Database]):
        self.database = database


@dataclass(frozen=True)
class Client:
    model: str
    temperature: float


class ClientFactory:
    def __init__(self, provider: str):
        self.provider = provider

    def create(self, model: str, temperature: float = 0.0) -> Client:
        return Client(f"{self.provider}/{model}", temperature)

    def nothing(self) -> None:
        return None

    @functools.cache
    def cached(self, model: str) -> Client:
        return self.create(model)

    create_default = functools.partialmethod(create, "default")


class Outer:
    class Inner:
        def __init__(self, label: str):
            self.label = label


class SelfRegistering:
    """Registers a replacement for itself while it is being built."""

    replacement = IntHolder(42)

    def __init__(self, registry: object, component_id: str):
        registry.register_singleton(component_id, self.replacement)
