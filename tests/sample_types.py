"""Classes synthesized against in the tests.

Kept at module level so annotations resolve and the CLI can import them as
``sample_types:Name``.
"""

import threading
from abc import ABC, abstractmethod
from typing import ClassVar, Protocol, runtime_checkable


@runtime_checkable
class Named(Protocol):
    name: str


@runtime_checkable
class Versioned(Protocol):
    @property
    def version(self) -> int: ...


class Game(ABC):
    @property
    @abstractmethod
    def game(self) -> str: ...

    @abstractmethod
    def play(self, move: int) -> bool: ...

    def real_method(self) -> str:
        return "Hi"


class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...

    @property
    @abstractmethod
    def sides(self) -> int: ...


class Square(Shape):
    def __init__(self, side: float):
        self.side = side

    def area(self) -> float:
        return self.side * self.side

    @property
    def sides(self) -> int:
        return 4


@runtime_checkable
class Methodical(Protocol):
    def methodical(self, a: int, b: str, *rest: int) -> int: ...


class Counter:
    def methodical(self, a: int, b: str, *rest: int) -> int:
        return a + len(b) + len(rest)


class MisnamedCounter:
    def methodical(self, first: int, second: str, *others: int) -> int:
        return first


@runtime_checkable
class Readable(Protocol):
    @property
    def closed(self) -> bool: ...

    def read(self, size: int) -> str: ...


class StringSource:
    closed: bool

    def __init__(self, text: str):
        self.text = text
        self.closed = False

    def read(self, size: int) -> str:
        chunk, self.text = self.text[:size], self.text[size:]
        return chunk


class WrongReader:
    closed: bool = False

    def read(self, size: str) -> str:
        return size


class NoReader:
    closed: bool = False


@runtime_checkable
class Labelled(Protocol):
    label: str

    def read(self, size: int) -> str: ...


class ReadOnlyLabel:
    @property
    def label(self) -> str:
        return "fixed"

    def read(self, size: int) -> str:
        return ""


class Complicated:
    its_complicated: int

    def __init__(self, value: int = 7):
        self.its_complicated = value

    def doubled(self) -> int:
        return self.its_complicated * 2


class Account:
    id: int
    owner: str
    balance: float
    registry_name: ClassVar[str] = "accounts"

    def __init__(self, id: int, owner: str, balance: float = 0.0):
        self.id = id
        self.owner = owner
        self.balance = balance

    def deposit(self, amount: float) -> float:
        self.balance += amount
        return self.balance

    def _audit(self) -> None:
        pass

    @staticmethod
    def currency() -> str:
        return "EUR"


class Exploding:
    value: int

    def __init__(self):
        raise AssertionError("constructor must not run")


@runtime_checkable
class Service(Protocol):
    label: str

    def public_void_method(self) -> None: ...

    def compute(self, x: int, y: int) -> int: ...

    def names(self) -> list[str]: ...

    def lookup(self, key: str, *, default: str = "") -> str: ...


class Greeter:
    greeting: str = "hello"

    def greet(self, name: str) -> str:
        return f"{self.greeting}, {name}"


class FactoryCounter:
    """Factory for lazy wrappers that counts its invocations."""

    def __init__(self, build=Complicated):
        self.build = build
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        return self.build()
