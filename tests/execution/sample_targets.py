"""Dispatch targets used by the execution tests.

Importable as ``sample_targets`` (pytest puts this directory on sys.path),
so the same classes serve registry-based and import-based resolution.
"""

from abc import ABC, abstractmethod
from functools import cached_property

SINK: list = []


def reset() -> None:
    SINK.clear()
    MathOps.instances = 0
    Greeter.instances = 0
    Greeter.calls = 0


class MathOps:
    instances = 0

    def __init__(self):
        MathOps.instances += 1

    @staticmethod
    def Add(a, b):
        SINK.append(a + b)

    @staticmethod
    def _Scale(value, factor=2):
        return value * factor

    @classmethod
    def Describe(cls, label):
        return f"{cls.__name__}:{label}"

    @staticmethod
    def Explode():
        raise TypeError("raised inside the target")

    @staticmethod
    async def Double(value):
        return value * 2


class Greeter:
    instances = 0
    calls = 0

    def __init__(self):
        Greeter.instances += 1
        self.greeting = "Hello"

    def Greet(self, name):
        Greeter.calls += 1
        message = f"{self.greeting} {name}"
        SINK.append(message)
        return message

    def __whisper(self, name):
        return f"psst {name}"

    def _shout(self, name):
        return f"{self.greeting.upper()} {name.upper()}"


class LoudGreeter(Greeter):
    def __init__(self):
        super().__init__()
        self.greeting = "HEY"


class Printer:
    def Print(self, text):
        print(text)


class NeedsConnection:
    def __init__(self, connection):
        self.connection = connection

    def Run(self):
        return self.connection

    @staticmethod
    def Ping():
        return "pong"


class AbstractJob(ABC):
    @abstractmethod
    def execute(self): ...

    def Run(self):
        return self.execute()


class Settings:
    retries = 3

    @property
    def Label(self):
        return "settings"

    @cached_property
    def Badge(self):
        return "cached"

    class Nested:
        @staticmethod
        def Ping():
            return "nested pong"


def add(a, b):
    return a + b


def _private_helper(value):
    return f"helper:{value}"


def not_a_target():
    return None


NOT_A_CLASS = 42
