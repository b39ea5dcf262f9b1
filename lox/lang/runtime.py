"""Runtime object model for the lox language: the values Interpreter produces besides nil/booleans/numbers/strings.

Lox value  | Python value
-----------|------------------------------------------
nil        | None
boolean    | bool
number     | float
string     | str
callable   | LoxFunction, LoxClass, NativeFunction
instance   | LoxInstance
"""

import time
from abc import ABC, abstractmethod

from lox.lang.environment import Environment
from lox.lang.error import LoxRuntimeError


class LoxCallable(ABC):
    """Anything that can be called from lox: functions, bound methods, classes and natives."""

    @property
    @abstractmethod
    def arity(self):
        """Number of arguments this callable must be called with."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls this object with already evaluated arguments. Arity has already been checked."""


class LoxFunction(LoxCallable):
    """User-defined function or method, closing over the environment active when it was declared."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def arity(self):
        return len(self.declaration.params)

    def bind(self, instance):
        """Returns a copy of this method whose closure is a new frame defining "this" as instance."""
        env = Environment(self.closure)
        env.define("this", instance)
        return LoxFunction(self.declaration, env, self.is_initializer)

    def call(self, interpreter, arguments):
        env = Environment(self.closure)  # the closure, not the caller's environment
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, env)

        if self.is_initializer:
            return self.closure.get_at(0, "this")  # initializers always return the instance
        if completion is not None:
            return completion.value
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class NativeFunction(LoxCallable):
    """Function implemented in Python. func receives the evaluated arguments."""

    def __init__(self, name, arity, func):
        self.name = name
        self._arity = arity
        self.func = func

    @property
    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.func(*arguments)

    def __str__(self):
        return "<native fn>"


class LoxClass(LoxCallable):
    """A class is its own constructor. Its method table is shared by every instance."""

    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name):
        """Looks up an unbound method on this class, then on the superclass chain. Returns None if not found."""
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    @property
    def arity(self):
        initializer = self.find_method("init")
        return 0 if initializer is None else initializer.arity

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)

        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __str__(self):
        return self.name


class LoxInstance:
    """Instance of a LoxClass. Fields are created on first assignment."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Fields shadow methods. Methods are bound to this instance on every access."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"


def natives():
    """Natives every global environment starts with."""
    return {
        "clock": NativeFunction("clock", 0, lambda: float(time.time())),
    }
