"""Lexical scope chain. One Environment is created per block entry, per call, and per method bind. Frames are shared
(never copied) by every closure created while they are active.
"""

from lox.lang.error import LoxRuntimeError


class Environment:
    """A scope frame: name -> value, plus the enclosing frame (None for globals)."""

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        """Binds name in this frame only. Redefining a name overwrites it."""
        self.values[name] = value

    def get(self, name):
        """Dynamic lookup by name token, walking outward. Raises if name is not bound anywhere."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Rebinds an existing variable, walking outward. Assignment never creates a variable."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance):
        """Returns the frame exactly distance links outward."""
        env = self
        for _ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance, name):
        """Lookup in the frame the resolver proved name lives in. Like assign_at, takes name as a plain str."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name] = value

    def __repr__(self):
        return f"Environment({list(self.values)}, enclosing={self.enclosing!r})"
