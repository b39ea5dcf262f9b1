"""Tree-walking interpreter for the lox scripting language."""

__version__ = "1.0.0"
