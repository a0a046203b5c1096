"""Shell building blocks: variables, tokenizing, expansion, syntax checks and builtins."""

__version__ = "0.1.0"
__all__ = ["__version__"]