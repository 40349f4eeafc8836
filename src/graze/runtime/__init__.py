"""
graze runtime - stack-based evaluator.

This module provides:
- Runtime: Executes a parsed Program against a draw sink
- Value: Runtime value wrappers with type tags
- Stack / Environment: Evaluation stack and global variables
- BuiltinRegistry: The standard library of built-in functions
"""

from .values import (
    Value,
    ValueType,
    VOID,
    scalar_val,
    int_val,
    float_val,
    point_val,
    vector_val,
    line_val,
    wrap_value,
)

from .context import (
    Stack,
    Environment,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
    create_builtin_registry,
    reverse_pop,
)

from .interpreter import (
    Runtime,
    ExecutionResult,
    run,
    compile_and_run,
)

__all__ = [
    # Values
    "Value",
    "ValueType",
    "VOID",
    "scalar_val",
    "int_val",
    "float_val",
    "point_val",
    "vector_val",
    "line_val",
    "wrap_value",
    # Context
    "Stack",
    "Environment",
    # Builtins
    "BuiltinFunction",
    "BuiltinRegistry",
    "create_builtin_registry",
    "reverse_pop",
    # Interpreter
    "Runtime",
    "ExecutionResult",
    "run",
    "compile_and_run",
]
