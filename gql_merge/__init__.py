"""Merge GraphQL SDL documents into one schema."""

from .core import (
    MergeError,
    MergeOptions,
    merge,
    merge_documents,
    print_schema,
)

__version__ = "0.1.0"

__all__ = [
    "MergeError",
    "MergeOptions",
    "merge",
    "merge_documents",
    "print_schema",
]
