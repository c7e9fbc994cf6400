"""Core modules for GraphQL schema merging."""

from .errors import (
    DanglingExtension,
    DirectiveConflict,
    FieldConflict,
    GQLMergeError,
    MergeConflict,
    MergeError,
    ParseError,
    SchemaConflict,
    TypeKindConflict,
)
from .index import DefinitionIndex
from .ir import (
    DefinitionKind,
    IRDefinition,
    IRDirective,
    IRDirectiveDefinition,
    IREnum,
    IREnumValue,
    IRField,
    IRInputObject,
    IRInputValue,
    IRInterface,
    IRObject,
    IRScalar,
    IRSchemaDefinition,
    IRUnion,
    ListType,
    MergedSchema,
    NamedType,
    NonNullType,
    TypeRef,
)
from .merge import merge, merge_documents, parse_documents
from .options import MergeOptions
from .parser import SchemaParser, parse_document
from .printer import SchemaPrinter, print_schema
from .resolver import MergeResolver

__all__ = [
    # Errors
    "GQLMergeError",
    "ParseError",
    "MergeConflict",
    "FieldConflict",
    "DirectiveConflict",
    "SchemaConflict",
    "DanglingExtension",
    "TypeKindConflict",
    "MergeError",
    # IR types
    "DefinitionKind",
    "IRDefinition",
    "IRDirective",
    "IRDirectiveDefinition",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInputObject",
    "IRInputValue",
    "IRInterface",
    "IRObject",
    "IRScalar",
    "IRSchemaDefinition",
    "IRUnion",
    "ListType",
    "MergedSchema",
    "NamedType",
    "NonNullType",
    "TypeRef",
    # Engine
    "DefinitionIndex",
    "MergeOptions",
    "MergeResolver",
    "SchemaParser",
    "SchemaPrinter",
    "merge",
    "merge_documents",
    "parse_document",
    "parse_documents",
    "print_schema",
]
