"""Intermediate Representation (IR) for GraphQL type-system definitions.

This module defines dataclasses that represent SDL definitions independently
of the parsing library, so that the resolver and printer can compare and
rebuild them structurally.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, Union


class DefinitionKind(str, Enum):
    """Kinds of top-level SDL definitions, valued by their SDL keyword."""

    SCALAR = "scalar"
    OBJECT = "type"
    INTERFACE = "interface"
    UNION = "union"
    ENUM = "enum"
    INPUT_OBJECT = "input"
    DIRECTIVE = "directive"
    SCHEMA = "schema"


# Type references


@dataclass(frozen=True)
class NamedType:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListType:
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


@dataclass(frozen=True)
class NonNullType:
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"{self.of_type}!"


TypeRef = Union[NamedType, ListType, NonNullType]


@dataclass(frozen=True)
class IRDirective:
    """A directive application such as ``@deprecated(reason: "old")``.

    Argument values are kept as their canonical SDL literal text, so two
    applications are equal iff name and printed arguments are equal.
    """
    name: str
    arguments: tuple[tuple[str, str], ...] = ()

    @property
    def signature(self) -> tuple[str, tuple[tuple[str, str], ...]]:
        return self.name, self.arguments


# Members


@dataclass
class IRInputValue:
    """An argument or an input-object field."""
    name: str
    type: TypeRef
    default_value: str | None = None
    description: str | None = None
    directives: list[IRDirective] = field(default_factory=list)


@dataclass
class IRField:
    """A field of an object or interface type."""
    name: str
    type: TypeRef
    arguments: list[IRInputValue] = field(default_factory=list)
    description: str | None = None
    directives: list[IRDirective] = field(default_factory=list)

    @property
    def argument_signature(self) -> tuple[tuple[str, TypeRef], ...]:
        """(name, type) pairs used to decide whether two fields agree."""
        return tuple((arg.name, arg.type) for arg in self.arguments)


@dataclass
class IREnumValue:
    name: str
    description: str | None = None
    directives: list[IRDirective] = field(default_factory=list)


# Definitions


@dataclass
class IRDefinition:
    """Base of every top-level definition.

    ``is_extension`` marks contributions that came from an ``extend`` form.
    ``source`` names the document the definition was parsed from; it is
    excluded from equality so identical definitions from different files
    compare equal.
    """
    kind: ClassVar[DefinitionKind]

    name: str = ""
    description: str | None = None
    directives: list[IRDirective] = field(default_factory=list)
    is_extension: bool = False
    source: str = field(default="", compare=False)

    @property
    def key(self) -> tuple[DefinitionKind, str]:
        return self.kind, self.name


@dataclass
class IRScalar(IRDefinition):
    kind: ClassVar[DefinitionKind] = DefinitionKind.SCALAR


@dataclass
class IRObject(IRDefinition):
    """An object type (``type User implements Node { ... }``)."""
    kind: ClassVar[DefinitionKind] = DefinitionKind.OBJECT

    interfaces: list[str] = field(default_factory=list)
    fields: list[IRField] = field(default_factory=list)


@dataclass
class IRInterface(IRDefinition):
    """An interface type; interfaces may implement other interfaces."""
    kind: ClassVar[DefinitionKind] = DefinitionKind.INTERFACE

    interfaces: list[str] = field(default_factory=list)
    fields: list[IRField] = field(default_factory=list)


@dataclass
class IRUnion(IRDefinition):
    kind: ClassVar[DefinitionKind] = DefinitionKind.UNION

    members: list[str] = field(default_factory=list)


@dataclass
class IREnum(IRDefinition):
    kind: ClassVar[DefinitionKind] = DefinitionKind.ENUM

    values: list[IREnumValue] = field(default_factory=list)


@dataclass
class IRInputObject(IRDefinition):
    kind: ClassVar[DefinitionKind] = DefinitionKind.INPUT_OBJECT

    fields: list[IRInputValue] = field(default_factory=list)


@dataclass
class IRDirectiveDefinition(IRDefinition):
    """A directive definition (``directive @auth(role: String) on FIELD``)."""
    kind: ClassVar[DefinitionKind] = DefinitionKind.DIRECTIVE

    arguments: list[IRInputValue] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    repeatable: bool = False

    @property
    def argument_signature(self) -> tuple[tuple[str, TypeRef, str | None], ...]:
        return tuple((a.name, a.type, a.default_value) for a in self.arguments)


@dataclass
class IRSchemaDefinition(IRDefinition):
    """The anonymous ``schema { query: Query ... }`` block.

    ``operation_types`` maps an operation (query, mutation, subscription)
    to its root type name, in declaration order.
    """
    kind: ClassVar[DefinitionKind] = DefinitionKind.SCHEMA

    operation_types: dict[str, str] = field(default_factory=dict)


# Kinds whose definitions share the type namespace.
TYPE_KINDS = frozenset(
    {
        DefinitionKind.SCALAR,
        DefinitionKind.OBJECT,
        DefinitionKind.INTERFACE,
        DefinitionKind.UNION,
        DefinitionKind.ENUM,
        DefinitionKind.INPUT_OBJECT,
    }
)

SCHEMA_KEY = (DefinitionKind.SCHEMA, "")

DefinitionKey = tuple[DefinitionKind, str]


@dataclass
class MergedSchema:
    """Result of a merge: one definition per (kind, name), in first-seen order."""
    definitions: dict[DefinitionKey, IRDefinition] = field(default_factory=dict)

    def __iter__(self) -> Iterator[IRDefinition]:
        return iter(self.definitions.values())

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, kind: DefinitionKind, name: str = "") -> IRDefinition | None:
        """Look up a merged definition by kind and name."""
        return self.definitions.get((kind, name))

    @property
    def schema(self) -> IRSchemaDefinition | None:
        return self.definitions.get(SCHEMA_KEY)

    @property
    def type_names(self) -> list[str]:
        """Names of all merged type-namespace definitions, in output order."""
        return [d.name for d in self if d.kind in TYPE_KINDS]
