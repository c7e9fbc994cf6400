"""Exceptions raised by the merge engine."""

from typing import Sequence

from .ir import DefinitionKind


class GQLMergeError(Exception):
    """Base exception for all gql-merge errors."""


class ParseError(GQLMergeError):
    """Raised when a document is not valid SDL."""

    def __init__(self, source: str, line: int, column: int, message: str):
        self.source = source
        self.line = line
        self.column = column
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}: {self.message}"


class MergeConflict(GQLMergeError):
    """A semantic conflict between contributions to one definition.

    Attributes:
        kind: Kind of the conflicting definition
        name: Name of the conflicting definition ("" for the schema block)
        sources: Names of the documents that contributed the conflicting parts
    """

    def __init__(
        self,
        kind: DefinitionKind,
        name: str,
        sources: Sequence[str],
        message: str,
    ):
        self.kind = kind
        self.name = name
        self.sources = list(sources)
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        sources = ", ".join(self.sources)
        return f"{self.message} (sources: {sources})"


class FieldConflict(MergeConflict):
    """Two contributions declare the same field incompatibly."""

    def __init__(
        self,
        kind: DefinitionKind,
        name: str,
        field_name: str,
        sources: Sequence[str],
        detail: str,
    ):
        self.field_name = field_name
        super().__init__(
            kind, name, sources, f"Field {name}.{field_name} conflicts: {detail}"
        )


class DirectiveConflict(MergeConflict):
    """Two directive definitions with one name disagree."""

    def __init__(self, name: str, sources: Sequence[str], detail: str):
        super().__init__(
            DefinitionKind.DIRECTIVE,
            name,
            sources,
            f"Directive @{name} conflicts: {detail}",
        )


class SchemaConflict(MergeConflict):
    """Two schema blocks map one operation to different root types."""

    def __init__(self, operation: str, type_names: Sequence[str], sources: Sequence[str]):
        self.operation = operation
        targets = " vs ".join(type_names)
        super().__init__(
            DefinitionKind.SCHEMA,
            "",
            sources,
            f"Schema root operation '{operation}' conflicts: {targets}",
        )


class DanglingExtension(MergeConflict):
    """An extension has no base definition in any input document."""

    def __init__(self, kind: DefinitionKind, name: str, sources: Sequence[str]):
        target = f"{kind.value} {name}".strip()
        super().__init__(
            kind, name, sources, f"Extension of undefined {target}"
        )


class TypeKindConflict(MergeConflict):
    """One type name is defined as more than one kind."""

    def __init__(
        self,
        name: str,
        kinds: Sequence[DefinitionKind],
        sources: Sequence[str],
    ):
        self.kinds = list(kinds)
        kind_names = ", ".join(k.value for k in self.kinds)
        super().__init__(
            self.kinds[0],
            name,
            sources,
            f"Type {name} is defined as different kinds: {kind_names}",
        )


class MergeError(GQLMergeError):
    """Aggregate of every parse error or conflict found in one merge call."""

    def __init__(self, message: str, errors: Sequence[GQLMergeError]):
        self.message = message
        self.errors = list(errors)
        super().__init__(message)

    def __str__(self) -> str:
        lines = [f"{self.message} ({len(self.errors)} error(s))"]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)

    @property
    def conflicts(self) -> list[MergeConflict]:
        return [e for e in self.errors if isinstance(e, MergeConflict)]

    @property
    def parse_errors(self) -> list[ParseError]:
        return [e for e in self.errors if isinstance(e, ParseError)]
