"""Merge resolver: reduces each group of contributions to one definition.

Per-kind rules:
    scalar      directives unioned by (name, arguments)
    type        fields unioned by name, identical type and (name, type)
    interface   argument pairs required; implemented interfaces unioned
    union       members unioned by name
    enum        values unioned by name, value directives unioned by name
    input       fields unioned by name, identical type and default required
    directive   identical arguments, locations and repeatability required
    schema      root operation mappings unioned, one target per operation

Extensions are folded in after every base definition of their key. All
conflicts of a run are collected and raised together in one MergeError.
"""

import copy
import logging
from typing import Callable, Sequence

from .errors import (
    DanglingExtension,
    DirectiveConflict,
    FieldConflict,
    MergeConflict,
    MergeError,
    SchemaConflict,
    TypeKindConflict,
)
from .index import DefinitionIndex
from .ir import (
    TYPE_KINDS,
    DefinitionKind,
    IRDefinition,
    IRDirective,
    IRDirectiveDefinition,
    IREnum,
    IRField,
    IRInputObject,
    IRInputValue,
    IRInterface,
    IRObject,
    IRSchemaDefinition,
    IRUnion,
    MergedSchema,
)
from .options import MergeOptions

logger = logging.getLogger(__name__)


def _unique(sources: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(sources))


def _format_arguments(arguments: Sequence[IRInputValue]) -> str:
    return "(" + ", ".join(f"{a.name}: {a.type}" for a in arguments) + ")"


def union_directives(current: list[IRDirective], incoming: Sequence[IRDirective]):
    """Append incoming directive applications not already present."""
    seen = {d.signature for d in current}
    for directive in incoming:
        if directive.signature not in seen:
            current.append(directive)
            seen.add(directive.signature)


def union_directives_by_name(current: list[IRDirective], incoming: Sequence[IRDirective]):
    """Append incoming applications whose directive name is not present yet."""
    seen = {d.name for d in current}
    for directive in incoming:
        if directive.name not in seen:
            current.append(directive)
            seen.add(directive.name)


def union_names(current: list[str], incoming: Sequence[str]):
    """Append names not already present, keeping first-seen order."""
    seen = set(current)
    for name in incoming:
        if name not in seen:
            current.append(name)
            seen.add(name)


class MergeResolver:
    """Resolves a DefinitionIndex into a MergedSchema or fails with MergeError."""

    def __init__(self, options: MergeOptions | None = None):
        self.options = options or MergeOptions()
        self._conflicts: list[MergeConflict] = []
        self._mergers: dict[DefinitionKind, Callable[[IRDefinition, IRDefinition], None]] = {
            DefinitionKind.SCALAR: self._merge_scalar,
            DefinitionKind.OBJECT: self._merge_composite,
            DefinitionKind.INTERFACE: self._merge_composite,
            DefinitionKind.UNION: self._merge_union,
            DefinitionKind.ENUM: self._merge_enum,
            DefinitionKind.INPUT_OBJECT: self._merge_input_object,
            DefinitionKind.DIRECTIVE: self._merge_directive,
            DefinitionKind.SCHEMA: self._merge_schema,
        }
        missing = set(DefinitionKind) - set(self._mergers)
        assert not missing, f"No merge rule for {missing}"
        # Source of each accumulated member, per merged definition
        self._member_sources: dict[str, str] = {}

    def resolve(self, index: DefinitionIndex) -> MergedSchema:
        """Merge every group of the index.

        Raises:
            MergeError: Carrying every conflict found, in discovery order
        """
        self._conflicts = []
        merged = MergedSchema()
        kinds_by_name = index.names()
        reported_names: set[str] = set()

        for key, group in index:
            kind, name = key
            kinds = kinds_by_name.get(name, [])
            if kind in TYPE_KINDS and len(kinds) > 1:
                if name not in reported_names:
                    reported_names.add(name)
                    sources = [d.source for k in kinds for d in index.get((k, name))]
                    self._conflicts.append(TypeKindConflict(name, kinds, _unique(sources)))
                continue

            bases = [d for d in group if not d.is_extension]
            extensions = [d for d in group if d.is_extension]
            if not bases:
                self._conflicts.append(
                    DanglingExtension(kind, name, _unique([d.source for d in extensions]))
                )
                continue

            merged.definitions[key] = self._merge_group(bases + extensions)

        if self._conflicts:
            for conflict in self._conflicts:
                logger.debug(f"Merge conflict: {conflict}")
            raise MergeError("Schema merge failed", self._conflicts)

        logger.info(f"Resolved {len(index)} definition groups into {len(merged)} definitions")
        return merged

    def _merge_group(self, group: list[IRDefinition]) -> IRDefinition:
        # Contributions are copied so callers' IR is never mutated.
        contributions = copy.deepcopy(group)
        target = self._empty_copy(contributions[0])
        self._member_sources = {}

        # Every contribution, the first included, goes through the member
        # rules so duplicates inside one definition are caught too.
        merge_into = self._mergers[target.kind]
        for contribution in contributions:
            target.description = self._merge_description(
                target.description, contribution.description
            )
            union_directives(target.directives, contribution.directives)
            merge_into(target, contribution)
        return target

    @staticmethod
    def _empty_copy(first: IRDefinition) -> IRDefinition:
        """Shallow copy of ``first`` with no members, directives or extension flag."""
        target = copy.copy(first)
        target.is_extension = False
        target.directives = []
        if isinstance(target, (IRObject, IRInterface)):
            target.interfaces = []
            target.fields = []
        elif isinstance(target, IRInputObject):
            target.fields = []
        elif isinstance(target, IREnum):
            target.values = []
        elif isinstance(target, IRUnion):
            target.members = []
        elif isinstance(target, IRSchemaDefinition):
            target.operation_types = {}
        return target

    def _merge_description(self, current: str | None, incoming: str | None) -> str | None:
        if not current:
            return incoming or current
        if not incoming or incoming == current:
            return current
        if self.options.append_descriptions and incoming not in current.split("\n\n"):
            return f"{current}\n\n{incoming}"
        return current

    def _merge_scalar(self, target: IRDefinition, contribution: IRDefinition):
        # Scalars carry nothing beyond the description and directives
        # already merged in _merge_group.
        pass

    def _merge_composite(self, target: IRObject | IRInterface, contribution: IRObject | IRInterface):
        union_names(target.interfaces, contribution.interfaces)
        existing = {f.name: f for f in target.fields}
        for field in contribution.fields:
            current = existing.get(field.name)
            if current is None:
                target.fields.append(field)
                existing[field.name] = field
                self._member_sources[field.name] = contribution.source
                continue
            detail = self._field_mismatch(current, field)
            if detail:
                self._field_conflict(target, field.name, contribution.source, detail)
                continue
            current.description = self._merge_description(current.description, field.description)

    @staticmethod
    def _field_mismatch(current: IRField, incoming: IRField) -> str | None:
        if current.type != incoming.type:
            return f"type {current.type} vs {incoming.type}"
        if current.argument_signature != incoming.argument_signature:
            return (
                f"arguments {_format_arguments(current.arguments)}"
                f" vs {_format_arguments(incoming.arguments)}"
            )
        return None

    def _merge_input_object(self, target: IRInputObject, contribution: IRInputObject):
        existing = {f.name: f for f in target.fields}
        for field in contribution.fields:
            current = existing.get(field.name)
            if current is None:
                target.fields.append(field)
                existing[field.name] = field
                self._member_sources[field.name] = contribution.source
                continue
            if current.type != field.type:
                self._field_conflict(
                    target, field.name, contribution.source,
                    f"type {current.type} vs {field.type}",
                )
                continue
            if (
                current.default_value is not None
                and field.default_value is not None
                and current.default_value != field.default_value
            ):
                self._field_conflict(
                    target, field.name, contribution.source,
                    f"default {current.default_value} vs {field.default_value}",
                )
                continue
            if current.default_value is None:
                current.default_value = field.default_value
            current.description = self._merge_description(current.description, field.description)

    def _field_conflict(self, target: IRDefinition, field_name: str, source: str, detail: str):
        first_source = self._member_sources.get(field_name, target.source)
        self._conflicts.append(
            FieldConflict(
                target.kind, target.name, field_name, _unique([first_source, source]), detail
            )
        )

    def _merge_union(self, target: IRUnion, contribution: IRUnion):
        union_names(target.members, contribution.members)

    def _merge_enum(self, target: IREnum, contribution: IREnum):
        existing = {v.name: v for v in target.values}
        for value in contribution.values:
            current = existing.get(value.name)
            if current is None:
                target.values.append(value)
                existing[value.name] = value
                self._member_sources[value.name] = contribution.source
                continue
            union_directives_by_name(current.directives, value.directives)
            current.description = self._merge_description(current.description, value.description)

    def _merge_directive(self, target: IRDirectiveDefinition, contribution: IRDirectiveDefinition):
        sources = _unique([target.source, contribution.source])
        if target.argument_signature != contribution.argument_signature:
            detail = (
                f"arguments {_format_arguments(target.arguments)}"
                f" vs {_format_arguments(contribution.arguments)}"
            )
            self._conflicts.append(DirectiveConflict(target.name, sources, detail))
        elif set(target.locations) != set(contribution.locations):
            detail = (
                f"locations {' | '.join(target.locations)}"
                f" vs {' | '.join(contribution.locations)}"
            )
            self._conflicts.append(DirectiveConflict(target.name, sources, detail))
        elif target.repeatable != contribution.repeatable:
            self._conflicts.append(
                DirectiveConflict(target.name, sources, "repeatable vs non-repeatable")
            )

    def _merge_schema(self, target: IRSchemaDefinition, contribution: IRSchemaDefinition):
        for operation, type_name in contribution.operation_types.items():
            current = target.operation_types.get(operation)
            if current is None:
                target.operation_types[operation] = type_name
                self._member_sources[operation] = contribution.source
            elif current != type_name:
                first_source = self._member_sources.get(operation, target.source)
                self._conflicts.append(
                    SchemaConflict(
                        operation,
                        [current, type_name],
                        _unique([first_source, contribution.source]),
                    )
                )


def resolve(index: DefinitionIndex, options: MergeOptions | None = None) -> MergedSchema:
    """Resolve an index into a merged schema."""
    return MergeResolver(options).resolve(index)
