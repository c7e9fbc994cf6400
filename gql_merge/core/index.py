"""Definition index: groups parsed definitions by (kind, name)."""

from typing import Iterable, Iterator

from .ir import SCHEMA_KEY, DefinitionKey, DefinitionKind, IRDefinition, TYPE_KINDS


class DefinitionIndex:
    """Accumulates definitions from many documents without validating them.

    Groups keep arrival order twice over: keys are ordered by their first
    contribution, and each group lists its contributions in the order the
    documents (and the definitions within each document) were added.
    """

    def __init__(self):
        self._groups: dict[DefinitionKey, list[IRDefinition]] = {}

    def add(self, definitions: Iterable[IRDefinition]):
        """Add one document's definitions."""
        for definition in definitions:
            key = SCHEMA_KEY if definition.kind is DefinitionKind.SCHEMA else definition.key
            self._groups.setdefault(key, []).append(definition)

    def __iter__(self) -> Iterator[tuple[DefinitionKey, list[IRDefinition]]]:
        return iter(self._groups.items())

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, key: DefinitionKey) -> bool:
        return key in self._groups

    def get(self, key: DefinitionKey) -> list[IRDefinition]:
        return self._groups.get(key, [])

    def names(self) -> dict[str, list[DefinitionKind]]:
        """Map each type name to the kinds it has base definitions under.

        Directive definitions and the schema block have their own namespaces
        and are left out.
        """
        kinds_by_name: dict[str, list[DefinitionKind]] = {}
        for (kind, name), group in self._groups.items():
            if kind not in TYPE_KINDS:
                continue
            if any(not d.is_extension for d in group):
                kinds_by_name.setdefault(name, []).append(kind)
        return kinds_by_name
