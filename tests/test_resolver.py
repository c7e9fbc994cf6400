"""Unit tests for the definition index and merge resolver."""

import pytest

from gql_merge.core.errors import (
    DanglingExtension,
    DirectiveConflict,
    FieldConflict,
    MergeError,
    SchemaConflict,
    TypeKindConflict,
)
from gql_merge.core.index import DefinitionIndex
from gql_merge.core.ir import (
    SCHEMA_KEY,
    DefinitionKind,
    IRDirective,
    NamedType,
)
from gql_merge.core.options import MergeOptions
from gql_merge.core.parser import SchemaParser
from gql_merge.core.resolver import MergeResolver, union_directives


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def build_index():
    """Build a DefinitionIndex from (source, text) pairs."""
    parser = SchemaParser()

    def _build(*documents):
        index = DefinitionIndex()
        for source, text in documents:
            index.add(parser.parse(text, source))
        return index

    return _build


@pytest.fixture
def resolve(build_index):
    """Resolve (source, text) pairs with default options."""

    def _resolve(*documents, options=None):
        return MergeResolver(options).resolve(build_index(*documents))

    return _resolve


def conflicts_of(exc_info):
    return exc_info.value.errors


# =============================================================================
# Tests: Definition Index
# =============================================================================


class TestDefinitionIndex:
    """Tests for grouping and ordering in the index."""

    def test_groups_by_kind_and_name(self, build_index):
        index = build_index(
            ("a.graphql", "type User { id: ID }\nenum Role { ADMIN }"),
            ("b.graphql", "type User { name: String }"),
        )
        assert len(index) == 2
        group = index.get((DefinitionKind.OBJECT, "User"))
        assert [d.source for d in group] == ["a.graphql", "b.graphql"]

    def test_key_order_is_first_seen(self, build_index):
        index = build_index(
            ("a.graphql", "scalar Date\ntype User { id: ID }"),
            ("b.graphql", "enum Role { ADMIN }\nscalar Date"),
        )
        assert [key for key, _ in index] == [
            (DefinitionKind.SCALAR, "Date"),
            (DefinitionKind.OBJECT, "User"),
            (DefinitionKind.ENUM, "Role"),
        ]

    def test_schema_blocks_share_singleton_key(self, build_index):
        index = build_index(
            ("a.graphql", "schema { query: Query }"),
            ("b.graphql", "extend schema { mutation: Mutation }"),
        )
        assert SCHEMA_KEY in index
        assert len(index.get(SCHEMA_KEY)) == 2

    def test_names_excludes_directives_and_extensions(self, build_index):
        index = build_index(
            ("a.graphql", "directive @User on FIELD\ntype User { id: ID }"),
            ("b.graphql", "extend interface User { id: ID }"),
        )
        assert index.names() == {"User": [DefinitionKind.OBJECT]}


# =============================================================================
# Tests: Per-kind merge rules
# =============================================================================


class TestObjectMerge:
    """Tests for object and interface field union."""

    def test_field_union_in_order(self, resolve):
        merged = resolve(
            ("a.graphql", "type User { id: ID }"),
            ("b.graphql", "type User { name: String }"),
        )
        user = merged.get(DefinitionKind.OBJECT, "User")
        assert [f.name for f in user.fields] == ["id", "name"]

    def test_identical_field_is_not_duplicated(self, resolve):
        merged = resolve(
            ("a.graphql", "type User { id: ID! posts(first: Int): [String] }"),
            ("b.graphql", "type User { posts(first: Int): [String] id: ID! }"),
        )
        user = merged.get(DefinitionKind.OBJECT, "User")
        assert [f.name for f in user.fields] == ["id", "posts"]

    def test_field_type_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "type User { id: ID }"),
                ("b.graphql", "type User { id: String }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, FieldConflict)
        assert conflict.kind is DefinitionKind.OBJECT
        assert conflict.name == "User"
        assert conflict.field_name == "id"
        assert conflict.sources == ["a.graphql", "b.graphql"]

    def test_field_argument_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "interface Node { items(first: Int): [ID] }"),
                ("b.graphql", "interface Node { items(last: Int): [ID] }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, FieldConflict)
        assert conflict.kind is DefinitionKind.INTERFACE
        assert "arguments" in conflict.message

    def test_conflict_reports_source_of_the_field(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "type User { id: ID }"),
                ("b.graphql", "type User { email: String }"),
                ("c.graphql", "type User { email: Int }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert conflict.sources == ["b.graphql", "c.graphql"]

    def test_interfaces_unioned(self, resolve):
        merged = resolve(
            ("a.graphql", "type User implements Node { id: ID }"),
            ("b.graphql", "type User implements Node & Entity { id: ID }"),
        )
        assert merged.get(DefinitionKind.OBJECT, "User").interfaces == ["Node", "Entity"]

    def test_first_description_wins(self, resolve):
        merged = resolve(
            ("a.graphql", '"First" type User { "id one" id: ID }'),
            ("b.graphql", '"Second" type User { "id two" id: ID }'),
        )
        user = merged.get(DefinitionKind.OBJECT, "User")
        assert user.description == "First"
        assert user.fields[0].description == "id one"

    def test_missing_description_is_filled(self, resolve):
        merged = resolve(
            ("a.graphql", "type User { id: ID }"),
            ("b.graphql", '"A user" type User { id: ID }'),
        )
        assert merged.get(DefinitionKind.OBJECT, "User").description == "A user"

    def test_append_descriptions_policy(self, resolve):
        merged = resolve(
            ("a.graphql", '"First" type User { id: ID }'),
            ("b.graphql", '"Second" type User { id: ID }'),
            ("c.graphql", '"First" type User { id: ID }'),
            options=MergeOptions(append_descriptions=True),
        )
        assert merged.get(DefinitionKind.OBJECT, "User").description == "First\n\nSecond"

    def test_type_directives_unioned(self, resolve):
        merged = resolve(
            ("a.graphql", 'type User @key(fields: "id") { id: ID }'),
            ("b.graphql", 'type User @key(fields: "id") @shareable { id: ID }'),
        )
        assert merged.get(DefinitionKind.OBJECT, "User").directives == [
            IRDirective("key", (("fields", '"id"'),)),
            IRDirective("shareable"),
        ]

    def test_field_directives_first_occurrence_wins(self, resolve):
        merged = resolve(
            ("a.graphql", "type User { id: ID @external }"),
            ("b.graphql", "type User { id: ID @shareable }"),
        )
        field = merged.get(DefinitionKind.OBJECT, "User").fields[0]
        assert field.directives == [IRDirective("external")]

    def test_inputs_are_not_mutated(self, build_index):
        index = build_index(
            ("a.graphql", "type User { id: ID }"),
            ("b.graphql", "type User { name: String }"),
        )
        MergeResolver().resolve(index)
        first = index.get((DefinitionKind.OBJECT, "User"))[0]
        assert [f.name for f in first.fields] == ["id"]


class TestExtensions:
    """Tests for extension folding."""

    def test_extension_adds_fields(self, resolve):
        merged = resolve(
            ("a.graphql", "type User { id: ID }"),
            ("b.graphql", "extend type User { name: String }"),
        )
        user = merged.get(DefinitionKind.OBJECT, "User")
        assert user.is_extension is False
        assert [f.name for f in user.fields] == ["id", "name"]

    def test_extension_before_base(self, resolve):
        merged = resolve(
            ("a.graphql", "extend type Query { users: [ID] }"),
            ("b.graphql", "type Query { me: ID }\ntype Other { id: ID }"),
        )
        assert [d.name for d in merged] == ["Query", "Other"]
        query = merged.get(DefinitionKind.OBJECT, "Query")
        assert [f.name for f in query.fields] == ["me", "users"]

    def test_dangling_extension(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(("a.graphql", "extend type User { name: String }"))
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, DanglingExtension)
        assert conflict.name == "User"
        assert conflict.sources == ["a.graphql"]

    def test_extension_of_other_kind_is_dangling(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "type User { id: ID }"),
                ("b.graphql", "extend interface User { name: String }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, DanglingExtension)
        assert conflict.kind is DefinitionKind.INTERFACE

    def test_extension_field_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "type User { id: ID }"),
                ("b.graphql", "extend type User { id: Int }"),
            )
        assert isinstance(conflicts_of(exc_info)[0], FieldConflict)

    def test_dangling_schema_extension(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(("a.graphql", "extend schema @link(url: \"x\")"))
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, DanglingExtension)
        assert conflict.kind is DefinitionKind.SCHEMA


class TestOtherKinds:
    """Tests for scalar, union, enum, input, directive and schema rules."""

    def test_scalar_directives_collapse(self, resolve):
        merged = resolve(
            ("a.graphql", 'scalar URL @specifiedBy(url: "u")'),
            ("b.graphql", 'scalar URL @specifiedBy(url: "u") @tag(name: "x")'),
        )
        scalar = merged.get(DefinitionKind.SCALAR, "URL")
        assert [d.name for d in scalar.directives] == ["specifiedBy", "tag"]

    def test_union_members(self, resolve):
        merged = resolve(
            ("a.graphql", "union Result = User | Post"),
            ("b.graphql", "union Result = Post | Comment"),
        )
        assert merged.get(DefinitionKind.UNION, "Result").members == ["User", "Post", "Comment"]

    def test_enum_values_without_duplicates(self, resolve):
        merged = resolve(
            ("a.graphql", "enum Color { RED GREEN }"),
            ("b.graphql", "enum Color { GREEN BLUE }"),
        )
        assert [v.name for v in merged.get(DefinitionKind.ENUM, "Color").values] == [
            "RED",
            "GREEN",
            "BLUE",
        ]

    def test_enum_value_directives_unioned(self, resolve):
        merged = resolve(
            ("a.graphql", 'enum Color { RED @deprecated(reason: "old") }'),
            ("b.graphql", 'enum Color { RED @deprecated(reason: "old") @tag }'),
        )
        red = merged.get(DefinitionKind.ENUM, "Color").values[0]
        assert [d.name for d in red.directives] == ["deprecated", "tag"]

    def test_enum_value_directive_kept_once_per_name(self, resolve):
        merged = resolve(
            ("a.graphql", 'enum Color { RED @deprecated(reason: "a") }'),
            ("b.graphql", 'enum Color { RED @deprecated(reason: "b") }'),
        )
        red = merged.get(DefinitionKind.ENUM, "Color").values[0]
        assert red.directives == [IRDirective("deprecated", (("reason", '"a"'),))]

    def test_input_field_union(self, resolve):
        merged = resolve(
            ("a.graphql", "input Filter { limit: Int }"),
            ("b.graphql", "input Filter { offset: Int limit: Int = 10 }"),
        )
        fields = merged.get(DefinitionKind.INPUT_OBJECT, "Filter").fields
        assert [(f.name, f.default_value) for f in fields] == [("limit", "10"), ("offset", None)]

    def test_input_field_type_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "input Filter { limit: Int }"),
                ("b.graphql", "input Filter { limit: Int! }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, FieldConflict)
        assert conflict.kind is DefinitionKind.INPUT_OBJECT

    def test_input_default_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "input Filter { limit: Int = 10 }"),
                ("b.graphql", "input Filter { limit: Int = 20 }"),
            )
        assert "default" in conflicts_of(exc_info)[0].message

    def test_identical_directive_definitions(self, resolve):
        merged = resolve(
            ("a.graphql", "directive @auth(role: String) on OBJECT | FIELD_DEFINITION"),
            ("b.graphql", "directive @auth(role: String) on FIELD_DEFINITION | OBJECT"),
        )
        assert merged.get(DefinitionKind.DIRECTIVE, "auth").locations == [
            "OBJECT",
            "FIELD_DEFINITION",
        ]

    @pytest.mark.parametrize(
        "other",
        [
            "directive @auth(role: Int) on OBJECT",
            "directive @auth(role: String) on FIELD_DEFINITION",
            "directive @auth(role: String) repeatable on OBJECT",
        ],
    )
    def test_directive_conflict(self, resolve, other):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "directive @auth(role: String) on OBJECT"),
                ("b.graphql", other),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, DirectiveConflict)
        assert conflict.name == "auth"
        assert conflict.sources == ["a.graphql", "b.graphql"]

    def test_schema_union(self, resolve):
        merged = resolve(
            ("a.graphql", "schema { query: Query }"),
            ("b.graphql", "schema { mutation: Mutation query: Query }"),
            ("c.graphql", "extend schema { subscription: Subscription }"),
        )
        assert merged.schema.operation_types == {
            "query": "Query",
            "mutation": "Mutation",
            "subscription": "Subscription",
        }

    def test_schema_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "schema { query: Query }"),
                ("b.graphql", "schema { query: RootQuery }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, SchemaConflict)
        assert conflict.operation == "query"
        assert conflict.sources == ["a.graphql", "b.graphql"]

    def test_type_kind_conflict(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "type Status { id: ID }"),
                ("b.graphql", "enum Status { OK }"),
            )
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, TypeKindConflict)
        assert conflict.kinds == [DefinitionKind.OBJECT, DefinitionKind.ENUM]
        assert conflict.sources == ["a.graphql", "b.graphql"]

    def test_directive_and_type_share_name(self, resolve):
        merged = resolve(("a.graphql", "directive @User on FIELD\ntype User { id: ID }"))
        assert len(merged) == 2


class TestDuplicatesWithinDefinition:
    """Tests that members repeated inside one definition follow the same rules."""

    def test_duplicate_field_with_other_type(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(("a.graphql", "type User { id: ID id: String }"))
        (conflict,) = conflicts_of(exc_info)
        assert isinstance(conflict, FieldConflict)
        assert conflict.field_name == "id"
        assert conflict.sources == ["a.graphql"]

    def test_duplicate_input_field_with_other_type(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(("a.graphql", "input Filter { limit: Int limit: String }"))
        assert isinstance(conflicts_of(exc_info)[0], FieldConflict)

    def test_duplicate_enum_value_collapses(self, resolve):
        merged = resolve(("a.graphql", "enum C { RED GREEN RED }"))
        assert [v.name for v in merged.get(DefinitionKind.ENUM, "C").values] == ["RED", "GREEN"]

    def test_duplicate_identical_field_collapses(self, resolve):
        merged = resolve(("a.graphql", "type User implements Node & Node { id: ID id: ID }"))
        user = merged.get(DefinitionKind.OBJECT, "User")
        assert [f.name for f in user.fields] == ["id"]
        assert user.interfaces == ["Node"]

    def test_duplicate_union_member_collapses(self, resolve):
        merged = resolve(("a.graphql", "union R = A | B | A"))
        assert merged.get(DefinitionKind.UNION, "R").members == ["A", "B"]


class TestConflictAggregation:
    """Tests that every conflict of a run is reported at once."""

    def test_all_conflicts_reported(self, resolve):
        with pytest.raises(MergeError) as exc_info:
            resolve(
                ("a.graphql", "type User { id: ID }\nschema { query: Query }"),
                ("b.graphql", "type User { id: String }\nschema { query: Root }"),
                ("c.graphql", "extend enum Missing { A }"),
            )
        conflicts = conflicts_of(exc_info)
        assert [type(c) for c in conflicts] == [FieldConflict, SchemaConflict, DanglingExtension]
        assert exc_info.value.conflicts == conflicts
        assert "3 error(s)" in str(exc_info.value)


class TestUnionDirectives:
    """Tests for the directive union helper."""

    def test_union_by_name_and_arguments(self):
        current = [IRDirective("tag", (("name", '"a"'),))]
        union_directives(
            current,
            [IRDirective("tag", (("name", '"a"'),)), IRDirective("tag", (("name", '"b"'),))],
        )
        assert current == [
            IRDirective("tag", (("name", '"a"'),)),
            IRDirective("tag", (("name", '"b"'),)),
        ]

    def test_type_refs_compare_structurally(self):
        assert NamedType("ID") == NamedType("ID")
        assert NamedType("ID") != NamedType("String")
