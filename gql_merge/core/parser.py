"""GraphQL SDL parser using graphql-core.

Parses one SDL document and produces a list of IR definitions.
"""

import logging
from typing import Any

from graphql import (
    DirectiveDefinitionNode,
    DirectiveNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    ExecutableDefinitionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    Source,
    TokenKind,
    TypeExtensionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    parse,
    print_ast,
)
from graphql.error import GraphQLSyntaxError

from .errors import ParseError
from .ir import (
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
    NamedType,
    NonNullType,
    TypeRef,
)
from .options import MergeOptions

logger = logging.getLogger(__name__)


class SchemaParser:
    """Parses SDL documents into IR definitions.

    A parser holds no state between documents besides its options, so one
    instance may be reused for any number of ``parse`` calls.
    """

    def __init__(self, options: MergeOptions | None = None):
        self.options = options or MergeOptions()

    def parse(self, text: str, source_name: str = "<input>") -> list[IRDefinition]:
        """Parse one SDL document.

        Args:
            text: Raw SDL text
            source_name: Name used in error messages and stored on each definition

        Returns:
            The document's definitions in declaration order

        Raises:
            ParseError: If the text is not a valid type-system document
        """
        try:
            ast = parse(Source(text, source_name))
        except GraphQLSyntaxError as e:
            location = e.locations[0] if e.locations else None
            raise ParseError(
                source_name,
                location.line if location else 0,
                location.column if location else 0,
                e.message,
            ) from e

        definitions = []
        for node in ast.definitions:
            if isinstance(node, ExecutableDefinitionNode):
                token = node.loc.start_token if node.loc else None
                raise ParseError(
                    source_name,
                    token.line if token else 0,
                    token.column if token else 0,
                    "Executable definitions are not allowed in schema documents.",
                )
            definition = self._process_definition(node)
            definition.source = source_name
            definitions.append(definition)

        logger.debug(f"Parsed {len(definitions)} definitions from {source_name}")
        return definitions

    def _process_definition(self, node: Any) -> IRDefinition:
        if isinstance(node, SchemaDefinitionNode):
            return self._process_schema(node)
        elif isinstance(node, SchemaExtensionNode):
            return self._process_schema(node, is_extension=True)
        elif isinstance(node, (ScalarTypeDefinitionNode, ScalarTypeExtensionNode)):
            return IRScalar(**self._common(node))
        elif isinstance(node, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
            return IRObject(
                **self._common(node),
                interfaces=[i.name.value for i in node.interfaces or ()],
                fields=self._process_fields(node.fields or ()),
            )
        elif isinstance(node, (InterfaceTypeDefinitionNode, InterfaceTypeExtensionNode)):
            return IRInterface(
                **self._common(node),
                interfaces=[i.name.value for i in node.interfaces or ()],
                fields=self._process_fields(node.fields or ()),
            )
        elif isinstance(node, (UnionTypeDefinitionNode, UnionTypeExtensionNode)):
            return IRUnion(
                **self._common(node),
                members=[t.name.value for t in node.types or ()],
            )
        elif isinstance(node, (EnumTypeDefinitionNode, EnumTypeExtensionNode)):
            return IREnum(
                **self._common(node),
                values=[
                    IREnumValue(
                        name=v.name.value,
                        description=self._description(v),
                        directives=self._process_directives(v.directives),
                    )
                    for v in node.values or ()
                ],
            )
        elif isinstance(node, (InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode)):
            return IRInputObject(
                **self._common(node),
                fields=self._process_input_values(node.fields or ()),
            )
        elif isinstance(node, DirectiveDefinitionNode):
            return IRDirectiveDefinition(
                name=node.name.value,
                description=self._description(node),
                arguments=self._process_input_values(node.arguments or ()),
                locations=[loc.value for loc in node.locations],
                repeatable=node.repeatable,
            )
        raise TypeError(f"Unsupported definition node: {type(node).__name__}")

    def _common(self, node: Any) -> dict[str, Any]:
        """Attributes shared by every named type definition or extension."""
        is_extension = isinstance(node, TypeExtensionNode)
        return {
            "name": node.name.value,
            "description": None if is_extension else self._description(node),
            "directives": self._process_directives(node.directives),
            "is_extension": is_extension,
        }

    def _process_schema(
        self, node: SchemaDefinitionNode | SchemaExtensionNode, is_extension: bool = False
    ) -> IRSchemaDefinition:
        return IRSchemaDefinition(
            description=None if is_extension else self._description(node),
            directives=self._process_directives(node.directives),
            is_extension=is_extension,
            operation_types={
                op.operation.value: op.type.name.value
                for op in node.operation_types or ()
            },
        )

    def _process_fields(self, field_nodes) -> list[IRField]:
        """Process field definitions into the IRField list."""
        return [
            IRField(
                name=node.name.value,
                type=self._type_ref(node.type),
                arguments=self._process_input_values(node.arguments or ()),
                description=self._description(node),
                directives=self._process_directives(node.directives),
            )
            for node in field_nodes
        ]

    def _process_input_values(
        self, value_nodes: list[InputValueDefinitionNode]
    ) -> list[IRInputValue]:
        return [
            IRInputValue(
                name=node.name.value,
                type=self._type_ref(node.type),
                default_value=print_ast(node.default_value)
                if node.default_value
                else None,
                description=self._description(node),
                directives=self._process_directives(node.directives),
            )
            for node in value_nodes
        ]

    @staticmethod
    def _process_directives(directive_nodes: list[DirectiveNode] | None) -> list[IRDirective]:
        return [
            IRDirective(
                name=node.name.value,
                arguments=tuple(
                    (arg.name.value, print_ast(arg.value)) for arg in node.arguments or ()
                ),
            )
            for node in directive_nodes or ()
        ]

    def _type_ref(self, type_node: TypeNode) -> TypeRef:
        if isinstance(type_node, NonNullTypeNode):
            return NonNullType(self._type_ref(type_node.type))
        if isinstance(type_node, ListTypeNode):
            return ListType(self._type_ref(type_node.type))

        assert isinstance(type_node, NamedTypeNode), f"Expected NamedTypeNode, got {type(type_node)}"
        return NamedType(type_node.name.value)

    def _description(self, node: Any) -> str | None:
        """Return the string description of a node, or its leading comments.

        Comment lines count only when each one fills its own line and the
        last one sits directly above the node.
        """
        if node.description:
            return node.description.value
        if not self.options.comment_descriptions or node.loc is None:
            return None

        token = node.loc.start_token
        lines: list[str] = []
        expected_line = token.line - 1
        comment = token.prev
        while (
            comment is not None
            and comment.kind == TokenKind.COMMENT
            and comment.line == expected_line
        ):
            before = comment.prev
            if before is not None and before.kind != TokenKind.SOF and before.line == comment.line:
                # Trailing comment of the previous element
                break
            lines.append(_strip_comment(comment.value))
            expected_line -= 1
            comment = before

        text = "\n".join(reversed(lines)).strip("\n")
        return text or None


def _strip_comment(value: str | None) -> str:
    value = (value or "").rstrip()
    return value[1:] if value.startswith(" ") else value


def parse_document(
    text: str, source_name: str = "<input>", options: MergeOptions | None = None
) -> list[IRDefinition]:
    """Parse one SDL document into IR definitions."""
    return SchemaParser(options).parse(text, source_name)
