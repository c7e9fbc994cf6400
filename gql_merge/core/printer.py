"""Schema printer for merged IR.

Renders Jinja2 templates to produce SDL text, one template per definition
kind. Small fragments (type references, directive lists, argument lists,
descriptions) are produced by filters registered on the environment.

Available templates:
    - scalar.graphql.j2
    - object.graphql.j2 (object types and interfaces)
    - union.graphql.j2
    - enum.graphql.j2
    - input.graphql.j2
    - directive.graphql.j2
    - schema.graphql.j2
"""

from typing import Iterable, Sequence

from graphql.language.block_string import print_block_string
from jinja2 import Environment, PackageLoader, StrictUndefined

from .ir import (
    DefinitionKind,
    IRDefinition,
    IRDirective,
    IRInputValue,
    MergedSchema,
)
from .options import MergeOptions

TEMPLATES = {
    DefinitionKind.SCALAR: "scalar.graphql.j2",
    DefinitionKind.OBJECT: "object.graphql.j2",
    DefinitionKind.INTERFACE: "object.graphql.j2",
    DefinitionKind.UNION: "union.graphql.j2",
    DefinitionKind.ENUM: "enum.graphql.j2",
    DefinitionKind.INPUT_OBJECT: "input.graphql.j2",
    DefinitionKind.DIRECTIVE: "directive.graphql.j2",
    DefinitionKind.SCHEMA: "schema.graphql.j2",
}

DEFAULT_SEPARATOR = "\n\n"


def print_directive(directive: IRDirective) -> str:
    """Render one directive application, e.g. ``@key(fields: "id")``."""
    if not directive.arguments:
        return f"@{directive.name}"
    args = ", ".join(f"{name}: {value}" for name, value in directive.arguments)
    return f"@{directive.name}({args})"


def print_directives(directives: Sequence[IRDirective]) -> str:
    """Render directive applications, each preceded by a space."""
    return "".join(f" {print_directive(d)}" for d in directives)


def print_implements(interfaces: Sequence[str]) -> str:
    if not interfaces:
        return ""
    return " implements " + " & ".join(interfaces)


def print_description(text: str | None, prefix: str = "") -> str:
    """Render a description as a block string followed by a newline.

    Every non-blank line is prefixed, so the block dedents back to the
    original text when parsed.
    """
    if not text:
        return ""
    lines = print_block_string(text).split("\n")
    return "\n".join(prefix + line if line else line for line in lines) + "\n"


def print_input_value(value: IRInputValue) -> str:
    default = f" = {value.default_value}" if value.default_value is not None else ""
    return f"{value.name}: {value.type}{default}{print_directives(value.directives)}"


class SchemaPrinter:
    """Prints IR definitions back to SDL.

    Example:
        printer = SchemaPrinter(MergeOptions(indent="    "))
        sdl = printer.print_schema(merged, separator="\\n\\n")
    """

    def __init__(self, options: MergeOptions | None = None):
        self.options = options or MergeOptions()
        self.env = Environment(
            loader=PackageLoader("gql_merge", "templates"),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["description"] = print_description
        self.env.filters["directives"] = print_directives
        self.env.filters["implements"] = print_implements
        self.env.filters["input_value"] = print_input_value
        self.env.filters["arguments"] = self.print_arguments

    def print_arguments(self, arguments: Sequence[IRInputValue], prefix: str = "") -> str:
        """Render an argument list.

        Arguments stay on one line unless one of them has a description,
        in which case each goes on its own line one indent deeper than
        ``prefix``.
        """
        if not arguments:
            return ""
        if not any(arg.description for arg in arguments):
            return "(" + ", ".join(print_input_value(arg) for arg in arguments) + ")"

        inner = prefix + self.options.indent
        lines = [
            print_description(arg.description, inner) + inner + print_input_value(arg)
            for arg in arguments
        ]
        return "(\n" + "\n".join(lines) + "\n" + prefix + ")"

    def print_definition(self, definition: IRDefinition) -> str:
        """Render one definition as an SDL block without trailing newline."""
        template = self.env.get_template(TEMPLATES[definition.kind])
        return template.render(definition=definition, indent=self.options.indent).rstrip()

    def print_definitions(
        self, definitions: Iterable[IRDefinition], separator: str = DEFAULT_SEPARATOR
    ) -> str:
        return separator.join(self.print_definition(d) for d in definitions)

    def print_schema(self, merged: MergedSchema, separator: str = DEFAULT_SEPARATOR) -> str:
        """Render a merged schema, joining definition blocks with ``separator``."""
        return self.print_definitions(merged, separator)


def print_schema(
    merged: MergedSchema,
    separator: str = DEFAULT_SEPARATOR,
    options: MergeOptions | None = None,
) -> str:
    """Render a merged schema to SDL text."""
    return SchemaPrinter(options).print_schema(merged, separator)
