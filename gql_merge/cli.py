"""Command-line interface for gql-merge."""

import logging
import os
from pathlib import Path

import click

from .core.errors import MergeError
from .core.merge import merge_documents
from .core.options import MergeOptions
from .core.printer import SchemaPrinter

SCHEMA_EXTENSIONS = (".graphql", ".graphqls", ".gql")


def collect_schema_files(schema_path: Path) -> list[Path]:
    """Collect schema files from a file or, recursively, a directory."""
    if schema_path.is_file():
        return [schema_path]
    files = []
    for root, _, filenames in os.walk(schema_path):
        for filename in filenames:
            if filename.endswith(SCHEMA_EXTENSIONS):
                files.append(Path(root) / filename)
    return sorted(files)


def unescape(value: str) -> str:
    """Turn backslash escapes typed on the command line into characters."""
    return value.encode("latin-1", "backslashreplace").decode("unicode_escape")


@click.group()
@click.version_option(package_name="gql-merge")
def main():
    """Merge GraphQL SDL files into a single schema."""
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    "schemas",
    required=True,
    multiple=True,
    type=click.Path(exists=True),
    help="Schema file or directory to merge. May be repeated.",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(allow_dash=True),
    help="Output file for the merged schema, or '-' for stdout.",
)
@click.option(
    "--separator",
    default="\\n\\n",
    show_default=True,
    help="Text placed between top-level definitions. Backslash escapes are decoded.",
)
@click.option(
    "--indent",
    default="  ",
    help="Indentation unit (default: two spaces). Backslash escapes are decoded.",
)
@click.option(
    "--append-descriptions",
    is_flag=True,
    help="Append differing descriptions instead of keeping the first one.",
)
@click.option(
    "--no-comment-descriptions",
    is_flag=True,
    help="Do not treat '#' comments as descriptions.",
)
@click.option(
    "--workers",
    "-j",
    default=1,
    type=click.IntRange(min=1),
    help="Number of threads used to parse files.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def merge(
    schemas: tuple[str, ...],
    output: str,
    separator: str,
    indent: str,
    append_descriptions: bool,
    no_comment_descriptions: bool,
    workers: int,
    verbose: bool,
):
    """Merge GraphQL schema files into one SDL document.

    Examples:

        gql-merge merge --schema ./schema --output ./schema.graphql

        gql-merge merge -s users.graphql -s orders.graphql -o - --separator "\\n"
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        options = MergeOptions(
            indent=unescape(indent),
            append_descriptions=append_descriptions,
            comment_descriptions=not no_comment_descriptions,
            workers=workers,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--indent")

    files: list[Path] = []
    for schema in schemas:
        files.extend(collect_schema_files(Path(schema)))
    if not files:
        raise click.UsageError("No schema files found (.graphql, .graphqls, .gql).")

    to_stdout = output == "-"
    if verbose and not to_stdout:
        click.echo(f"Merging {len(files)} schema files...")
        for path in files:
            click.echo(f"  {path}")

    documents = [(str(path), path.read_text(encoding="utf-8")) for path in files]
    try:
        merged = merge_documents(documents, options)
    except MergeError as e:
        click.echo(f"Error: {e.message}", err=True)
        for error in e.errors:
            click.echo(f"  {error}", err=True)
        raise SystemExit(1)

    text = SchemaPrinter(options).print_schema(merged, unescape(separator)) + "\n"

    if to_stdout:
        click.echo(text, nl=False)
        return

    output_path = Path(output).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(text)

    if verbose:
        click.echo(f"  Definitions: {len(merged)}")
        click.echo(f"  Types: {len(merged.type_names)}")
    click.echo(f"Done! Merged schema written to {output_path}")


if __name__ == "__main__":
    main()
