"""Engine entry points: parse, index, resolve and print in one call."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from .errors import MergeError, ParseError
from .index import DefinitionIndex
from .ir import IRDefinition, MergedSchema
from .options import MergeOptions
from .parser import SchemaParser
from .printer import DEFAULT_SEPARATOR, SchemaPrinter
from .resolver import MergeResolver

logger = logging.getLogger(__name__)

Document = tuple[str, str]


def parse_documents(
    documents: Sequence[Document], options: MergeOptions | None = None
) -> list[list[IRDefinition]]:
    """Parse every (source_name, text) document, keeping input order.

    Documents are parsed on ``options.workers`` threads when more than one
    is configured. All documents are attempted before failing, so the
    caller sees up to ``options.max_parse_errors`` errors at once.

    Raises:
        MergeError: If any document failed to parse
    """
    options = options or MergeOptions()
    parser = SchemaParser(options)

    def parse_one(document: Document) -> list[IRDefinition] | ParseError:
        source_name, text = document
        try:
            return parser.parse(text, source_name)
        except ParseError as e:
            return e

    if options.workers > 1 and len(documents) > 1:
        with ThreadPoolExecutor(max_workers=options.workers) as executor:
            results = list(executor.map(parse_one, documents))
    else:
        results = [parse_one(document) for document in documents]

    errors = [r for r in results if isinstance(r, ParseError)]
    if errors:
        raise MergeError(
            f"Failed to parse {len(errors)} of {len(documents)} documents",
            errors[: options.max_parse_errors],
        )
    return results


def merge_documents(
    documents: Sequence[Document], options: MergeOptions | None = None
) -> MergedSchema:
    """Merge SDL documents into a MergedSchema without printing it.

    Raises:
        MergeError: On parse errors or merge conflicts
    """
    options = options or MergeOptions()
    index = DefinitionIndex()
    for definitions in parse_documents(documents, options):
        index.add(definitions)
    merged = MergeResolver(options).resolve(index)
    logger.info(f"Merged {len(documents)} documents into {len(merged)} definitions")
    return merged


def merge(
    separator: str = DEFAULT_SEPARATOR,
    documents: Sequence[Document] = (),
    options: MergeOptions | None = None,
) -> str:
    """Merge SDL documents and return the merged schema as SDL text.

    Args:
        separator: Text placed between printed top-level definitions
        documents: (source_name, text) pairs, merged in the given order
        options: Engine options; defaults to MergeOptions()

    Returns:
        The merged schema

    Raises:
        MergeError: On parse errors or merge conflicts

    Example:
        sdl = merge("\\n\\n", [("a.graphql", "type A { id: ID }")])
    """
    merged = merge_documents(documents, options)
    return SchemaPrinter(options).print_schema(merged, separator)
