"""Merge engine configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MergeOptions(BaseModel):
    """Options shared by the parser, resolver and printer.

    Example:
        options = MergeOptions(indent="    ", append_descriptions=True)
        merge("\\n\\n", documents, options)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    indent: str = "  "
    # Keep the first description only unless enabled
    append_descriptions: bool = False
    # Treat whole-line "#" comments above an element as its description
    comment_descriptions: bool = True
    workers: int = Field(default=1, ge=1)
    max_parse_errors: int = Field(default=10, ge=1)

    @field_validator("indent")
    @classmethod
    def _check_indent(cls, value: str) -> str:
        if not value or value.strip(" \t"):
            raise ValueError("indent must be a non-empty run of spaces or tabs")
        return value
