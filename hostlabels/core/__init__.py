"""Core label store, codec and placeholder expansion."""

from .codec import (
    dump_labels,
    format_labels,
    parse_labels,
    parse_labels_text,
    write_labels,
)
from .exceptions import (
    LabelBufferOverflowError,
    LabelError,
    LabelExpansionOverflowError,
    LabelFileError,
)
from .expansion import ExpansionResult, TemplateExpander, expand_label
from .labels import (
    Label,
    LabelStore,
    duplicate_labels,
    free_labels,
    get_label,
)

__all__ = [
    "ExpansionResult",
    "Label",
    "LabelBufferOverflowError",
    "LabelError",
    "LabelExpansionOverflowError",
    "LabelFileError",
    "LabelStore",
    "TemplateExpander",
    "dump_labels",
    "duplicate_labels",
    "expand_label",
    "format_labels",
    "free_labels",
    "get_label",
    "parse_labels",
    "parse_labels_text",
    "write_labels",
]
