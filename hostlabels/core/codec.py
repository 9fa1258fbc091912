"""Reading, rendering and writing label files.

Label files hold one label per line::

    "key1":value1
    !"key2":value2

A leading ``!`` marks the label hidden. Lines that do not match this
grammar are skipped without error.
"""

import io
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .exceptions import (
    LabelBufferOverflowError,
    LabelExpansionOverflowError,
    LabelFileError,
)
from .expansion import TemplateExpander
from .labels import KEY_DELIMITER, Label, LabelStore

logger = logging.getLogger(__name__)

# Default capacity of a rendered label block.
OS_MAXSTR = 65536

# Lines longer than this (terminator included) are not accepted.
MAX_LINE_LENGTH = OS_MAXSTR - 1

HIDDEN_MARKER = "!"
QUOTE = '"'


def parse_line(line: str) -> Optional[Label]:
    """
    Parse a single label line.

    Args:
        line: One line of a label file, including its terminator

    Returns:
        The Label, or None if the line does not match the grammar
    """
    if line.startswith(HIDDEN_MARKER):
        if not line.startswith(QUOTE, 1):
            return None
        hidden = True
        rest = line[2:]
    elif line.startswith(QUOTE):
        hidden = False
        rest = line[1:]
    else:
        return None

    key, sep, value = rest.partition(KEY_DELIMITER)
    if not sep:
        return None

    end = value.find("\n")
    if end == -1:
        return None

    try:
        return Label(key=key, value=value[:end], hidden=hidden)
    except ValidationError:
        return None


def parse_label_lines(lines: Iterable[str]) -> LabelStore:
    """Build a store from label lines, skipping malformed ones.

    Every accepted line is appended, so repeated keys produce separate
    entries and lookups return the first of them.
    """
    store = LabelStore()
    for lineno, line in enumerate(lines, start=1):
        label = parse_line(line) if len(line) <= MAX_LINE_LENGTH else None
        if label is None:
            if line.strip():
                logger.debug("Skipping malformed label line %d", lineno)
            continue
        store.add(label.key, label.value, label.hidden, overwrite=False)
    return store


def parse_labels_text(text: str) -> LabelStore:
    """Parse label file content held in memory."""
    return parse_label_lines(io.StringIO(text))


def parse_labels(path: Union[str, Path]) -> Optional[LabelStore]:
    """
    Parse labels from a label file.

    Args:
        path: Path to the label file

    Returns:
        LabelStore with the file's labels, or None if the file does not exist

    Raises:
        LabelFileError: If the file exists but cannot be opened, read or
            decoded as UTF-8
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8", newline="\n") as f:
            store = parse_label_lines(f)
    except FileNotFoundError as e:
        logger.debug("No label file at %s: %s", path, e.strerror)
        return None
    except OSError as e:
        logger.error("Cannot open label file %s: %s", path, e.strerror or e)
        raise LabelFileError(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        logger.error("Label file %s is not valid UTF-8: %s", path, e)
        raise LabelFileError(str(path), f"not valid UTF-8: {e.reason}") from e

    logger.debug("Loaded %d labels from %s", len(store), path)
    return store


def _render_line(label: Label, value: str) -> str:
    marker = HIDDEN_MARKER if label.hidden else ""
    return f"{marker}{QUOTE}{label.key}{KEY_DELIMITER}{value}\n"


def format_labels(
    store: LabelStore,
    capacity: int = OS_MAXSTR,
    expander: Optional[TemplateExpander] = None,
) -> str:
    """
    Render labels with their values expanded.

    Args:
        store: Labels to render, in store order
        capacity: Size of the output buffer; the rendered text must stay
            strictly shorter than this
        expander: Placeholder expander; defaults to one using the fact
            provider for this platform

    Returns:
        Rendered label lines

    Raises:
        LabelExpansionOverflowError: If a value does not fit in the
            expander's buffer
        LabelBufferOverflowError: If the rendered text reaches capacity
    """
    if expander is None:
        from ..facts.system import get_default_provider

        expander = TemplateExpander(get_default_provider())

    lines: list[str] = []
    length = 0
    for label in store:
        result = expander.expand(label)
        if result.truncated:
            raise LabelExpansionOverflowError(
                label.key, expander.max_length, result.text
            )
        line = _render_line(label, result.text)
        length += len(line)
        if length >= capacity:
            raise LabelBufferOverflowError(capacity, length)
        lines.append(line)

    return "".join(lines)


def dump_labels(store: LabelStore) -> str:
    """Render labels with their raw, unexpanded values."""
    return "".join(_render_line(label, label.value) for label in store)


def write_labels(store: LabelStore, path: Union[str, Path]) -> None:
    """
    Write raw labels to a label file.

    The file is replaced atomically: content goes to a temporary file in
    the same directory which is then renamed over the target.

    Raises:
        LabelFileError: If the file cannot be written
    """
    path = Path(path)
    content = dump_labels(store)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.error("Cannot write label file %s: %s", path, e.strerror or e)
        raise LabelFileError(str(path), e.strerror or str(e)) from e

    logger.debug("Wrote %d labels to %s", len(store), path)
