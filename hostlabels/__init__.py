"""Hostlabels - host metadata labels with live system fact expansion."""

__version__ = "0.1.0"

from .core.codec import format_labels, parse_labels
from .core.labels import Label, LabelStore

__all__ = ["Label", "LabelStore", "format_labels", "parse_labels"]
