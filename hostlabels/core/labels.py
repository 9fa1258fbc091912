"""Label model and the ordered label store."""

import json
from collections.abc import Iterable, Iterator
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Separates the quoted key from the value in a label line.
KEY_DELIMITER = '":'


class Label(BaseModel):
    """A single host label."""

    model_config = ConfigDict(validate_assignment=True)

    key: str = Field(..., description="Label name")
    value: str = Field(..., description="Raw value, may contain $(token) placeholders")
    hidden: bool = Field(default=False, description="Excluded from normal display")

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys must be non-empty and must not break the line grammar."""
        if not v:
            raise ValueError("Label key must not be empty")
        if KEY_DELIMITER in v:
            raise ValueError(f"Label key must not contain {KEY_DELIMITER!r}: {v}")
        if "\n" in v:
            raise ValueError("Label key must not contain a newline")
        return v

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        if "\n" in v:
            raise ValueError("Label value must not contain a newline")
        return v


class LabelStore:
    """
    Ordered collection of labels.

    Keys are not required to be unique. Lookups resolve to the first
    matching entry in store order, so when a key repeats the earliest
    entry wins.

    The store does no locking; callers sharing one between threads must
    serialize access themselves.
    """

    def __init__(self, labels: Optional[Iterable[Label]] = None):
        self._labels: list[Label] = list(labels) if labels else []

    @classmethod
    def from_labels(cls, labels: Iterable[Label]) -> "LabelStore":
        """Build a store from labels, copying each one."""
        return cls(label.model_copy() for label in labels)

    def add(
        self,
        key: str,
        value: str,
        hidden: bool = False,
        overwrite: bool = False,
    ) -> "LabelStore":
        """
        Add a label, or update an existing one in place.

        Args:
            key: Label key
            value: Raw label value
            hidden: Whether the label is hidden
            overwrite: Update the first entry with the same key instead of
                appending. Appends when no entry matches.

        Returns:
            This store, so calls can be chained

        Raises:
            pydantic.ValidationError: If key or value violate the line grammar
        """
        if overwrite:
            for label in self._labels:
                if label.key == key:
                    updated = Label(key=key, value=value, hidden=hidden)
                    label.value = updated.value
                    label.hidden = updated.hidden
                    return self

        self._labels.append(Label(key=key, value=value, hidden=hidden))
        return self

    def get(self, key: str) -> Optional[str]:
        """Return the value of the first label with this key, or None."""
        for label in self._labels:
            if label.key == key:
                return label.value
        return None

    def duplicate(self) -> "LabelStore":
        """Return an independent deep copy of this store."""
        return LabelStore.from_labels(self._labels)

    def free(self) -> None:
        """Drop every label."""
        self._labels.clear()

    def keys(self) -> list[str]:
        """Keys in store order, repeats included."""
        return [label.key for label in self._labels]

    def visible(self) -> list[Label]:
        """Labels that are not hidden."""
        return [label for label in self._labels if not label.hidden]

    def to_dict(self) -> dict[str, str]:
        """Map keys to values; the first entry wins for repeated keys."""
        result: dict[str, str] = {}
        for label in self._labels:
            result.setdefault(label.key, label.value)
        return result

    def to_json(self, indent: int = 2) -> str:
        """Serialize labels (raw values) to a JSON array."""
        return json.dumps(
            [label.model_dump(mode="json") for label in self._labels], indent=indent
        )

    def to_yaml(self) -> str:
        """Serialize labels (raw values) to a YAML list."""
        data = [label.model_dump(mode="json") for label in self._labels]
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels)

    def __getitem__(self, index: int) -> Label:
        return self._labels[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelStore):
            return NotImplemented
        return self._labels == other._labels

    def __repr__(self) -> str:
        return f"LabelStore({self._labels!r})"


def get_label(store: Optional[LabelStore], key: str) -> Optional[str]:
    """Look up a key in a store that may be absent."""
    if store is None:
        return None
    return store.get(key)


def duplicate_labels(store: Optional[LabelStore]) -> Optional[LabelStore]:
    """Deep-copy a store; an absent store yields None."""
    if store is None:
        return None
    return store.duplicate()


def free_labels(store: Optional[LabelStore]) -> None:
    """Release a store's labels. Safe to call with None."""
    if store is not None:
        store.free()
