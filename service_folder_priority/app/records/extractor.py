"""
Path extraction from record fields.

The field that carries a document's storage path is not fixed across
indexers, so extraction is layered: well-known field names first, then a
scan for any value that looks like a path.
"""

import json
from typing import Any, Dict, Optional, Sequence

# Checked in this order, by exact (case-sensitive) name
PATH_FIELD_CANDIDATES = (
    "storagePath",
    "metadata_storage_path",
    "path",
    "blobUri",
    "blobUriOriginal",
    "data",
)

PATH_SEPARATOR = "/"


def stringify(value: Any) -> str:
    """Render a field value as text; non-strings become compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


class FieldNameExtractor:
    """Return the first known path field that is present and not null."""

    def __init__(self, candidates: Sequence[str] = PATH_FIELD_CANDIDATES):
        self.candidates = tuple(candidates)

    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        for name in self.candidates:
            value = data.get(name)
            if value is not None:
                return stringify(value)
        return None


class SeparatorScanExtractor:
    """
    Return the first value whose text contains the path separator.

    Fields are visited in the mapping's iteration order; when several fields
    qualify, which one wins depends on that order only.
    """

    def __init__(self, separator: str = PATH_SEPARATOR):
        self.separator = separator

    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        for value in data.values():
            if value is None:
                continue
            text = stringify(value)
            if self.separator in text:
                return text
        return None


class PathExtractor:
    """Known field names first, separator scan second."""

    def __init__(
        self,
        field_names: Optional[FieldNameExtractor] = None,
        scan: Optional[SeparatorScanExtractor] = None,
    ):
        self.field_names = field_names or FieldNameExtractor()
        self.scan = scan or SeparatorScanExtractor()

    def extract(self, data: Optional[Dict[str, Any]]) -> Optional[str]:
        if not data:
            return None

        path = self.field_names.extract(data)
        if path is not None:
            return path
        return self.scan.extract(data)
