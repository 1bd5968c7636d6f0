"""Serialization for tasktrack: persistence blob, exports and import."""

from tasktrack.serialization.codec import serialize_tasks, deserialize_tasks, decode_tasks
from tasktrack.serialization.export import export_to_json, export_to_csv, export_filename
from tasktrack.serialization.importer import import_from_json, parse_import_document

__all__ = [
    "serialize_tasks",
    "deserialize_tasks",
    "decode_tasks",
    "export_to_json",
    "export_to_csv",
    "export_filename",
    "import_from_json",
    "parse_import_document",
]
