"""Text exports of effective segments (CSV, JSON, Markdown invoice)."""

from .csv_export import CSV_COLUMNS, TAG_SEPARATOR, export_csv, segment_row, sort_for_export
from .json_export import build_export_document, export_json, segment_to_dict
from .markdown import export_invoice_markdown, format_invoice_duration
from .schema import EXPORT_JSON_SCHEMA, validate_export_document

__all__ = [
    "CSV_COLUMNS",
    "EXPORT_JSON_SCHEMA",
    "TAG_SEPARATOR",
    "build_export_document",
    "export_csv",
    "export_invoice_markdown",
    "format_invoice_duration",
    "export_json",
    "segment_row",
    "segment_to_dict",
    "sort_for_export",
    "validate_export_document",
]
