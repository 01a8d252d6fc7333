"""Export package."""

from finance_tracker.export.csv_export import (
    CSV_HEADER,
    export_csv,
    export_filename,
    format_money,
    format_plain_amount,
)

__all__ = [
    "CSV_HEADER",
    "export_csv",
    "export_filename",
    "format_money",
    "format_plain_amount",
]
