"""Output module for exporting ranked matches."""

from skillswap.output.export import (
    export_csv,
    export_json,
    export_matches,
)

__all__ = [
    "export_csv",
    "export_json",
    "export_matches",
]
