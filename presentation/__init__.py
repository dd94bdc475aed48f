from .report import (
    generate_markdown_report,
    generate_section,
    write_report,
)
from .json_api import (
    ReportResponse,
    to_api_response,
    to_dict,
    to_json,
)

__all__ = [
    # Report generation
    "generate_markdown_report",
    "generate_section",
    "write_report",
    # JSON API
    "ReportResponse",
    "to_api_response",
    "to_dict",
    "to_json",
]
