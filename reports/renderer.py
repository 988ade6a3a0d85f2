"""
HTML rendering of parsed DMARC reports.

One fragment (a <section>) is rendered per input file; fragments are then
wrapped once in the fixed page header and footer.
"""
from html import escape
from typing import Iterable, Sequence

from reports.models import ABSENT, RecordView, ReportMetadata
from resources.templates import stylesheet, templates

TITLE = "DMARC レポート"
ATTRIBUTION_URL = "https://github.com/burnworks/dmarc-to-html-converter"
ATTRIBUTION_LABEL = "@burnworks/dmarc-to-html-converter"

NO_REPORTS_HEADING = "No valid reports"
NO_REPORTS_MESSAGE = "No DMARC reports could be rendered from the report directory."

# (header label, RecordView field, rendered as a badge)
COLUMNS = (
    ("IP", "source_ip", False),
    ("From", "header_from", False),
    ("Count", "message_count", False),
    ("Disposition", "disposition", False),
    ("DKIM", "dkim_alignment", True),
    ("SPF", "spf_alignment", True),
    ("DKIM Domain", "dkim_domain", False),
    ("DKIM Results", "dkim_result", True),
    ("SPF Domain", "spf_domain", False),
    ("SPF Results", "spf_result", True),
)


def _render_row(record: RecordView) -> str:
    cells = []
    for _, field_name, badge in COLUMNS:
        template = templates["badge-cell" if badge else "value-cell"]
        cells.append(template.substitute(
            category=record.category(field_name),
            value=escape(getattr(record, field_name)),
        ))
    return templates["row"].substitute(cells="\n".join(cells))


def render_report(metadata: ReportMetadata, records: Sequence[RecordView]) -> str:
    """
    Renders one report as an HTML section with a 10-column results table.

    Args:
        metadata: Report id and display period
        records: One RecordView per <record>; may be empty

    Returns:
        The section markup. An empty record list renders a single placeholder row.
    """
    if records:
        rows = "\n".join(_render_row(record) for record in records)
    else:
        rows = templates["placeholder-row"].substitute(columns=len(COLUMNS), value=ABSENT)
    header_cells = "\n".join(
        templates["header-cell"].substitute(label=label) for label, _, _ in COLUMNS
    )
    return templates["report-section"].substitute(
        report_id=escape(metadata.report_id),
        period_begin=escape(metadata.period_begin),
        period_end=escape(metadata.period_end),
        header_cells=header_cells,
        rows=rows,
    )


def render_error(filename: str, message: str) -> str:
    """Renders the section shown in place of a report that failed to process."""
    return templates["error-section"].substitute(
        filename=escape(filename),
        message=escape(message),
    )


def render_no_reports() -> str:
    return templates["notice-section"].substitute(
        heading=escape(NO_REPORTS_HEADING),
        message=escape(NO_REPORTS_MESSAGE),
    )


def assemble_document(fragments: Iterable[str]) -> str:
    """Wraps the rendered sections, in order, in the page header and footer."""
    header = templates["document-header"].substitute(title=TITLE, stylesheet=stylesheet)
    footer = templates["document-footer"].substitute(
        attribution_url=ATTRIBUTION_URL,
        attribution_label=ATTRIBUTION_LABEL,
    )
    return header + "".join(fragments) + footer


def render_failure_document(reason: str) -> str:
    """Renders the standalone page written when the whole run fails."""
    return assemble_document([
        templates["notice-section"].substitute(
            heading="Failed to generate DMARC report",
            message=escape(reason),
        )
    ])
