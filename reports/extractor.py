from reports.models import ABSENT, RecordView, ReportMetadata
from reports.parser import DocumentNode
from reports.timestamps import to_jst_display

# RecordView field -> path inside a <record> element
RECORD_FIELDS = {
    "source_ip": "row/source_ip",
    "message_count": "row/count",
    "disposition": "row/policy_evaluated/disposition",
    "dkim_alignment": "row/policy_evaluated/dkim",
    "spf_alignment": "row/policy_evaluated/spf",
    "header_from": "identifiers/header_from",
    "dkim_domain": "auth_results/dkim/domain",
    "dkim_result": "auth_results/dkim/result",
    "spf_domain": "auth_results/spf/domain",
    "spf_result": "auth_results/spf/result",
}


def _value(node: DocumentNode, path: str) -> str:
    value = node.get(path)
    return ABSENT if value is None else value


def extract_metadata(document: DocumentNode) -> ReportMetadata:
    """Pulls the report id and JST-formatted date range from report_metadata."""
    return ReportMetadata(
        report_id=_value(document, "feedback/report_metadata/report_id"),
        period_begin=to_jst_display(document.get("feedback/report_metadata/date_range/begin")),
        period_end=to_jst_display(document.get("feedback/report_metadata/date_range/end")),
    )


def extract_record(record: DocumentNode) -> RecordView:
    return RecordView(**{name: _value(record, path) for name, path in RECORD_FIELDS.items()})


def extract_records(document: DocumentNode) -> list[RecordView]:
    """
    Flattens every <record> of the report into a RecordView.

    Only the first <dkim> and <spf> auth result of a record is shown. A report
    without records yields an empty list.
    """
    return [extract_record(record) for record in document.find_all("feedback/record")]
