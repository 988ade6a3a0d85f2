from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Display value substituted for any field missing from a report
ABSENT = "N/A"

_KIND_BY_SUFFIX = {
    ".xml": "xml",
    ".zip": "zip",
    ".gz": "gzip",
}


def kind_for_path(path: Path, is_dir: bool = False) -> str:
    """Maps a path to its container kind: xml, zip, gzip or unsupported."""
    if is_dir:
        return "unsupported"
    return _KIND_BY_SUFFIX.get(path.suffix.lower(), "unsupported")


@dataclass(frozen=True)
class SourceFile:
    """One candidate entry of the report directory."""

    path: Path
    kind: str
    size: int
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class ReportMetadata:
    report_id: str
    period_begin: str
    period_end: str


ALIGNMENT_FIELDS = ("dkim_alignment", "spf_alignment")
RESULT_FIELDS = ("dkim_result", "spf_result")


def classify_alignment(value: str) -> str:
    if value == ABSENT:
        return "none"
    if value == "fail":
        return "fail"
    return "pass"


def classify_result(value: str) -> str:
    if value == ABSENT:
        return "none"
    if value in ("fail", "softfail"):
        return value
    return "pass"


def classify_value(value: str) -> str:
    return "none" if value == ABSENT else "value"


@dataclass(frozen=True)
class RecordView:
    """One <record> of an aggregate report, flattened for display.

    Every field is always set; missing source data holds ``ABSENT``.
    """

    source_ip: str = ABSENT
    message_count: str = ABSENT
    disposition: str = ABSENT
    dkim_alignment: str = ABSENT
    spf_alignment: str = ABSENT
    header_from: str = ABSENT
    dkim_domain: str = ABSENT
    dkim_result: str = ABSENT
    spf_domain: str = ABSENT
    spf_result: str = ABSENT

    def category(self, field_name: str) -> str:
        """Returns the display category (pass/fail/softfail/value/none) of a field."""
        value = getattr(self, field_name)
        if field_name in ALIGNMENT_FIELDS:
            return classify_alignment(value)
        if field_name in RESULT_FIELDS:
            return classify_result(value)
        return classify_value(value)
