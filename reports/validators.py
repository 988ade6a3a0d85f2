from reports.errors import ValidationError
from reports.models import ValidationResult
from reports.parser import DocumentNode

EMPTY_DOCUMENT_REASON = "XML document is empty"
MISSING_METADATA_REASON = "XML missing required 'report_metadata' element"


def _root_tag(document: DocumentNode) -> str:
    raw = document.raw
    if isinstance(raw, dict) and raw:
        return next(iter(raw))
    return ""


def check_report_structure(document: DocumentNode) -> ValidationResult:
    """
    Checks a parsed document has the minimal DMARC report structure.

    Checks run in order and stop at the first failure: the document is not
    empty, its root element is 'feedback', and it has 'report_metadata'.

    Args:
        document: The parsed report tree

    Returns:
        ValidationResult with the reason of the first failed check
    """
    if document is None or document.is_empty:
        return ValidationResult(valid=False, reason=EMPTY_DOCUMENT_REASON)

    if not document.has("feedback"):
        return ValidationResult(
            valid=False,
            reason=(
                f"XML does not appear to be a DMARC report "
                f"(root element is '{_root_tag(document)}', expected 'feedback')"
            ),
        )

    if document.find("feedback/report_metadata") is None:
        return ValidationResult(valid=False, reason=MISSING_METADATA_REASON)

    return ValidationResult(valid=True)


def validate_report_structure(document: DocumentNode) -> None:
    """
    Validates a parsed document appears to be a DMARC report.

    Raises:
        ValidationError: Carrying the reason of the first failed check
    """
    result = check_report_structure(document)
    if not result.valid:
        raise ValidationError(result.reason)
