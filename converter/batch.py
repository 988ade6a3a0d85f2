import asyncio
import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Sequence

from config import config
from reports.errors import DirectoryError, ReportError, UnsupportedFormatError
from reports.extractor import extract_metadata, extract_records
from reports.models import SourceFile, kind_for_path
from reports.parser import parse_report
from reports.readers import read_report_text
from reports.renderer import (
    assemble_document,
    render_error,
    render_failure_document,
    render_no_reports,
    render_report,
)
from reports.validators import validate_report_structure

logger = logging.getLogger(__name__)


def list_source_files(reports_dir) -> list[SourceFile]:
    """
    Lists every entry of the report directory (no recursion).

    Raises:
        DirectoryError: If the directory is missing, unreadable or empty
    """
    reports_dir = Path(reports_dir)
    if not reports_dir.exists():
        raise DirectoryError(f"Report directory '{reports_dir}' does not exist")
    if not reports_dir.is_dir():
        raise DirectoryError(f"Report path '{reports_dir}' is not a directory")

    source_files = []
    try:
        with os.scandir(reports_dir) as entries:
            for entry in entries:
                path = Path(entry.path)
                try:
                    stat = entry.stat()
                except OSError as e:
                    logger.warning(f"Skipping '{entry.name}': cannot stat entry: {e}")
                    continue
                source_files.append(SourceFile(
                    path=path,
                    kind=kind_for_path(path, is_dir=entry.is_dir()),
                    size=stat.st_size,
                    mtime=stat.st_mtime,
                ))
    except OSError as e:
        raise DirectoryError(f"Failed to list report directory '{reports_dir}': {e}") from e

    if not source_files:
        raise DirectoryError(f"Report directory '{reports_dir}' is empty")
    return source_files


def sort_newest_first(source_files: Sequence[SourceFile]) -> list[SourceFile]:
    """Orders files by modification time, newest first; ties keep name order."""
    by_name = sorted(source_files, key=lambda f: f.name)
    return sorted(by_name, key=lambda f: f.mtime, reverse=True)


def chunked(items: Sequence, size: int) -> Iterator[list]:
    """Yield successive sized chunks from a sequence."""
    if size < 1:
        raise ValueError(f"Batch size must be at least 1 (got {size})")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def process_file(source: SourceFile, stream_threshold: Optional[int] = None) -> Optional[str]:
    """
    Runs one file through read -> parse -> validate -> extract -> render.

    Returns:
        The rendered report section, an error section if any stage failed,
        or None for files of an unsupported format.
    """
    try:
        xml_content = read_report_text(source, stream_threshold)
        document = parse_report(xml_content)
        validate_report_structure(document)
        metadata = extract_metadata(document)
        records = extract_records(document)
    except UnsupportedFormatError as e:
        logger.warning(f"Skipping '{source.name}': {e}")
        return None
    except ReportError as e:
        logger.error(f"Error processing '{source.name}': {e}")
        return render_error(source.name, str(e))
    except Exception as e:
        logger.exception(f"Unexpected error processing '{source.name}'")
        return render_error(source.name, f"Unexpected error: {e}")

    logger.info(f"Processed '{source.name}': report {metadata.report_id}, {len(records)} records")
    return render_report(metadata, records)


async def process_batches(
    source_files: Sequence[SourceFile],
    batch_size: Optional[int] = None,
    stream_threshold: Optional[int] = None,
) -> list[str]:
    """
    Processes files batch by batch, running each batch's files concurrently.

    Returns:
        Rendered sections in the same order as `source_files`; unsupported
        files leave no section.
    """
    if batch_size is None:
        batch_size = config.BATCH_SIZE
    batches = list(chunked(source_files, batch_size))

    # One slot per input file so completion order cannot change output order
    slots: list[Optional[str]] = [None] * len(source_files)

    async def run_slot(index: int, source: SourceFile) -> None:
        slots[index] = await asyncio.to_thread(process_file, source, stream_threshold)

    offset = 0
    for number, batch in enumerate(batches, start=1):
        logger.info(f"Processing batch {number}/{len(batches)} ({len(batch)} files)")
        await asyncio.gather(*(
            run_slot(offset + position, source) for position, source in enumerate(batch)
        ))
        offset += len(batch)

    return [fragment for fragment in slots if fragment is not None]


def write_document(output_path, html: str) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")


def write_failure_document(output_path, reason: str) -> None:
    try:
        write_document(output_path, render_failure_document(reason))
    except OSError as e:
        logger.error(f"Failed to write error document to '{output_path}': {e}")


async def convert_reports(
    reports_dir=None,
    output_path=None,
    batch_size: Optional[int] = None,
    stream_threshold: Optional[int] = None,
) -> bool:
    """
    Converts every report in `reports_dir` into a single HTML document.

    Per-file failures become error sections; a missing or empty directory,
    or a failure to write the output, instead writes a standalone error page.

    Args:
        reports_dir: Directory holding .xml, .zip and .gz reports
        output_path: Where the HTML document is written
        batch_size: Number of files processed concurrently
        stream_threshold: File size in bytes above which reads stream

    Returns:
        True if the report document was written, False on a run-level failure.
    """
    reports_dir = reports_dir if reports_dir is not None else config.REPORTS_DIR
    output_path = output_path if output_path is not None else config.OUTPUT_HTML
    batch_size = batch_size if batch_size is not None else config.BATCH_SIZE

    if batch_size < 1:
        reason = f"Batch size must be at least 1 (got {batch_size})"
        logger.error(f"Cannot process reports: {reason}")
        write_failure_document(output_path, reason)
        return False

    try:
        source_files = list_source_files(reports_dir)
    except DirectoryError as e:
        logger.error(f"Cannot read reports: {e}")
        write_failure_document(output_path, str(e))
        return False

    ordered = sort_newest_first(source_files)
    logger.info(f"Found {len(ordered)} entries in '{reports_dir}'")

    fragments = await process_batches(ordered, batch_size, stream_threshold)
    if not fragments:
        logger.warning("No DMARC reports could be rendered")
        fragments = [render_no_reports()]

    try:
        write_document(output_path, assemble_document(fragments))
    except OSError as e:
        logger.error(f"Failed to write report to '{output_path}': {e}")
        write_failure_document(output_path, f"Failed to write report: {e}")
        return False

    logger.info(f"Wrote {len(fragments)} report sections to '{output_path}'")
    return True
