"""
Container readers for DMARC aggregate report files.

Each supported container kind (plain XML, ZIP archive, gzip stream) has a
reader producing the decoded report text. Files larger than the streaming
threshold are read in chunks; the resulting text is identical either way.
"""
import codecs
import gzip
import logging
import os
import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional

from config import config
from reports.errors import FileReadError, NoXmlMemberError, UnsupportedFormatError
from reports.models import SourceFile, kind_for_path

logger = logging.getLogger(__name__)

ENCODING = "utf-8-sig"
CHUNK_SIZE = 1024 * 1024

# Everything the stdlib may raise while opening, unpacking or decoding a file
READ_ERRORS = (
    OSError,
    EOFError,
    RuntimeError,
    NotImplementedError,
    UnicodeDecodeError,
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
)


def _decode(data: bytes) -> str:
    return codecs.decode(data, ENCODING)


def _decode_stream(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> str:
    """Reads and decodes a binary stream chunk by chunk."""
    decoder = codecs.getincrementaldecoder(ENCODING)()
    parts = []
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        parts.append(decoder.decode(chunk))
    parts.append(decoder.decode(b"", final=True))
    return "".join(parts)


class ReportReader(ABC):
    """Produces decoded report text from one container kind."""

    def __init__(self, stream_threshold: Optional[int] = None) -> None:
        if stream_threshold is None:
            stream_threshold = config.stream_threshold_bytes
        self._stream_threshold = stream_threshold

    def should_stream(self, size: int) -> bool:
        return size > self._stream_threshold

    def read(self, path: Path, size: Optional[int] = None) -> str:
        """
        Reads the report text held in the file at `path`.

        Raises:
            FileReadError: On any I/O, decompression, archive or decoding failure
            NoXmlMemberError: If a ZIP archive has no report member
        """
        try:
            if size is None:
                size = os.path.getsize(path)
            return self._read(Path(path), size)
        except READ_ERRORS as e:
            raise FileReadError(path, e) from e

    @abstractmethod
    def _read(self, path: Path, size: int) -> str:
        raise NotImplementedError


class XmlReader(ReportReader):
    def _read(self, path: Path, size: int) -> str:
        if self.should_stream(size):
            logger.debug(f"Streaming large XML file {path} ({size} bytes)")
            with open(path, "rb") as f:
                return _decode_stream(f)
        return _decode(path.read_bytes())


class GzipReader(ReportReader):
    def _read(self, path: Path, size: int) -> str:
        if self.should_stream(size):
            logger.debug(f"Streaming large gzip file {path} ({size} bytes)")
            with gzip.open(path, "rb") as f:
                return _decode_stream(f)
        return _decode(gzip.decompress(path.read_bytes()))


def select_report_member(zip_file: zipfile.ZipFile) -> Optional[zipfile.ZipInfo]:
    """
    Picks the archive member holding the report.

    The first member whose name ends in '.xml' wins; failing that, the first
    regular member whose name has no extension at all.
    """
    members = [info for info in zip_file.infolist() if not info.is_dir()]
    for info in members:
        if info.filename.lower().endswith(".xml"):
            return info
    for info in members:
        if not os.path.splitext(os.path.basename(info.filename))[1]:
            return info
    return None


class ZipReader(ReportReader):
    def _read(self, path: Path, size: int) -> str:
        with zipfile.ZipFile(path, "r") as zip_file:
            member = select_report_member(zip_file)
            if member is None:
                raise NoXmlMemberError(f"No XML report found in ZIP archive '{path.name}'")
            if self.should_stream(member.file_size):
                logger.debug(
                    f"Streaming large member '{member.filename}' from {path} "
                    f"({member.file_size} bytes)"
                )
                with zip_file.open(member) as f:
                    return _decode_stream(f)
            return _decode(zip_file.read(member))


_READERS = {
    "xml": XmlReader,
    "zip": ZipReader,
    "gzip": GzipReader,
}


def reader_for(kind: str, stream_threshold: Optional[int] = None) -> ReportReader:
    """
    Returns the reader for a container kind.

    Raises:
        UnsupportedFormatError: If the kind is not xml, zip or gzip
    """
    reader_cls = _READERS.get(kind)
    if reader_cls is None:
        raise UnsupportedFormatError(f"Unsupported report format: {kind}")
    return reader_cls(stream_threshold)


def read_report_text(source, stream_threshold: Optional[int] = None) -> str:
    """
    Reads the decoded report text of a SourceFile or plain path.

    Raises:
        UnsupportedFormatError: If the extension is not .xml, .zip or .gz
        FileReadError: If the file cannot be read or unpacked
        NoXmlMemberError: If a ZIP archive has no report member
    """
    if isinstance(source, SourceFile):
        path, kind, size = source.path, source.kind, source.size
    else:
        path = Path(source)
        kind, size = kind_for_path(path, is_dir=path.is_dir()), None
    if kind == "unsupported":
        raise UnsupportedFormatError(f"Skipping unsupported file: {path.name}")
    return reader_for(kind, stream_threshold).read(path, size)
