import gzip
import os
import zipfile
from pathlib import Path
from typing import Optional

import pytest

SCENARIO_RECORD = {
    "source_ip": "1.2.3.4",
    "count": "2",
    "disposition": "none",
    "dkim": "pass",
    "spf": "fail",
    "header_from": "example.com",
    "dkim_domain": "example.com",
    "dkim_result": "pass",
    "spf_domain": "mail.example.com",
    "spf_result": "softfail",
}


def _tag(name: str, value: Optional[str], indent: str) -> str:
    if value is None:
        return ""
    return f"{indent}<{name}>{value}</{name}>\n"


def _record_xml(record: dict) -> str:
    policy = (
        _tag("disposition", record.get("disposition"), "        ")
        + _tag("dkim", record.get("dkim"), "        ")
        + _tag("spf", record.get("spf"), "        ")
    )
    auth = ""
    if record.get("dkim_domain") is not None or record.get("dkim_result") is not None:
        auth += (
            "      <dkim>\n"
            + _tag("domain", record.get("dkim_domain"), "        ")
            + _tag("result", record.get("dkim_result"), "        ")
            + "      </dkim>\n"
        )
    if record.get("spf_domain") is not None or record.get("spf_result") is not None:
        auth += (
            "      <spf>\n"
            + _tag("domain", record.get("spf_domain"), "        ")
            + _tag("result", record.get("spf_result"), "        ")
            + "      </spf>\n"
        )
    return (
        "  <record>\n"
        "    <row>\n"
        + _tag("source_ip", record.get("source_ip"), "      ")
        + _tag("count", record.get("count"), "      ")
        + f"      <policy_evaluated>\n{policy}      </policy_evaluated>\n"
        "    </row>\n"
        "    <identifiers>\n"
        + _tag("header_from", record.get("header_from"), "      ")
        + "    </identifiers>\n"
        f"    <auth_results>\n{auth}    </auth_results>\n"
        "  </record>\n"
    )


def make_report_xml(
    report_id: str = "123",
    begin: Optional[str] = "1000000000",
    end: Optional[str] = "1000003600",
    records: Optional[list] = None,
    namespace: Optional[str] = None,
) -> str:
    """Builds a DMARC aggregate report document."""
    if records is None:
        records = [SCENARIO_RECORD]
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    date_range = _tag("begin", begin, "      ") + _tag("end", end, "      ")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<feedback{xmlns}>\n"
        "  <report_metadata>\n"
        "    <org_name>example.net</org_name>\n"
        f"    <report_id>{report_id}</report_id>\n"
        f"    <date_range>\n{date_range}    </date_range>\n"
        "  </report_metadata>\n"
        "  <policy_published>\n"
        "    <domain>example.com</domain>\n"
        "    <p>none</p>\n"
        "  </policy_published>\n"
        + "".join(_record_xml(record) for record in records)
        + "</feedback>\n"
    )


class ReportFiles:
    """Writes report containers into a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)

    def xml(self, name: str, text: str) -> Path:
        path = self.directory / name
        path.write_bytes(text.encode("utf-8"))
        return path

    def zip(self, name: str, members: dict) -> Path:
        path = self.directory / name
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zip_file:
            for member_name, text in members.items():
                zip_file.writestr(member_name, text)
        return path

    def gz(self, name: str, text: str) -> Path:
        path = self.directory / name
        path.write_bytes(gzip.compress(text.encode("utf-8")))
        return path

    def raw(self, name: str, data: bytes) -> Path:
        path = self.directory / name
        path.write_bytes(data)
        return path


def set_mtime(path: Path, mtime: float) -> None:
    os.utime(path, (mtime, mtime))


@pytest.fixture()
def report_xml():
    """Factory building DMARC report XML text."""
    return make_report_xml


@pytest.fixture()
def scenario_record() -> dict:
    return dict(SCENARIO_RECORD)


@pytest.fixture()
def report_files(tmp_path: Path) -> ReportFiles:
    """Writes report containers into tmp_path/report."""
    return ReportFiles(tmp_path / "report")


@pytest.fixture()
def touch():
    """Sets a file's modification time."""
    return set_mtime
