from __future__ import annotations

import pytest

AUDIT_CSV = (
    "Associated Company Name,Total Passed,Total Results,Has Posts,Location\n"
    "Acme,8,10,1,North\n"
    "Acme,2,10,0,South\n"
    "Globex,5,5,,East\n"
    ",3,4,1,Nowhere\n"
)


@pytest.fixture
def scenario_rows() -> list[dict[str, str]]:
    return [
        {"Associated Company Name": "Acme", "Total Passed": "8", "Total Results": "10", "Has Posts": "1"},
        {"Associated Company Name": "Acme", "Total Passed": "2", "Total Results": "10", "Has Posts": "0"},
        {"Associated Company Name": "Globex", "Total Passed": "5", "Total Results": "5"},
    ]


@pytest.fixture
def audit_csv(tmp_path):
    path = tmp_path / "audit.csv"
    path.write_text(AUDIT_CSV, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _no_log_file(monkeypatch) -> None:
    monkeypatch.setenv("ROLLUP_LOG_PATH", "")
