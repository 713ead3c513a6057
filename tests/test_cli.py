import json

from typer.testing import CliRunner

from bidscope.config import settings
from bidscope.main import cli

runner = CliRunner()


def test_version():
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert settings.app.version in result.stdout


def test_import_then_report(tmp_path, monkeypatch):
    monkeypatch.setattr(settings.paths, "db_path", tmp_path / "cli.db")
    path = tmp_path / "bids.json"
    path.write_text(
        json.dumps(
            [
                {"id": "b1", "companyId": "acme", "amount": 100, "status": "accepted", "createdAt": "2024-01-02T00:00:00"},
                {"id": "b2", "companyId": "acme", "amount": 300, "status": "pending", "createdAt": "2024-01-03T00:00:00"},
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["import-records", str(path)])
    assert result.exit_code == 0
    assert "Imported 2 bids and 0 tenders" in result.stdout

    result = runner.invoke(cli, ["import-records", str(path)])
    assert "already imported" in result.stdout

    result = runner.invoke(cli, ["report", "acme", "--months", "3"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["distribution"]["data"] == [1, 0, 1]
    assert len(payload["successRate"]["labels"]) == 3
    assert payload["performance"]["winRateByValue"] == 25


def test_import_failure_exit_code(tmp_path, monkeypatch):
    monkeypatch.setattr(settings.paths, "db_path", tmp_path / "cli.db")
    path = tmp_path / "notes.txt"
    path.write_text("nothing", encoding="utf-8")
    result = runner.invoke(cli, ["import-records", str(path)])
    assert result.exit_code == 1
