import json
import logging

from tracker_client import migrate
from tracker_client.logging_config import configure_logging


class FakeClient:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def import_backup(self, data, source="local", force=False):
        self.calls.append((source, force))
        return self.result


def _write(tmp_path, payload):
    path = tmp_path / "backup.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_dry_run_prints_counts(tmp_path, local_backup, capsys):
    code = migrate.main([_write(tmp_path, local_backup), "--email", "me@example.com", "--dry-run"])
    assert code == 0
    assert json.loads(capsys.readouterr().out)["events"] == 2


def test_upload_reports_verification(tmp_path, local_backup):
    client = FakeClient({"verification": {"ok": True, "mismatches": {}}})
    code = migrate.main([_write(tmp_path, local_backup), "--email", "me@example.com", "--force"], client=client)
    assert code == 0
    assert client.calls == [("local", True)]


def test_mismatch_fails(tmp_path, local_backup):
    client = FakeClient({"verification": {"ok": False, "mismatches": {"meals": {"expected": 2, "imported": 1}}}})
    assert migrate.main([_write(tmp_path, local_backup), "--email", "me@example.com"], client=client) == 1


def test_invalid_backup(tmp_path):
    assert migrate.main([_write(tmp_path, {"nope": True}), "--email", "me@example.com"]) == 2


def test_verbose_logging_lowers_levels(monkeypatch):
    monkeypatch.setenv("TRACKER_CLIENT_LOG_LEVEL", "error")
    assert configure_logging() == logging.ERROR
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert configure_logging(verbose=True) == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.DEBUG
    configure_logging()
