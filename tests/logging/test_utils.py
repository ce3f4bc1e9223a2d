import os
import time

from cxfer.logging.utils import cleanup_old_logs, format_size


def test_format_size():
    assert format_size(512) == "512B"
    assert format_size(2048) == "2.0KB"
    assert format_size(5 * 1024 * 1024) == "5.0MB"
    assert format_size(3 * 1024 ** 3) == "3.0GB"


def test_cleanup_old_logs_removes_only_old_rotations(tmp_path):
    old = tmp_path / "cxfer.log.2020-01-01"
    recent = tmp_path / "cxfer.log.2099-01-01"
    current = tmp_path / "cxfer.log"
    for path in (old, recent, current):
        path.write_text("x")

    ten_days_ago = time.time() - 10 * 86400
    os.utime(old, (ten_days_ago, ten_days_ago))
    os.utime(current, (ten_days_ago, ten_days_ago))

    assert cleanup_old_logs(tmp_path, retention_days=7) == 1
    assert not old.exists()
    assert recent.exists()
    assert current.exists()


def test_cleanup_old_logs_missing_directory(tmp_path):
    assert cleanup_old_logs(tmp_path / "missing") == 0
