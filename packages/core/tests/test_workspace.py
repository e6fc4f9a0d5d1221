"""Tests for the disposable review workspace."""

import os

import pytest

from prbot_core.workspace import workspace


def test_creates_unique_directory(tmp_path):
    with workspace(str(tmp_path)) as first, workspace(str(tmp_path)) as second:
        assert os.path.isdir(first)
        assert os.path.isdir(second)
        assert first != second
        assert os.path.basename(first).startswith("pr-review-")


def test_removed_after_success(tmp_path):
    with workspace(str(tmp_path)) as path:
        open(os.path.join(path, "file.txt"), "w").close()
    assert not os.path.exists(path)


def test_removed_after_exception(tmp_path):
    with pytest.raises(RuntimeError):
        with workspace(str(tmp_path)) as path:
            raise RuntimeError("boom")
    assert not os.path.exists(path)
    assert list(tmp_path.iterdir()) == []
