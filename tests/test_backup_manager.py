"""Tests for the backup manager."""

import os
from datetime import datetime

import pytest

from ccrm.core.exceptions import IOFailure
from ccrm.persistence import BackupManager, format_file_size


@pytest.fixture
def manager(config):
    return BackupManager(config)


@pytest.fixture
def export_tree(config):
    os.makedirs(os.path.join(config.export_folder, "archive"))
    with open(os.path.join(config.export_folder, "students.csv"), "w") as f:
        f.write("x" * 100)
    with open(os.path.join(config.export_folder, "archive", "old.csv"), "w") as f:
        f.write("y" * 50)
    return config.export_folder


@pytest.mark.parametrize("size, expected", [
    (0, "0 B"),
    (512, "512 B"),
    (1024, "1.0 KB"),
    (1536, "1.5 KB"),
    (5 * 1024 * 1024, "5.0 MB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_create_backup_copies_tree(manager, config, export_tree):
    target = manager.create_backup(now=datetime(2024, 1, 2, 3, 4, 5))

    assert target == os.path.join(config.backup_folder, "backup_2024-01-02_03-04-05")
    assert os.path.isfile(os.path.join(target, "students.csv"))
    assert os.path.isfile(os.path.join(target, "archive", "old.csv"))
    assert manager.directory_size(target) == 150


def test_create_backup_missing_source(manager, tmp_path):
    with pytest.raises(IOFailure):
        manager.create_backup(str(tmp_path / "missing"))


def test_create_backup_existing_target(manager, export_tree):
    now = datetime(2024, 1, 2, 3, 4, 5)
    manager.create_backup(now=now)
    with pytest.raises(IOFailure):
        manager.create_backup(now=now)


def test_list_files(manager, export_tree):
    assert manager.list_files(export_tree) == [
        (0, "archive", True),
        (1, os.path.join("archive", "old.csv"), False),
        (0, "students.csv", False),
    ]
    assert manager.list_files(export_tree, max_depth=0) == [
        (0, "archive", True),
        (0, "students.csv", False),
    ]


def test_list_backups_newest_first(manager, export_tree):
    older = manager.create_backup(now=datetime(2024, 1, 1, 0, 0, 0))
    newer = manager.create_backup(now=datetime(2024, 6, 1, 0, 0, 0))
    assert manager.list_backups() == [newer, older]


def test_list_backups_without_folder(manager):
    assert manager.list_backups() == []
