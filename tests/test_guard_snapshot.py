import pytest

from guard.errors import SnapshotError
from guard.snapshot import read_snapshot
from guard.types import Save


def _touch(directory, *names):
    for name in names:
        (directory / name).write_bytes(b"save")


def test_snapshot_decodes_save_files_only(tmp_path):
    _touch(
        tmp_path,
        "hero.tunic",
        "hero~000000000002.tunic",
        "mage~000000000010.tunic",
        "notes.txt",
        "hero.tunic.bak",
    )
    (tmp_path / "folder.tunic").mkdir()

    snapshot = read_snapshot(tmp_path)

    assert snapshot.saves == [Save("hero", 0), Save("hero", 2), Save("mage", 10)]
    assert list(snapshot) == snapshot.saves
    assert len(snapshot) == 3
    assert snapshot.failures == []
    assert snapshot.directory == tmp_path


def test_snapshot_reports_undecodable_names(tmp_path):
    _touch(tmp_path, "weird~~12.tunic", "hero~abc.tunic", "hero~000000000001.tunic")

    snapshot = read_snapshot(tmp_path)

    assert snapshot.saves == [Save("hero", 1)]
    assert [failure.filename for failure in snapshot.failures] == ["hero~abc.tunic", "weird~~12.tunic"]
    bad = snapshot.failures[0]
    assert bad.slot_name == "hero"
    assert bad.generation == -1
    assert bad.message.startswith("Skipping hero~abc.tunic: ")


def test_snapshot_of_missing_directory_raises(tmp_path):
    missing = tmp_path / "nope"

    with pytest.raises(SnapshotError) as excinfo:
        read_snapshot(missing)

    assert excinfo.value.directory == missing
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_snapshot_of_file_path_raises(tmp_path):
    target = tmp_path / "file.tunic"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(SnapshotError):
        read_snapshot(target)
