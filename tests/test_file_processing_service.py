import pytest

from vrotate.domain.exceptions import RootPathUnreadableException
from vrotate.services.file_processing_service import ProcessVideoFiles


def test_lists_direct_files_sorted_and_skips_subdirectories(tmp_path):
    for name in ("b.mp4", "a.mkv", "c.txt"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "rotated").mkdir()
    (tmp_path / "rotated" / "a.mkv").write_bytes(b"")
    (tmp_path / "nested" / "deeper").mkdir(parents=True)
    (tmp_path / "nested" / "deeper" / "z.mp4").write_bytes(b"")

    processor = ProcessVideoFiles(tmp_path)

    assert processor.files == (tmp_path / "a.mkv", tmp_path / "b.mp4", tmp_path / "c.txt")
    assert processor.skipped_dirs == (tmp_path / "nested", tmp_path / "rotated")
    assert list(processor) == list(processor.files)
    assert len(processor) == 3


def test_root_is_never_a_candidate(tmp_path):
    assert ProcessVideoFiles(tmp_path).files == ()


def test_unlistable_root_is_fatal(tmp_path):
    with pytest.raises(RootPathUnreadableException):
        ProcessVideoFiles(tmp_path / "missing")
