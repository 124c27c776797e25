import pytest

from vrotate.domain.exceptions import DirectoryCreateException
from vrotate.domain.placement import (
    DirectoryPlacement,
    HerePlacement,
    PlacementMode,
    make_placement,
)


def test_here_target_adds_marker_before_extension(tmp_path):
    placement = HerePlacement()
    assert placement.target(tmp_path / "clip.mp4") == tmp_path / "clip-rotated.mp4"
    assert placement.target(tmp_path / "archive.tar.gz") == tmp_path / "archive.tar-rotated.gz"
    assert placement.target(tmp_path / "noext") == tmp_path / "noext-rotated"


def test_here_derive_converts_new_file(tmp_path):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"data")

    destination = HerePlacement().derive(src)

    assert destination.path == tmp_path / "clip-rotated.mp4"
    assert destination.skip is False


@pytest.mark.parametrize("name", ["clip-rotated.mp4", "x-rotated", "a-rotated.mkv"])
def test_here_derive_skips_rotation_results(tmp_path, name):
    src = tmp_path / name
    src.write_bytes(b"data")

    destination = HerePlacement().derive(src)

    assert destination.path == src
    assert destination.skip is True


def test_here_derive_skips_already_converted(tmp_path):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"data")
    (tmp_path / "clip-rotated.mp4").write_bytes(b"done")

    destination = HerePlacement().derive(src)

    assert destination == (tmp_path / "clip-rotated.mp4", True)


def test_derive_propagates_stat_errors_other_than_not_found(tmp_path):
    not_a_dir = tmp_path / "plain-file"
    not_a_dir.write_bytes(b"")

    with pytest.raises(NotADirectoryError):
        HerePlacement().derive(not_a_dir / "clip.mp4")


def test_directory_derive_creates_output_dir(tmp_path):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"data")

    destination = DirectoryPlacement().derive(src)

    assert destination == (tmp_path / "rotated" / "clip.mp4", False)
    assert (tmp_path / "rotated").is_dir()


def test_directory_derive_accepts_existing_dir_and_skips_converted(tmp_path):
    (tmp_path / "rotated").mkdir()
    (tmp_path / "rotated" / "clip.mp4").write_bytes(b"done")
    (tmp_path / "clip.mp4").write_bytes(b"data")
    (tmp_path / "other.mp4").write_bytes(b"data")
    placement = DirectoryPlacement()

    assert placement.derive(tmp_path / "clip.mp4").skip is True
    assert placement.derive(tmp_path / "other.mp4") == (tmp_path / "rotated" / "other.mp4", False)


def test_directory_is_created_once_per_parent(tmp_path, monkeypatch):
    placement = DirectoryPlacement()
    calls = []
    real_mkdir = type(tmp_path).mkdir

    def counting_mkdir(self, *args, **kwargs):
        calls.append(self)
        return real_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(type(tmp_path), "mkdir", counting_mkdir)
    for name in ("a.mp4", "b.mp4", "c.mp4"):
        placement.derive(tmp_path / name)

    assert calls == [tmp_path / "rotated"]


def test_directory_creation_failure_is_reported(tmp_path):
    (tmp_path / "rotated").write_bytes(b"in the way")

    with pytest.raises(DirectoryCreateException) as exc_info:
        DirectoryPlacement().derive(tmp_path / "clip.mp4")

    assert exc_info.value.path == tmp_path / "rotated" / "clip.mp4"


def test_custom_marker(tmp_path):
    assert HerePlacement("small").target(tmp_path / "a.mp4") == tmp_path / "a-small.mp4"
    assert DirectoryPlacement("small").target(tmp_path / "a.mp4") == tmp_path / "small" / "a.mp4"


def test_make_placement():
    assert isinstance(make_placement("here"), HerePlacement)
    assert isinstance(make_placement(PlacementMode.DIRECTORY), DirectoryPlacement)
    assert make_placement("dir") == DirectoryPlacement()
    with pytest.raises(ValueError):
        make_placement("elsewhere")
