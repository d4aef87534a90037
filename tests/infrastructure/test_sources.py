"""Tests for source expansion and reading."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from spritegen.domain.errors import SourceResolutionError
from spritegen.domain.images import RawImage
from spritegen.infrastructure.sources import (
    SourceRef,
    expand_pattern,
    expand_sources,
    resolve_sources,
)


class TestExpand:
    def test_glob_is_sorted(self, icons_dir: Path) -> None:
        matches = expand_pattern(str(icons_dir / "*.png"))
        assert [Path(m).name for m in matches] == ["a.png", "b.png"]

    def test_recursive_glob(self, icons_dir: Path) -> None:
        (icons_dir / "nested").mkdir()
        (icons_dir / "nested" / "c.png").write_bytes(b"c")
        matches = expand_pattern(str(icons_dir / "**" / "*.png"))
        assert sorted(Path(m).name for m in matches) == ["a.png", "b.png", "c.png"]

    def test_directories_are_skipped(self, icons_dir: Path) -> None:
        (icons_dir / "dir.png").mkdir()
        matches = expand_pattern(str(icons_dir / "*.png"))
        assert [Path(m).name for m in matches] == ["a.png", "b.png"]

    def test_zero_matches_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(SourceResolutionError, match="No files match"):
            expand_pattern(str(tmp_path / "missing" / "*.png"))

    def test_order_of_entries_is_kept(self, icons_dir: Path) -> None:
        refs = expand_sources([str(icons_dir / "b.png"), str(icons_dir / "a.png")])
        assert [Path(r.path).name for r in refs] == ["b.png", "a.png"]

    def test_single_pattern_is_accepted(self, icons_dir: Path) -> None:
        refs = expand_sources(icons_dir / "a.png")
        assert len(refs) == 1

    def test_in_memory_entries(self) -> None:
        refs = expand_sources(
            [{"path": "mem/a.png", "data": b"abc"}, RawImage(path="mem/b.png", data=b"def")]
        )
        assert [(r.path, r.data) for r in refs] == [("mem/a.png", b"abc"), ("mem/b.png", b"def")]
        assert all(r.in_memory for r in refs)

    def test_in_memory_missing_data(self) -> None:
        with pytest.raises(SourceResolutionError, match="data"):
            expand_sources([{"path": "mem/a.png"}])


class TestFingerprint:
    def test_file_fingerprint_tracks_mtime(self, icons_dir: Path) -> None:
        path = icons_dir / "a.png"
        ref = SourceRef(path=str(path))
        assert ref.fingerprint() == (str(path.resolve()), path.stat().st_mtime_ns)

    def test_in_memory_fingerprint_tracks_content(self) -> None:
        first = SourceRef(path="a.png", data=b"one").fingerprint()
        second = SourceRef(path="a.png", data=b"two").fingerprint()
        assert first != second

    def test_missing_file(self, tmp_path: Path) -> None:
        ref = SourceRef(path=str(tmp_path / "gone.png"))
        assert ref.fingerprint()[1] is None


class TestResolve:
    def test_reads_bytes_in_order(self, icons_dir: Path) -> None:
        raws = asyncio.run(resolve_sources(str(icons_dir / "*.png")))
        assert [Path(r.path).name for r in raws] == ["a.png", "b.png"]
        assert raws[0].data == (icons_dir / "a.png").read_bytes()

    def test_in_memory_passthrough(self) -> None:
        raws = asyncio.run(resolve_sources([{"path": "x.png", "data": "text"}]))
        assert raws == [RawImage(path="x.png", data=b"text")]
