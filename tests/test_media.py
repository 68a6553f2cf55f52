from __future__ import annotations

from pathlib import Path
import shutil
import subprocess
from typing import Any

import pytest

from media import audio
from media.audio import (
    ConversionFailedError,
    ConverterUnavailableError,
    FileTooLargeError,
    check_upload_size,
    convert_for_upload,
    file_extension,
    is_supported_media,
    prepared_audio,
)


def test_is_supported_media() -> None:
    assert is_supported_media(Path("a.mp3"))
    assert is_supported_media(Path("a.wav"))
    assert is_supported_media("clip.webm")
    assert not is_supported_media(Path("a.aiff"))
    assert not is_supported_media("a.mkv")


def test_is_supported_media_is_case_insensitive() -> None:
    assert is_supported_media("AUDIO.MP3") == is_supported_media("audio.mp3")
    assert is_supported_media("Track.FLAC")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("song", ""),
        ("song.", ""),
        ("archive.tar.MP3", "mp3"),
        ("song.mp3.aiff", "aiff"),
        ("/music/v1.2/song", ""),
        ("/music/album.v2/track.Ogg", "ogg"),
        (".mp3", "mp3"),
    ],
)
def test_file_extension(name: str, expected: str) -> None:
    assert file_extension(name) == expected


def test_only_final_segment_counts() -> None:
    assert not is_supported_media("song.mp3.aiff")
    assert is_supported_media("song.aiff.mp3")
    assert not is_supported_media("/data/recordings.mp3/take1")


def test_convert_without_ffmpeg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: None)
    before = set(Path(audio.tempfile.gettempdir()).glob("pindar-*"))

    with pytest.raises(ConverterUnavailableError, match="FFmpeg not found"):
        convert_for_upload(tmp_path / "interview.aiff")

    assert set(Path(audio.tempfile.gettempdir()).glob("pindar-*")) == before


def test_convert_runs_ffmpeg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        calls.append(cmd)
        Path(cmd[-1]).write_bytes(b"converted")
        return subprocess.CompletedProcess(cmd, 0, stdout=None, stderr="")

    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/ffmpeg")
    monkeypatch.setattr(subprocess, "run", fake_run)
    source = tmp_path / "interview.aiff"
    source.write_bytes(b"aiff")

    converted = convert_for_upload(source)
    try:
        assert converted.name == "interview_converted.mp4"
        assert converted.parent != tmp_path
        assert converted.read_bytes() == b"converted"
        cmd = calls[0]
        assert cmd[0] == "/usr/bin/ffmpeg"
        assert cmd[cmd.index("-i") + 1] == str(source)
        assert cmd[cmd.index("-c:a") + 1] == "aac"
        assert cmd[cmd.index("-b:a") + 1] == "128k"
        assert source.read_bytes() == b"aiff"
    finally:
        shutil.rmtree(converted.parent)


def test_convert_failure_surfaces_ffmpeg_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[Path] = []

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        created.append(Path(cmd[-1]).parent)
        raise subprocess.CalledProcessError(1, cmd, stderr="Invalid data found when processing input\n")

    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/ffmpeg")
    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ConversionFailedError) as excinfo:
        convert_for_upload(tmp_path / "broken.aiff")

    assert "Invalid data found when processing input" in str(excinfo.value)
    assert "exit code 1" in str(excinfo.value)
    assert not created[0].exists()


def test_prepared_audio_keeps_native_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args: Any, **kwargs: Any) -> None:
        raise AssertionError("conversion should not run")

    monkeypatch.setattr(audio, "convert_for_upload", fail)
    source = tmp_path / "meeting.WAV"
    source.write_bytes(b"wav")

    with prepared_audio(source) as path:
        assert path == source
    assert source.exists()


def test_prepared_audio_removes_converted_file_on_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()
    converted = workdir / "interview_converted.mp4"

    def fake_convert(input_path: Path) -> Path:
        converted.write_bytes(b"mp4")
        return converted

    monkeypatch.setattr(audio, "convert_for_upload", fake_convert)

    with pytest.raises(RuntimeError, match="boom"):
        with prepared_audio(tmp_path / "interview.aiff") as path:
            assert path == converted
            raise RuntimeError("boom")

    assert not workdir.exists()


def test_check_upload_size(tmp_path: Path) -> None:
    small = tmp_path / "small.mp3"
    small.write_bytes(b"x" * 10)
    assert check_upload_size(small, limit=10) == 10

    with pytest.raises(FileTooLargeError, match="exceeds"):
        check_upload_size(small, limit=9)


def test_check_upload_size_default_limit(tmp_path: Path) -> None:
    big = tmp_path / "big.mp3"
    with big.open("wb") as f:
        f.truncate(25 * 1024 * 1024 + 1)

    with pytest.raises(FileTooLargeError, match="25 MB"):
        check_upload_size(big)
