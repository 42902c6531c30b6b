"""Tests for the render, encode and inspect commands."""

import json
from pathlib import Path

import pytest

from eqr.application.codec import ResponseCodec
from eqr.cli.commands import encode, inspect, render
from eqr.domain.response.model import SearchResponse


@pytest.fixture(autouse=True)
def quiet_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EQR_CONFIG_FILE", raising=False)
    monkeypatch.setattr("eqr.cli.util.files.configure_logging", lambda config: None)


@pytest.fixture
def json_file(tmp_path: Path, codec: ResponseCodec, all_responses: list[SearchResponse]) -> Path:
    path = tmp_path / "response.json"
    path.write_text(codec.to_json(all_responses[0]))
    return path


class TestEncodeAndRender:
    def test_round_trip(
        self,
        json_file: Path,
        all_responses: list[SearchResponse],
        codec: ResponseCodec,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        encode.encode(json_file)
        binary = json_file.with_suffix(".bin")
        assert binary.exists()
        assert "Wrote" in capsys.readouterr().err

        render.render(binary)
        out = capsys.readouterr().out
        assert codec.from_json(out) == all_responses[0]

    def test_encode_output_option(self, json_file: Path, tmp_path: Path, codec: ResponseCodec) -> None:
        target = tmp_path / "out" / "r.dat"
        target.parent.mkdir()
        encode.encode(json_file, output=target)
        assert codec.from_bytes(target.read_bytes()) == codec.from_json(json_file.read_text())

    def test_render_pretty(self, tmp_path: Path, codec: ResponseCodec, capsys: pytest.CaptureFixture[str]) -> None:
        binary = tmp_path / "r.bin"
        binary.write_bytes(codec.to_bytes(SearchResponse(took=9)))

        render.render(binary, pretty=True)
        out = capsys.readouterr().out
        assert out.startswith("{\n")
        assert json.loads(out) == {"took": 9, "timed_out": False, "hits": {}}

    def test_render_garbage(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        binary = tmp_path / "bad.bin"
        binary.write_bytes(b"\x01\x07")

        with pytest.raises(SystemExit) as exc_info:
            render.render(binary)
        assert exc_info.value.code == 1
        assert "Cannot decode" in capsys.readouterr().err

    def test_render_strict_trailing_bytes(
        self, tmp_path: Path, codec: ResponseCodec, capsys: pytest.CaptureFixture[str]
    ) -> None:
        binary = tmp_path / "r.bin"
        binary.write_bytes(codec.to_bytes(SearchResponse(took=9)) + b"\x00")

        render.render(binary)
        assert json.loads(capsys.readouterr().out)["took"] == 9

        with pytest.raises(SystemExit):
            render.render(binary, strict=True)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            render.render(tmp_path / "missing.bin")
        assert exc_info.value.code == 1

    def test_encode_malformed_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"took": 1')

        with pytest.raises(SystemExit):
            encode.encode(path)
        assert "Cannot encode" in capsys.readouterr().err
        assert not path.with_suffix(".bin").exists()


class TestInspect:
    def test_summary_from_json(self, json_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        inspect.inspect(json_file)
        out = capsys.readouterr().out
        assert "Variant:" in out
        assert "events" in out
        assert "111" in out

    def test_summary_from_binary(
        self, tmp_path: Path, codec: ResponseCodec, all_responses: list[SearchResponse], capsys
    ) -> None:
        binary = tmp_path / "counts.bin"
        binary.write_bytes(codec.to_bytes(all_responses[4]))

        inspect.inspect(binary)
        out = capsys.readouterr().out
        assert "counts" in out
        assert "foo, bar" in out

    def test_summary_without_variant(self, tmp_path: Path, codec: ResponseCodec, capsys) -> None:
        binary = tmp_path / "empty.bin"
        binary.write_bytes(codec.to_bytes(SearchResponse(took=3)))

        inspect.inspect(binary)
        assert "none" in capsys.readouterr().out
