"""Tests for the pipeline driver and the command line."""

import json
import logging
from unittest.mock import patch

import pytest

from apigen.__main__ import main
from apigen.errors import FetchError, ParseStructureError
from apigen.generator import ApiGenerator


@pytest.fixture
def page_file(tmp_path, sample_page):
    path = tmp_path / "api.html"
    path.write_text(sample_page, encoding="utf-8")
    return str(path)


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("apigen")
    handlers, level = logger.handlers[:], logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestApiGenerator:
    def test_run_from_file(self, config_file, page_file, tmp_path):
        generator = ApiGenerator(config_file())
        written = generator.run(input_path=page_file)

        out = tmp_path / "out"
        assert len(written) == 4
        methods = json.loads((out / "methods.json").read_text(encoding="utf-8"))
        assert [m["name"] for m in methods] == ["getMe", "sendMessage", "getUpdates"]
        assert (out / "__init__.py").exists()

    def test_output_dir_override(self, config_file, page_file, tmp_path):
        generator = ApiGenerator(config_file(), output_dir=str(tmp_path / "elsewhere"))
        generator.run(input_path=page_file)
        assert (tmp_path / "elsewhere" / "models.py").exists()
        assert not (tmp_path / "out").exists()

    def test_run_fetches_when_no_input(self, config_file, sample_page):
        generator = ApiGenerator(config_file())
        with patch("apigen.generator.HTTPClient.get_text", return_value=sample_page) as get_text:
            generator.run(url="https://docs.example.com/api")
        get_text.assert_called_once_with("https://docs.example.com/api")

    def test_fetch_uses_configured_url(self, config_file, sample_page):
        generator = ApiGenerator(config_file("source:\n  url: https://docs.example.com/bots\n"))
        with patch("apigen.generator.HTTPClient.get_text", return_value=sample_page) as get_text:
            assert generator.fetch() == sample_page
        get_text.assert_called_once_with("https://docs.example.com/bots")

    def test_missing_body_falls_back_to_document(self, config_file, caplog):
        generator = ApiGenerator(config_file())
        data_types, operations = generator.parse(
            "<h4><a class='anchor' href='#x'></a>setFlag</h4><p>Returns True on success.</p>"
        )
        assert data_types == []
        assert [op.name for op in operations] == ["setFlag"]
        assert "Content element not found" in caplog.text

    def test_page_without_entries_is_fatal(self, config_file):
        generator = ApiGenerator(config_file())
        with pytest.raises(ParseStructureError):
            generator.parse("<div id='dev_page_content'><p>Nothing here.</p></div>")

    def test_regenerate_matches_original_run(self, config_file, page_file, tmp_path):
        ApiGenerator(config_file()).run(input_path=page_file)
        out = tmp_path / "out"
        before = {p.name: p.read_bytes() for p in out.iterdir()}

        rebuilt = ApiGenerator(config_file(), output_dir=str(tmp_path / "rebuilt"))
        rebuilt.regenerate(str(out))
        after = {p.name: p.read_bytes() for p in (tmp_path / "rebuilt").iterdir()}
        assert after == before


@pytest.mark.usefixtures("restore_logger")
class TestCommandLine:
    def test_generate_from_input(self, config_file, page_file, tmp_path):
        assert main(["-c", config_file(), "-i", page_file]) == 0
        assert (tmp_path / "out" / "methods.py").exists()

    def test_from_snapshot(self, config_file, page_file, tmp_path):
        assert main(["-c", config_file(), "-i", page_file]) == 0
        (tmp_path / "out" / "models.py").unlink()

        assert main(["-c", config_file(), "--from-snapshot", str(tmp_path / "out")]) == 0
        assert (tmp_path / "out" / "models.py").exists()

    def test_corrupt_snapshot_exits_nonzero(self, config_file, tmp_path):
        frozen = tmp_path / "frozen"
        frozen.mkdir()
        (frozen / "models.json").write_text("[{broken")
        (frozen / "methods.json").write_text("[]")

        assert main(["-c", config_file(), "--from-snapshot", str(frozen)]) == 1
        assert not (tmp_path / "out").exists()

    def test_structure_error_exits_nonzero(self, config_file, tmp_path):
        page = tmp_path / "empty.html"
        page.write_text("<html><body></body></html>")
        assert main(["-c", config_file(), "-i", str(page)]) == 1
        assert not (tmp_path / "out").exists()

    def test_fetch_error_exits_nonzero(self, config_file):
        error = FetchError("https://docs.example.com/api", "HTTP 503", 503)
        with patch("apigen.generator.HTTPClient.get_text", side_effect=error):
            assert main(["-c", config_file(), "-u", "https://docs.example.com/api"]) == 1

    def test_missing_input_file_exits_nonzero(self, config_file, tmp_path):
        assert main(["-c", config_file(), "-i", str(tmp_path / "missing.html")]) == 1

    def test_invalid_config_exits_nonzero(self, config_file):
        assert main(["-c", config_file("source:\n  timeout: -1\n")]) == 1

    def test_json_logs(self, config_file, page_file, capsys):
        assert main(["-c", config_file(), "-i", page_file, "--json-logs"]) == 0
        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        summary = [line for line in lines if line["message"] == "--- Generation Summary ---"]
        assert summary[0]["data_types"] == 3
        assert summary[0]["methods"] == 3
