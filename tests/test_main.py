"""Tests for the command line interface."""

import logging
import os

import pytest
from click.testing import CliRunner
from lxml import etree
from sitemap_xml_writer.config import SITEMAP_NAMESPACE
from sitemap_xml_writer.main import main

NS = f"{{{SITEMAP_NAMESPACE}}}"


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Option defaults come from SITEMAP_* variables; start without any."""
    for name in (
        "SITEMAP_OUTPUT_DIR",
        "SITEMAP_BASE_URL",
        "SITEMAP_MAX_URLS_PER_SITEMAP",
        "SITEMAP_MAX_LOC_LENGTH",
        "SITEMAP_PRETTY",
        "SITEMAP_COMPRESS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def url_file(tmp_path):
    path = tmp_path / "urls.txt"
    path.write_text(
        "https://www.example.com/\n"
        "https://www.example.com/jobs\n"
        "https://www.example.com/about\n",
        encoding="utf-8",
    )
    return str(path)


def test_generates_single_sitemap(tmp_path, url_file):
    output_dir = str(tmp_path / "out")
    result = CliRunner().invoke(main, [url_file, "--output-dir", output_dir])

    assert result.exit_code == 0, result.output
    assert "Generated 1 sitemap file(s):" in result.output
    root = etree.parse(os.path.join(output_dir, "sitemap.xml")).getroot()
    assert len(root.findall(f"{NS}url")) == 3


def test_generates_index(tmp_path, url_file):
    output_dir = str(tmp_path / "out")
    result = CliRunner().invoke(
        main,
        [
            url_file,
            "--output-dir", output_dir,
            "--max-urls-per-sitemap", "2",
            "--base-url", "https://www.example.com/",
            "--pretty",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Generated 2 sitemap file(s):" in result.output
    assert "Sitemap index:" in result.output
    assert sorted(os.listdir(output_dir)) == [
        "sitemap_001.xml",
        "sitemap_002.xml",
        "sitemap_index.xml",
    ]


def test_clean_removes_old_files(tmp_path, url_file):
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    (output_dir / "sitemap_009.xml").write_text("stale")

    result = CliRunner().invoke(main, [url_file, "--output-dir", str(output_dir), "--clean"])

    assert result.exit_code == 0, result.output
    assert os.listdir(output_dir) == ["sitemap.xml"]


def test_no_valid_urls(tmp_path):
    input_file = tmp_path / "urls.txt"
    input_file.write_text("# nothing here\n\n", encoding="utf-8")

    result = CliRunner().invoke(main, [str(input_file), "--output-dir", str(tmp_path / "out")])

    assert result.exit_code == 0
    assert "No sitemaps generated" in result.output


def test_invalid_base_url(tmp_path, url_file):
    result = CliRunner().invoke(
        main, [url_file, "--output-dir", str(tmp_path / "out"), "--base-url", "example.com"]
    )

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_max_urls_out_of_range(url_file):
    result = CliRunner().invoke(main, [url_file, "--max-urls-per-sitemap", "50001"])

    assert result.exit_code == 2


def test_missing_input_file(tmp_path):
    result = CliRunner().invoke(main, [str(tmp_path / "missing.txt")])

    assert result.exit_code == 2


def test_unreadable_input_is_reported(tmp_path):
    input_file = tmp_path / "urls.txt"
    input_file.write_bytes(b"http://www.example.com/\xff\xfe\n")
    output_dir = tmp_path / "out"

    result = CliRunner().invoke(main, [str(input_file), "--output-dir", str(output_dir)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Error:" in result.output
    assert os.listdir(output_dir) == []


def test_invalid_environment_value(monkeypatch, tmp_path, url_file):
    monkeypatch.setenv("SITEMAP_MAX_URLS_PER_SITEMAP", "lots")

    result = CliRunner().invoke(main, [url_file, "--output-dir", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert "SITEMAP_MAX_URLS_PER_SITEMAP" in result.output


def test_environment_supplies_defaults(monkeypatch, tmp_path, url_file):
    output_dir = tmp_path / "env-out"
    monkeypatch.setenv("SITEMAP_OUTPUT_DIR", str(output_dir))
    monkeypatch.setenv("SITEMAP_MAX_URLS_PER_SITEMAP", "2")
    monkeypatch.setenv("SITEMAP_COMPRESS", "true")

    result = CliRunner().invoke(main, [url_file])

    assert result.exit_code == 0, result.output
    assert sorted(os.listdir(output_dir)) == [
        "sitemap_001.xml.gz",
        "sitemap_002.xml.gz",
        "sitemap_index.xml.gz",
    ]


def test_command_line_overrides_environment(monkeypatch, tmp_path, url_file):
    output_dir = tmp_path / "out"
    monkeypatch.setenv("SITEMAP_PRETTY", "true")
    monkeypatch.setenv("SITEMAP_MAX_URLS_PER_SITEMAP", "1")

    result = CliRunner().invoke(
        main,
        [url_file, "--output-dir", str(output_dir), "--compact", "--max-urls-per-sitemap", "10"],
    )

    assert result.exit_code == 0, result.output
    content = (output_dir / "sitemap.xml").read_text(encoding="utf-8")
    assert "\n" not in content
