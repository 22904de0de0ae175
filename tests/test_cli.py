"""Tests for the pdf-preview command line."""
from click.testing import CliRunner

from pdf_preview.cli import cli

from conftest import make_pdf

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestConvertCommand:
    def test_writes_preview(self, tmp_path, pdf_bytes):
        pdf_path = tmp_path / "jane.pdf"
        pdf_path.write_bytes(pdf_bytes)

        result = CliRunner().invoke(cli, ["convert", str(pdf_path), "--scale", "1.0"])

        assert result.exit_code == 0, result.output
        preview = tmp_path / "resume.png"
        assert preview.read_bytes().startswith(PNG_SIGNATURE)
        assert "612x792 px" in result.output

    def test_output_path(self, tmp_path, pdf_bytes):
        pdf_path = tmp_path / "jane.pdf"
        pdf_path.write_bytes(pdf_bytes)
        out = tmp_path / "out" / "jane-preview.png"

        result = CliRunner().invoke(cli, ["convert", str(pdf_path), "-o", str(out), "--timing"])

        assert result.exit_code == 0, result.output
        assert out.exists()
        assert "TIMING BREAKDOWN (jane.pdf)" in result.output
        assert "rendering" in result.output

    def test_invalid_pdf_exits_nonzero(self, tmp_path):
        pdf_path = tmp_path / "broken.pdf"
        pdf_path.write_bytes(b"definitely not a pdf")

        result = CliRunner().invoke(cli, ["convert", str(pdf_path)])

        assert result.exit_code == 1
        assert not (tmp_path / "resume.png").exists()

    def test_timing_shown_on_failure(self, tmp_path):
        pdf_path = tmp_path / "broken.pdf"
        pdf_path.write_bytes(b"definitely not a pdf")

        result = CliRunner().invoke(cli, ["convert", str(pdf_path), "--timing"])

        assert result.exit_code == 1
        assert "TIMING BREAKDOWN (broken.pdf)" in result.output
        assert "parsing (failed)" in result.output


class TestConvertAllCommand:
    def test_converts_directory(self, tmp_path):
        (tmp_path / "a.pdf").write_bytes(make_pdf())
        (tmp_path / "b.pdf").write_bytes(make_pdf(width=300, height=300))

        result = CliRunner().invoke(cli, ["convert-all", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "a.png").exists()
        assert (tmp_path / "b.png").exists()
        assert "PDFs converted: 2" in result.output

    def test_skips_existing_previews(self, tmp_path):
        (tmp_path / "a.pdf").write_bytes(make_pdf())
        (tmp_path / "a.png").write_bytes(b"old")

        result = CliRunner().invoke(cli, ["convert-all", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "a.png").read_bytes() == b"old"
        assert "skipped (preview exists): 1" in result.output

    def test_force_regenerates(self, tmp_path):
        (tmp_path / "a.pdf").write_bytes(make_pdf())
        (tmp_path / "a.png").write_bytes(b"old")

        result = CliRunner().invoke(cli, ["convert-all", str(tmp_path), "--force"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "a.png").read_bytes().startswith(PNG_SIGNATURE)

    def test_reports_failures(self, tmp_path):
        (tmp_path / "good.pdf").write_bytes(make_pdf())
        (tmp_path / "bad.pdf").write_bytes(b"not a pdf")

        result = CliRunner().invoke(cli, ["convert-all", str(tmp_path)])

        assert result.exit_code == 1
        assert (tmp_path / "good.png").exists()
        assert not (tmp_path / "bad.png").exists()
