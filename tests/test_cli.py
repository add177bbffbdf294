"""Test the command line interface."""

import json
from unittest.mock import MagicMock, patch

import pytest

from radshield.cli.main import build_parser, load_placeholders, main


@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / "befund.txt"
    path.write_text("Patient email: john.doe@example.com\nReferenz 123456789", encoding="utf-8")
    return path


def run_cli(monkeypatch, *args):
    monkeypatch.setattr("sys.argv", ["radshield", *args])
    monkeypatch.setattr("radshield.cli.main.configure_logging", MagicMock())
    main()


class TestParser:
    def test_rewrite_defaults(self):
        args = build_parser().parse_args(["rewrite", "befund.txt"])

        assert args.command == "rewrite"
        assert args.mode == "1"
        assert args.model is None

    def test_validate_requires_placeholders(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["validate", "a.txt", "b.txt"])


class TestCommands:
    """Test the redact, validate and rewrite commands."""

    def test_redact(self, monkeypatch, capsys, report_file):
        run_cli(monkeypatch, "redact", str(report_file))
        output = json.loads(capsys.readouterr().out)

        assert output["redacted"] == "Patient email: [EMAIL_0]\nReferenz [NUMERIC_ID_1]"
        assert output["stats"]["total_redactions"] == 2
        assert output["placeholders"][0]["original"] == "john.doe@example.com"

    def test_redact_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", MagicMock(read=lambda: "Kontakt: a@b.de"))
        run_cli(monkeypatch, "redact", "-")

        assert json.loads(capsys.readouterr().out)["redacted"] == "Kontakt: [EMAIL_0]"

    def test_validate_with_redact_output(self, monkeypatch, capsys, report_file, tmp_path):
        run_cli(monkeypatch, "redact", str(report_file))
        redaction = capsys.readouterr().out
        placeholders_file = tmp_path / "redaction.json"
        placeholders_file.write_text(redaction, encoding="utf-8")

        run_cli(
            monkeypatch,
            "validate",
            str(report_file),
            str(report_file),
            "--placeholders",
            str(placeholders_file),
        )
        report = json.loads(capsys.readouterr().out)

        assert report["is_valid"] is True
        assert report["score"] == 100

    def test_load_placeholders_accepts_plain_list(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps([{"id": "[EMAIL_0]"}]), encoding="utf-8")

        assert load_placeholders(path) == [{"id": "[EMAIL_0]"}]

    @patch("radshield.cli.main.ReportRewriter")
    def test_rewrite(self, mock_rewriter_cls, monkeypatch, capsys, report_file):
        result = MagicMock()
        result.model_dump.return_value = {"request_id": "req_cli", "content": "ok"}
        mock_rewriter_cls.return_value.rewrite.return_value = result

        run_cli(monkeypatch, "rewrite", str(report_file), "--mode", "3", "--request-id", "req_cli")

        mock_rewriter_cls.assert_called_once_with(model=None)
        text, options = mock_rewriter_cls.return_value.rewrite.call_args.args
        assert text.startswith("Patient email:")
        assert options.mode == "3"
        assert json.loads(capsys.readouterr().out)["request_id"] == "req_cli"


class TestErrors:
    def test_missing_file(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "redact", "does-not-exist.txt")

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_malformed_placeholders(self, monkeypatch, capsys, report_file, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps(["[EMAIL_0]"]), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            run_cli(
                monkeypatch, "validate", str(report_file), str(report_file),
                "--placeholders", str(path),
            )

        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_no_command(self, monkeypatch):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch)
        assert exc_info.value.code == 2


class TestListings:
    def test_list_patterns(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "--list-patterns")

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "email" in out
        assert "Total patterns:" in out

    def test_list_models(self, monkeypatch, capsys):
        with pytest.raises(SystemExit):
            run_cli(monkeypatch, "--list-models")

        assert "gpt-4o-mini" in capsys.readouterr().out
