"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from statement_analytics.cli import main


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the CLI from an empty directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


class TestMain:
    """Tests for main function."""

    def test_list_categories(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test listing the built-in categories."""
        assert main(["--list-categories"]) == 0

        out = capsys.readouterr().out
        assert "  - atm-withdrawal" in out
        assert "  - other" in out

    def test_no_inputs(self, workdir: Path) -> None:
        """Test running without inputs fails."""
        assert main([]) == 1

    def test_missing_input(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a missing input file fails."""
        assert main(["missing.txt"]) == 1
        assert "No valid input files" in capsys.readouterr().err

    def test_writes_csv_and_report(
        self, workdir: Path, basic_statement_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test a full run over one statement."""
        report_path = workdir / "report.json"

        code = main([
            str(basic_statement_file),
            "-o",
            "out.csv",
            "--report",
            str(report_path),
            "--statement-id",
            "jan-2024",
        ])

        assert code == 0
        lines = (workdir / "out.csv").read_text(encoding="utf-8").splitlines()
        assert lines[0] == "Date,Description,Amount,Type,Category,Confidence"
        assert len(lines) == 8

        report = json.loads(report_path.read_text(encoding="utf-8"))
        statement = report["statements"][0]
        assert statement["statement_id"] == "jan-2024"
        assert statement["net"] == "31174.90"

        err = capsys.readouterr().err
        assert "statement_basic.txt [jan-2024]" in err
        assert "Wrote 7 transactions" in err

    def test_directory_input_tsv(self, workdir: Path, fixtures_dir: Path) -> None:
        """Test a directory of statements written as TSV."""
        assert main([str(fixtures_dir), "--format", "tsv"]) == 0

        lines = (workdir / "transactions.csv").read_text(encoding="utf-8").splitlines()
        assert lines[0].split("\t")[0] == "Date"
        assert len(lines) == 8

    def test_config_delimiter(self, workdir: Path, basic_statement_file: Path) -> None:
        """Test the delimiter and category rules come from config.json."""
        (workdir / "config.json").write_text(
            json.dumps({
                "rules": {"categories": [{"pattern": "amazon", "category": "online"}]},
                "output": {"delimiter": ";"},
            })
        )

        assert main([str(basic_statement_file)]) == 0

        text = (workdir / "transactions.csv").read_text(encoding="utf-8")
        assert text.startswith("Date;Description")
        assert ";online;" in text

    def test_invalid_config(self, workdir: Path, basic_statement_file: Path) -> None:
        """Test an unreadable config aborts the run."""
        config = workdir / "broken.json"
        config.write_text("{")

        assert main([str(basic_statement_file), "--config", str(config)]) == 1

    def test_statement_id_needs_single_file(
        self, workdir: Path, basic_statement_file: Path, empty_statement_file: Path
    ) -> None:
        """Test --statement-id with several files fails."""
        code = main([
            str(basic_statement_file),
            str(empty_statement_file),
            "--statement-id",
            "x",
        ])

        assert code == 1

    def test_unreadable_statement(self, workdir: Path) -> None:
        """Test a run where no statement can be read fails."""
        pdf = workdir / "statement.txt"
        pdf.write_bytes(b"%PDF-1.4")

        assert main([str(pdf)]) == 1

    def test_no_inputs_suggests_init_config(
        self, workdir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the help output points at --init-config without a config."""
        assert main([]) == 1
        assert "No config file found" in capsys.readouterr().out

    def test_init_config(self, workdir: Path) -> None:
        """Test a starter config is written to an explicit path."""
        target = workdir / "my-config.json"

        assert main(["--init-config", "--config", str(target)]) == 0

        config = json.loads(target.read_text())
        assert config["rules"]["categories"] == []
        assert config["output"]["delimiter"] == ","

    def test_init_config_default_location(
        self, workdir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the starter config goes to the XDG directory."""
        assert main(["--init-config"]) == 0
        capsys.readouterr()

        assert main([]) == 1
        assert "No config file found" not in capsys.readouterr().out

    def test_init_config_keeps_existing(self, workdir: Path) -> None:
        """Test an existing config is never overwritten."""
        target = workdir / "config.json"
        target.write_text('{"output": {"delimiter": ";"}}')

        assert main(["--init-config", "--config", str(target)]) == 1
        assert json.loads(target.read_text()) == {"output": {"delimiter": ";"}}

    def test_statement_summary_reported_once(
        self, workdir: Path, basic_statement_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test library INFO logs are quiet unless verbose."""
        assert main([str(basic_statement_file)]) == 0
        err = capsys.readouterr().err
        assert "INFO:" not in err
        assert "Transactions: 7" in err

        assert main([str(basic_statement_file), "-v"]) == 0
        err = capsys.readouterr().err
        assert "INFO: Statement" in err
        assert "DEBUG: Skipped line" in err
