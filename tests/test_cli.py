"""Tests for the command line entry point and configuration."""

from __future__ import annotations

import importlib
from pathlib import Path
from unittest.mock import patch

import pytest

from sales_engine import cli, config

MERCHANTS_CSV = "id,name,created_at\n1,Shopin1901,2012-03-27\n2,Candisart,2012-03-27\n"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / "merchants.csv").write_text(MERCHANTS_CSV)
    return tmp_path


class TestConfig:
    def test_data_dir_from_env(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("SALES_ENGINE_DATA_DIR", str(tmp_path))
        monkeypatch.delenv("SALES_ENGINE_REPORTS_DIR", raising=False)
        try:
            reloaded = importlib.reload(config)
            assert reloaded.DATA_FOLDER == tmp_path
            assert reloaded.REPORTS_FOLDER == tmp_path / "reports"
        finally:
            monkeypatch.undo()
            importlib.reload(config)

    def test_csv_files_cover_every_collection(self) -> None:
        assert set(config.CSV_FILES) == {
            "merchants", "items", "customers", "invoices", "invoice_items", "transactions",
        }


class TestSummaryCommand:
    def test_prints_rankings(self, data_dir: Path, capsys) -> None:
        cli.main(["--data-dir", str(data_dir), "summary", "--top", "3"])
        out = capsys.readouterr().out
        assert "SALES ENGINE" in out
        assert "merchants" in out
        assert "TOP 3 BUYERS" in out


class TestReportCommand:
    def test_writes_workbook(self, data_dir: Path, tmp_path: Path, capsys) -> None:
        out_path = tmp_path / "reports" / "summary.xlsx"
        cli.main(["--data-dir", str(data_dir), "report", "--output", str(out_path)])
        assert out_path.exists()
        assert "Report saved to" in capsys.readouterr().out


class TestServeCommand:
    def test_runs_app_for_data_dir(self, data_dir: Path) -> None:
        with patch("uvicorn.run") as run:
            cli.main(["--data-dir", str(data_dir), "serve", "--port", "9001"])
        app = run.call_args.args[0]
        assert app.state.data_folder == data_dir
        assert run.call_args.kwargs["port"] == 9001


class TestNoCommand:
    def test_prints_help(self, capsys) -> None:
        cli.main([])
        assert "usage" in capsys.readouterr().out.lower()
