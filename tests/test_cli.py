"""Tests for the command line interface."""

import pytest

from sales_report.cli import build_parser, main, parse_args
from sales_report.parser.ollama import OllamaParser
from sales_report.parser.text_parser import SalesTextParser

REPORT_TEXT = """Sucursal 8422416200034 ( ECI GOYA 0003 )
8437021807011 119,763
Num. Persona Vtas: 0051258002
8437021807999 49,91
"""


class TestParseArgs:
    def test_defaults(self, tmp_path):
        args = parse_args(["process", str(tmp_path / "r.pdf")])
        assert args.strategy == "regex"
        assert args.strict_amounts is False
        assert args.max_bytes == 750 * 1024

    def test_no_command_exits(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_builds_selected_parser(self):
        args = parse_args(["process", "r.txt", "--strict-amounts"])
        parser = build_parser(args, None)
        assert isinstance(parser, SalesTextParser)
        assert parser.options.drop_malformed_amounts is True

        args = parse_args(["process", "r.txt", "--strategy", "ollama", "--ollama-host", "gpu-box:9999"])
        parser = build_parser(args, None)
        assert isinstance(parser, OllamaParser)
        assert (parser.host, parser.port) == ("gpu-box", 9999)


class TestMain:
    def test_process_writes_csv(self, tmp_path):
        report = tmp_path / "report.txt"
        report.write_text(REPORT_TEXT, encoding="utf-8")
        output = tmp_path / "sales.csv"

        assert main(["process", str(report), "-o", str(output)]) == 0

        lines = output.read_text(encoding="utf-8").split("\n")
        assert lines[0] == "SucursalID,SucursalName,EAN,CantidadVendida,Importe,NumPersonaVtas"
        assert lines[1] == '"8422416200034","ECI GOYA 0003","8437021807011","3","119.76","0051258002"'
        assert lines[2] == '"8422416200034","ECI GOYA 0003","8437021807999","1","49.91",""'

    def test_missing_input_fails(self, tmp_path):
        assert main(["process", str(tmp_path / "missing.pdf")]) == 1

    def test_no_records_fails(self, tmp_path):
        report = tmp_path / "empty.txt"
        report.write_text("no sales today\n", encoding="utf-8")
        output = tmp_path / "sales.csv"

        assert main(["process", str(report), "-o", str(output)]) == 1
        assert not output.exists()
