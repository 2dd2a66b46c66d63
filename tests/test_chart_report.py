"""Tests for report rendering and the chart-report CLI."""

import json

from conftest import make_step
from wsbench_report.analysis.chart_report import (
    generate_html,
    generate_json,
    generate_table,
    main,
    series_literal,
)
from wsbench_report.measurement import Aggregator


def build_aggregator():
    agg = Aggregator()
    agg.record_step("protobuf", make_step(20, median=3.0, p95=6.0, max_rtt=9.0))
    agg.record_step("protobuf", make_step(10, median=1.0, p95=2.0, max_rtt=3.0))
    agg.record_step("json", make_step(10, median=2.0, p95=4.0, max_rtt=8.0))
    return agg


class TestGenerateHtml:
    def test_embeds_each_panel(self):
        html = generate_html(build_aggregator().series())
        assert html.startswith("<!DOCTYPE html>")
        for container in ("container--mean", "container--95p", "container--max"):
            assert f'id="{container}"' in html
            assert f"drawChart('{container}'" in html
        assert "highcharts.js" in html

    def test_series_data_in_order(self):
        html = generate_html(build_aggregator().series())
        mean_call = html.split("drawChart('container--mean'")[1].split(");")[0]
        literal = mean_call[mean_call.index("["):]
        assert json.loads(literal) == [
            {"name": "protobuf", "data": [1.0, 3.0]},
            {"name": "json", "data": [2.0]},
        ]

    def test_title_escaped(self):
        html = generate_html({}, title="<b>bench</b>")
        assert "<title>&lt;b&gt;bench&lt;/b&gt;</title>" in html

    def test_empty_series(self):
        html = generate_html({"median": [], "p95": [], "max": []})
        assert "drawChart('container--max'" in html


def test_series_literal_escapes_script_close():
    literal = series_literal([{"name": "</script>", "data": [1.0]}])
    assert "</script>" not in literal
    assert json.loads(literal) == [{"name": "</script>", "data": [1.0]}]


def test_generate_json():
    document = json.loads(generate_json(build_aggregator()))
    assert document["categories"] == ["protobuf", "json"]
    assert document["clients"] == {"protobuf": [10, 20], "json": [10]}
    assert document["series"]["max"] == [
        {"name": "protobuf", "data": [3.0, 9.0]},
        {"name": "json", "data": [8.0]},
    ]


def test_generate_table_marks_missing_steps():
    table = generate_table(build_aggregator(), "github")
    assert "## Median RTT (ms)" in table
    json_row = [line for line in table.splitlines() if line.startswith("| json")][0]
    assert "2.0" in json_row
    assert "-" in json_row.replace("| json", "")


class TestMain:
    def test_html_to_stdout(self, report_dir, write_report, capsys):
        write_report("json_1.json", [make_step(10, median=5.0)])
        assert main([str(report_dir)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert '"name": "json"' in out

    def test_unknown_file_warns_and_continues(self, report_dir, write_report, capsys):
        write_report("json_1.json", [make_step(10)])
        write_report("results.json", [make_step(10)])
        assert main([str(report_dir)]) == 0
        captured = capsys.readouterr()
        assert "Unknown file" in captured.err
        assert "results" not in captured.out.split("<script>\n")[-1]

    def test_undecodable_file_fails_without_output(self, report_dir, capsys):
        (report_dir / "json_1.json").write_bytes(b'{"steps": [], "x": "\xff"}')
        assert main([str(report_dir)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "cannot decode" in captured.err

    def test_nan_value_fails_json_output(self, report_dir, write_report, capsys):
        write_report(
            "json_1.json",
            raw='{"steps": [{"clients": 10, "max-rtt": NaN, "min-rtt": 1, "median-rtt": 2, "per-rtt": 3}]}',
        )
        assert main([str(report_dir), "--format", "json"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "non-finite number NaN" in captured.err

    def test_malformed_file_fails_without_output(self, report_dir, write_report, capsys):
        write_report("json_1.json", [make_step(10)])
        write_report("msgpack_1.json", raw="{")
        assert main([str(report_dir)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error:" in captured.err

    def test_missing_directory(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_default_directory_from_env(self, report_dir, write_report, monkeypatch, capsys):
        write_report("json_1.json", [make_step(10)])
        monkeypatch.setenv("WSBENCH_REPORT_DIR", str(report_dir))
        assert main([]) == 0
        assert '"name": "json"' in capsys.readouterr().out

    def test_default_directory_is_dist(self, report_dir, write_report, monkeypatch, capsys):
        write_report("json_1.json", [make_step(10)])
        monkeypatch.delenv("WSBENCH_REPORT_DIR", raising=False)
        monkeypatch.chdir(report_dir.parent)
        assert main([]) == 0
        assert '"name": "json"' in capsys.readouterr().out

    def test_output_file(self, report_dir, write_report, tmp_path):
        write_report("json_1.json", [make_step(10)])
        output = tmp_path / "report.json"
        assert main([str(report_dir), "--format", "json", "-o", str(output)]) == 0
        assert json.loads(output.read_text())["categories"] == ["json"]

    def test_table_format(self, report_dir, write_report, capsys):
        write_report("json_1.json", [make_step(10, median=5.0)])
        assert main([str(report_dir), "--format", "table"]) == 0
        out = capsys.readouterr().out
        assert "=== Median RTT (ms) ===" in out
        assert "5.0" in out
