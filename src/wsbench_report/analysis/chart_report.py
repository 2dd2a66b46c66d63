#!/usr/bin/env python3
"""
Generate an interactive HTML chart report from WebSocket benchmark runs.

Usage:
    chart-report > report.html
    chart-report dist/ -o report.html
    chart-report dist/ --format table
"""

import os
import sys
import json
import argparse
from html import escape
from pathlib import Path
from tabulate import tabulate

from wsbench_report.measurement import SERIES_FIELDS, InvalidReportError
from wsbench_report.analysis.load_reports import load_reports


DEFAULT_TARGET_DIR = "dist"
TARGET_DIR_ENV = "WSBENCH_REPORT_DIR"

DEFAULT_TITLE = "WebSocket bench results"

# (statistic, container id, chart title) for each chart panel
PANELS = [
    ("median", "container--mean", "Median RTT (msg) with different encoders"),
    ("p95", "container--95p", "95p RTT (msg) with different encoders"),
    ("max", "container--max", "Max RTT (msg) with different encoders"),
]

STAT_LABELS = {
    "median": "Median RTT (ms)",
    "p95": "95p RTT (ms)",
    "max": "Max RTT (ms)",
    "min": "Min RTT (ms)",
}


def series_literal(series):
    """Serialize one statistic's series as a JS array literal for a <script> block."""
    return json.dumps(series, indent=2).replace("</", "<\\/")


def generate_html(series, title=DEFAULT_TITLE):
    """Render the chart report from pre-computed series keyed by statistic."""
    panels_html = "\n".join(
        f'      <div id="{container}"></div>' for _, container, _ in PANELS
    )
    draw_calls = "\n\n".join(
        f"    drawChart('{container}', {json.dumps(chart_title)},\n"
        f"      {series_literal(series.get(stat, []))}\n"
        f"    );"
        for stat, container, chart_title in PANELS
    )

    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>{escape(title)}</title>
    <meta name="viewport" content="width=device-width">
    <meta charset="UTF-8">
    <script src="https://code.highcharts.com/highcharts.js"></script>
    <script src="https://code.highcharts.com/modules/series-label.js"></script>
    <script src="https://code.highcharts.com/modules/exporting.js"></script>
    <script src="https://code.highcharts.com/modules/export-data.js"></script>
    <script src="https://code.highcharts.com/modules/accessibility.js"></script>
    <style>
      .highcharts-figure, .highcharts-data-table table {{
        min-width: 360px;
        max-width: 800px;
        margin: 1em auto;
      }}

      .highcharts-data-table table {{
        font-family: Verdana, sans-serif;
        border-collapse: collapse;
        border: 1px solid #EBEBEB;
        margin: 10px auto;
        text-align: center;
        width: 100%;
        max-width: 500px;
      }}

      .highcharts-data-table caption {{
        padding: 1em 0;
        font-size: 1.2em;
        color: #555;
      }}

      .highcharts-data-table th {{
        font-weight: 600;
        padding: 0.5em;
      }}

      .highcharts-data-table td, .highcharts-data-table th, .highcharts-data-table caption {{
        padding: 0.5em;
      }}

      .highcharts-data-table thead tr, .highcharts-data-table tr:nth-child(even) {{
        background: #f8f8f8;
      }}

      .highcharts-data-table tr:hover {{
        background: #f1f7ff;
      }}
    </style>
  </head>
  <body>
    <figure class="highcharts-figure">
{panels_html}
    </figure>

    <script>
    function drawChart(id, title, series) {{
      Highcharts.chart(id, {{
        title: {{ text: title }},
        yAxis: {{ title: {{ text: 'ms' }} }},
        xAxis: {{ title: {{ text: 'number of clients (thousands)' }} }},
        legend: {{
          layout: 'vertical',
          align: 'right',
          verticalAlign: 'middle'
        }},
        plotOptions: {{
          series: {{
            label: {{ connectorAllowed: false }},
            pointStart: 0
          }}
        }},
        series: series,
        responsive: {{
          rules: [{{
            condition: {{ maxWidth: 500 }},
            chartOptions: {{
              legend: {{
                layout: 'horizontal',
                align: 'center',
                verticalAlign: 'bottom'
              }}
            }}
          }}]
        }}
      }});
    }}

{draw_calls}
    </script>
  </body>
</html>
"""


def generate_json(aggregator):
    """Aggregated series as a JSON document."""
    document = {
        "categories": aggregator.labels(),
        "clients": {
            m.label: m.client_counts() for m in aggregator.measurements()
        },
        "series": aggregator.series(),
    }
    return json.dumps(document, indent=2) + "\n"


def generate_table(aggregator, tablefmt="grid"):
    """One table per charted statistic: categories by client count."""
    client_counts = aggregator.client_counts()
    headers = ["Category"] + [str(c) for c in client_counts]

    sections = []
    for stat in SERIES_FIELDS:
        rows = []
        for m in aggregator.measurements():
            row = [m.label]
            for clients in client_counts:
                step = m.get_step(clients)
                row.append(step.mean(stat) if step is not None else None)
            rows.append(row)

        table = tabulate(rows, headers=headers, tablefmt=tablefmt, floatfmt=".1f", missingval="-")
        if tablefmt == "github":
            sections.append(f"## {STAT_LABELS[stat]}\n\n{table}\n")
        else:
            sections.append(f"=== {STAT_LABELS[stat]} ===\n{table}\n")

    return "\n".join(sections)


def render(aggregator, format_type="html", title=DEFAULT_TITLE):
    if format_type == "html":
        return generate_html(aggregator.series(), title)
    elif format_type == "json":
        return generate_json(aggregator)
    elif format_type == "table":
        return generate_table(aggregator, "grid")
    elif format_type == "markdown":
        return generate_table(aggregator, "github")
    raise ValueError(f"Unknown format: {format_type}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate an interactive HTML chart report from WebSocket benchmark runs"
    )
    parser.add_argument(
        "target_dir", nargs="?", default=None,
        help=f"Directory with <label>_<n>.json report files "
        f"(default: ${TARGET_DIR_ENV} or {DEFAULT_TARGET_DIR})"
    )
    parser.add_argument(
        "--format",
        default="html",
        choices=["html", "json", "table", "markdown"],
        help="Output format (default: html)",
    )
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("--title", default=DEFAULT_TITLE, help="HTML page title")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    target_dir = Path(
        args.target_dir or os.environ.get(TARGET_DIR_ENV, DEFAULT_TARGET_DIR)
    )

    try:
        aggregator, skipped = load_reports(target_dir, verbose=args.verbose)
    except (FileNotFoundError, InvalidReportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not len(aggregator):
        print(f"Warning: No benchmark reports found in {target_dir}", file=sys.stderr)

    output = render(aggregator, args.format, args.title)

    if args.output:
        output_path = Path(args.output)
        with open(output_path, "w") as f:
            f.write(output)
        print(
            f"Report generated: {output_path} ({len(aggregator)} categories, "
            f"{len(skipped)} files skipped)",
            file=sys.stderr,
        )
    else:
        sys.stdout.write(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
