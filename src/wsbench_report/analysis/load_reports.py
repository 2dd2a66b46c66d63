"""
Load benchmark run files into an aggregator.

Each run writes one file named <label>_<digits>.json, e.g. msgpack_3.json,
holding {"steps": [{"clients": ..., "max-rtt": ..., ...}, ...]}. Files that
do not follow the naming convention are reported and skipped; any other
problem with a file aborts the load.
"""

import re
import sys
import json
from pathlib import Path

from wsbench_report.measurement import Aggregator, InvalidReportError


REPORT_PATTERN = re.compile(r"(?P<label>.+)_\d+\.json")


def report_label(path):
    """Return the category label encoded in a report file name, or None."""
    match = REPORT_PATTERN.fullmatch(Path(path).name)
    if not match:
        return None
    return match.group("label")


def find_reports(target_dir):
    """List candidate report files in a directory, sorted by name."""
    return sorted(Path(target_dir).glob("*.json"))


def _reject_constant(name):
    raise InvalidReportError(f"non-finite number {name} is not allowed")


def load_report(path):
    """Read one report file and return its parsed content."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f, parse_constant=_reject_constant)
    except OSError as e:
        raise InvalidReportError(f"{path}: cannot read file: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidReportError(f"{path}: cannot decode file: {e}") from e
    except InvalidReportError as e:
        raise InvalidReportError(f"{path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidReportError(f"{path}: invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidReportError(f"{path}: expected a JSON object at top level")
    if "steps" not in data:
        raise InvalidReportError(f"{path}: missing 'steps'")
    if not isinstance(data["steps"], list):
        raise InvalidReportError(f"{path}: 'steps' must be a list")

    return data


def load_reports(target_dir, aggregator=None, verbose=False):
    """
    Feed every report in target_dir into an aggregator.

    Returns (aggregator, skipped) where skipped lists files whose names
    carry no category label.
    """
    target_dir = Path(target_dir)
    if not target_dir.is_dir():
        raise FileNotFoundError(f"Report directory not found: {target_dir}")

    if aggregator is None:
        aggregator = Aggregator()

    skipped = []
    for report in find_reports(target_dir):
        label = report_label(report)
        if label is None:
            print(f"Warning: Unknown file: {report}", file=sys.stderr)
            skipped.append(report)
            continue

        data = load_report(report)

        for index, step in enumerate(data["steps"]):
            try:
                aggregator.record_step(label, step)
            except InvalidReportError as e:
                raise InvalidReportError(f"{report}: step {index}: {e}") from e

        if verbose:
            print(f"  Processed: {report} ({label}, {len(data['steps'])} steps)", file=sys.stderr)
            messages = data.get("messages")
            if isinstance(messages, list) and messages:
                print(f"    Messages: {len(messages)}", file=sys.stderr)
                for message in messages:
                    print(f"      {message}", file=sys.stderr)

    return aggregator, skipped
