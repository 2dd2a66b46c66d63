"""Shared pytest fixtures for wsbench_report tests."""

import json

import pytest


def make_step(clients, median=5.0, p95=8.0, max_rtt=12.0, min_rtt=1.0):
    return {
        "clients": clients,
        "max-rtt": max_rtt,
        "min-rtt": min_rtt,
        "median-rtt": median,
        "per-rtt": p95,
    }


@pytest.fixture
def report_dir(tmp_path):
    """Empty directory for report files."""
    directory = tmp_path / "dist"
    directory.mkdir()
    return directory


@pytest.fixture
def write_report(report_dir):
    """Write a report file into report_dir; steps may be dicts or raw content."""

    def _write(name, steps=None, raw=None, **extra):
        path = report_dir / name
        if raw is not None:
            path.write_text(raw)
        else:
            data = {"steps": steps or []}
            data.update(extra)
            path.write_text(json.dumps(data))
        return path

    return _write
