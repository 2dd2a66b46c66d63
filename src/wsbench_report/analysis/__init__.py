"""
Report loading and rendering tools.

This module contains tools for turning benchmark runs into reports:
- load_reports: Read per-run JSON files into an aggregator
- chart_report: Render aggregated series as HTML charts or tables
"""
