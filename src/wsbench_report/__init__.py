"""
WebSocket bench report - aggregate benchmark runs into an HTML chart report.

Structure:
- measurement: Sample points, steps and the per-category aggregator
- analysis/: Report loading and chart rendering tools
"""

__version__ = "0.1.0"
