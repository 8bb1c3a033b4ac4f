"""Report export."""

from pos_analytics.export.csv_report import SECTION_TITLES, render_report_csv, write_report_csv

__all__ = ["SECTION_TITLES", "render_report_csv", "write_report_csv"]
