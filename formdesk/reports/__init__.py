"""Reports over normalized submissions: dashboard summary, filtering and CSV export."""

from formdesk.reports.dashboard import DashboardSummary, organization_for, organization_url, summarize
from formdesk.reports.export import export_csv, export_filename, filter_submissions

__all__ = [
    "DashboardSummary",
    "export_csv",
    "export_filename",
    "filter_submissions",
    "organization_for",
    "organization_url",
    "summarize",
]
