"""
LogPulse - admission core of a web-server log analytics pipeline.

Validates the monitored-site configuration before ingestion starts and
decides, per parsed log record, whether it counts as a page view.
"""

__version__ = "0.1.0"
