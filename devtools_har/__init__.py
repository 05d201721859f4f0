"""Convert Chrome devtools event logs into HAR files."""

__version__ = '1.0.0'

from devtools_har.har_builder import EventProcessingError, HarBuilder, har_from_events  # noqa: E402
