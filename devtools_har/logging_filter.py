"""A filter for our logging handler"""

import logging

class LoggingFilter(logging.Filter):
    """Adds the input file and the event being processed to every log record"""
    def __init__(self, source):
        super().__init__()
        self.source = source
        self.event_index = '-'
        self.event_method = '-'
    def filter(self, record):
        record.source = self.source
        record.event_index = self.event_index
        record.event_method = self.event_method
        return True
    def set_event(self, index, method):
        self.event_index = '-' if index is None else index
        self.event_method = method if method else '-'
