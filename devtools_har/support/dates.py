# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Date formatting for HAR timestamps"""
from datetime import datetime, timezone
import logging

import dateutil.parser


def iso_from_datetime(value):
    """ISO-8601 in UTC with millisecond precision (2015-08-26T11:51:49.592Z)"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return '{0}.{1:03d}Z'.format(value.strftime('%Y-%m-%dT%H:%M:%S'), value.microsecond // 1000)


def iso_from_epoch(seconds):
    """Format epoch seconds (float) as a HAR timestamp"""
    return iso_from_datetime(datetime.fromtimestamp(seconds, tz=timezone.utc))


def parse_http_date(text):
    """Parse an HTTP/cookie date, returns None if it can't be parsed"""
    try:
        return dateutil.parser.parse(text)
    except (ValueError, OverflowError):
        logging.debug('Unable to parse date: %s', text)
    return None
