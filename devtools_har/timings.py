# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""HAR phase timings from the devtools ResourceTiming data.

All of the devtools timing markers are milliseconds relative to
``timing.requestTime`` and are -1 when the phase did not happen. HAR uses -1
the same way so a phase that didn't occur is never reported as 0.
"""
import math


def format_millis(value):
    """Round to whole milliseconds, halves away from zero"""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def first_non_negative(values):
    for value in values:
        if value is not None and value >= 0:
            return value
    return -1


def parse_optional_time(timing, start, end):
    """Duration of an optional phase, -1 if it didn't happen"""
    if timing.get(start, -1) >= 0:
        return format_millis(timing[end] - timing[start])
    return -1


def calculate_timings(timing):
    """Build the HAR timings for a response timing sample.

    receive is filled in later when the request finishes loading.
    """
    blocked = format_millis(first_non_negative([timing.get('dnsStart'),
                                                timing.get('connectStart'),
                                                timing.get('sendStart')]))
    return {
        'blocked': blocked,
        'dns': parse_optional_time(timing, 'dnsStart', 'dnsEnd'),
        'connect': parse_optional_time(timing, 'connectStart', 'connectEnd'),
        'send': format_millis(timing.get('sendEnd', 0) - timing.get('sendStart', 0)),
        'wait': format_millis(timing.get('receiveHeadersEnd', 0) - timing.get('sendEnd', 0)),
        'receive': 0,
        'ssl': parse_optional_time(timing, 'sslStart', 'sslEnd')
    }


def missing_timings():
    return {
        'blocked': -1,
        'dns': -1,
        'connect': -1,
        'send': 0,
        'wait': 0,
        'receive': 0,
        'ssl': -1,
        'comment': 'No timings available from Chrome'
    }


def total_time(timings):
    """Total request time (ssl is already part of connect)"""
    return max(0, timings['blocked']) + max(0, timings['dns']) + max(0, timings['connect']) + \
        timings['send'] + timings['wait'] + timings['receive']
