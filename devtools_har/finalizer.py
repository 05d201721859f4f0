# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Assemble the HAR document from the correlated pages and entries"""
import logging

from devtools_har import __version__

HAR_VERSION = '1.2'
CREATOR_NAME = 'devtools-har'
CREATOR_COMMENT = 'Converted from Chrome devtools events'


def finalize(pages, entries, include_cache=False):
    """Filter the entries and build the HAR log, keeping the processing order"""
    if not include_cache:
        entries = [entry for entry in entries if not entry.is_cache_hit()]
    har_entries = []
    for entry in entries:
        if entry.is_complete():
            har_entries.append(entry.har)
        else:
            logging.debug('Dropping incomplete request: %s', entry.request['url'])
    return {'log': {
        'version': HAR_VERSION,
        'creator': {'name': CREATOR_NAME, 'version': __version__, 'comment': CREATOR_COMMENT},
        'pages': [page.har for page in pages],
        'entries': har_entries
    }}
