# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Reading devtools event logs and writing HAR files"""
import gzip
import logging
import os

import ujson as json

GZIP_TEXT = 'wt'
GZIP_READ_TEXT = 'rt'


def load_events(devtools_file):
    """Load the list of devtools events from a .json or .json.gz file"""
    _, ext = os.path.splitext(devtools_file)
    if ext.lower() == '.gz':
        f_in = gzip.open(devtools_file, GZIP_READ_TEXT, encoding='utf-8')
    else:
        f_in = open(devtools_file, 'r', encoding='utf-8')
    with f_in:
        raw_events = json.load(f_in)
    if isinstance(raw_events, dict) and 'events' in raw_events:
        raw_events = raw_events['events']
    if not isinstance(raw_events, list):
        raise ValueError('{0} does not contain a list of devtools events'.format(devtools_file))
    logging.debug('Loaded %d devtools events from %s', len(raw_events), devtools_file)
    return raw_events


def write_har(har, out_file):
    """Write out the HAR, gzipped if the file name ends in .gz"""
    _, ext = os.path.splitext(out_file)
    if ext.lower() == '.gz':
        with gzip.open(out_file, GZIP_TEXT, encoding='utf-8') as f_out:
            json.dump(har, f_out)
    else:
        with open(out_file, 'w', encoding='utf-8') as f_out:
            json.dump(har, f_out)
    logging.debug('Wrote %d pages and %d entries to %s', len(har['log']['pages']),
                  len(har['log']['entries']), out_file)
