#!/usr/bin/env python
# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Convert a devtools event log into a HAR file"""
import logging
import sys
import time

from devtools_har.har_builder import EventProcessingError, HarBuilder
from devtools_har.logging_filter import LoggingFilter
from devtools_har.support.devtools_io import load_events, write_har


def main(argv=None):
    """Main entry point"""
    import argparse
    parser = argparse.ArgumentParser(description='Devtools to HAR converter.',
                                     prog='devtools2har')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="Increase verbosity (specify multiple times for more)" \
                             ". -vvvv for full debug output.")
    parser.add_argument('-d', '--devtools', help="Input devtools events file (.json or .json.gz).")
    parser.add_argument('-o', '--out', help="Output HAR file (.har or .gz).")
    parser.add_argument('--cache', '--include-cache', dest='cache', action='store_true', default=False,
                        help="Include resources served from the disk cache.")
    options, _ = parser.parse_known_args(argv)

    # Set up logging
    log_level = logging.CRITICAL
    if options.verbose == 1:
        log_level = logging.ERROR
    elif options.verbose == 2:
        log_level = logging.WARNING
    elif options.verbose == 3:
        log_level = logging.INFO
    elif options.verbose >= 4:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s.%(msecs)03d - [%(event_index)s %(event_method)s] %(message)s",
        datefmt="%H:%M:%S")

    if not options.devtools or not options.out:
        parser.error("Input devtools or output file is not specified.")

    log_filter = LoggingFilter(options.devtools)
    for handler in logging.getLogger().handlers:
        handler.addFilter(log_filter)

    start = time.time()
    builder = HarBuilder({'includeResourcesFromDiskCache': options.cache}, log_filter=log_filter)
    try:
        har = builder.process(load_events(options.devtools))
    except EventProcessingError:
        logging.critical('Unable to convert %s', options.devtools)
        return 1
    except (OSError, ValueError):
        logging.exception('Error loading %s', options.devtools)
        return 1
    write_har(har, options.out)
    elapsed = time.time() - start
    logging.debug("Devtools processing time: %0.3f", elapsed)
    return 0


if __name__ == '__main__':
    sys.exit(main())
