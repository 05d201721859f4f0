# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Working records for HAR pages and entries.

Each record carries the state needed while correlating devtools events and
wraps the ``har`` dict that ends up in the output, so nothing internal has to
be stripped from the output later.
"""
import logging

from devtools_har.support.cookies import parse_request_cookies, parse_response_cookies
from devtools_har.support.dates import iso_from_epoch
from devtools_har.support.headers import (calculate_request_header_size,
                                          calculate_response_header_size,
                                          get_header_value, is_http1x, parse_headers)
from devtools_har.support.post_data import parse_post_data, parse_query_string
from devtools_har.timings import calculate_timings, format_millis, missing_timings, total_time


def cache_before_request():
    """Placeholder cache entry for resources that never hit the network"""
    return {'lastAccess': '', 'eTag': '', 'hitCount': 0}


class PageRecord(object):
    """A top-level navigation"""
    def __init__(self, page_id, frame_id):
        self.frame_id = frame_id
        self.timestamp = None
        self.wall_time = None
        self.har = {
            'id': page_id,
            'startedDateTime': '',
            'title': '',
            'pageTimings': {}
        }

    @property
    def page_id(self):
        return self.har['id']

    def is_stamped(self):
        return self.timestamp is not None

    def stamp(self, entry, url):
        """Use the first request on the page for the page start and title"""
        entry.main_request = True
        self.timestamp = entry.request_will_be_sent_time
        self.wall_time = entry.wall_time
        self.har['startedDateTime'] = entry.har['startedDateTime']
        # URL is better than blank and it's what devtools uses
        self.har['title'] = url

    def set_page_timing(self, name, timestamp):
        """Record a page event (onLoad, onContentLoad) relative to the page start"""
        if timestamp and self.is_stamped():
            self.har['pageTimings'][name] = format_millis((timestamp - self.timestamp) * 1000)


class EntryRecord(object):
    """One request/response exchange"""
    def __init__(self, request_id, frame_id, page, har):
        self.request_id = request_id
        self.frame_id = frame_id
        self.page = page
        self.har = har
        self.request_will_be_sent_time = None
        self.wall_time = None
        self.request_sent_time = None
        self.receive_headers_end = None
        self.served_from_cache = False
        self.main_request = False

    @property
    def request(self):
        return self.har['request']

    @property
    def response(self):
        return self.har.get('response')

    def is_complete(self):
        return 'response' in self.har

    def is_cache_hit(self):
        return 'beforeRequest' in self.har['cache']

    def mark_served_from_cache(self):
        self.served_from_cache = True
        self.har['cache']['beforeRequest'] = cache_before_request()


def build_entry(params, page):
    """Create the entry for a Network.requestWillBeSent event"""
    request = params['request']
    headers = request.get('headers') or {}
    # Remove the fragment, that's what Chrome does
    url = request['url'].split('#', 1)[0]
    har_request = {
        'method': request.get('method', ''),
        'url': url,
        'queryString': parse_query_string(url),
        'headersSize': -1,
        'bodySize': -1,
        'cookies': parse_request_cookies(get_header_value(headers, 'Cookie')),
        'headers': parse_headers(headers)
    }
    post_data = parse_post_data(get_header_value(headers, 'Content-Type'), request.get('postData'))
    if post_data is not None:
        har_request['postData'] = post_data
    if request.get('postData'):
        har_request['bodySize'] = len(request['postData'].encode('utf-8'))

    wall_time = params.get('wallTime')
    har = {
        'pageref': page.page_id,
        'startedDateTime': iso_from_epoch(wall_time) if wall_time is not None else '',
        'time': 0,
        'request': har_request,
        'cache': {}
    }
    if 'initialPriority' in request:
        har['_initialPriority'] = request['initialPriority']
        har['_priority'] = request['initialPriority']
    initiator = params.get('initiator') or {}
    if 'url' in initiator:
        har['_initiator'] = initiator['url']
    if 'lineNumber' in initiator:
        har['_initiator_line'] = initiator['lineNumber']

    entry = EntryRecord(params['requestId'], params.get('frameId'), page, har)
    entry.request_will_be_sent_time = params.get('timestamp')
    entry.wall_time = wall_time
    return entry


def populate_entry_from_response(entry, response):
    """Fill in the response side of an entry from a devtools Response object"""
    response_headers = response.get('headers') or {}
    protocol = response.get('protocol', '')
    har_response = {
        'httpVersion': protocol,
        'redirectURL': '',
        'status': response.get('status', 0),
        'statusText': response.get('statusText', ''),
        'content': {
            'mimeType': response.get('mimeType', ''),
            'size': 0
        },
        'headersSize': -1,
        'bodySize': -1,
        'cookies': parse_response_cookies(get_header_value(response_headers, 'Set-Cookie')),
        'headers': parse_headers(response_headers)
    }
    location = get_header_value(response_headers, 'Location')
    if location:
        har_response['redirectURL'] = location
    entry.har['response'] = har_response

    # The header size calculation depends on the protocol version
    har_request = entry.request
    har_request['httpVersion'] = protocol
    timing = response.get('timing')

    if response.get('fromDiskCache') is True:
        # h2 headers are compressed so a size from the header text would be wrong
        if is_http1x(protocol):
            har_response['headersSize'] = calculate_response_header_size(response)
        # h2 push can deliver a resource before the parser requests it
        if not (timing and timing.get('pushStart', 0) > 0):
            entry.har['cache']['beforeRequest'] = cache_before_request()
    else:
        request_headers = response.get('requestHeaders')
        if request_headers:
            har_request['headers'] = parse_headers(request_headers)
            har_request['cookies'] = parse_request_cookies(get_header_value(request_headers, 'Cookie'))
        if is_http1x(protocol):
            if response.get('headersText'):
                har_response['headersSize'] = len(response['headersText'])
            else:
                har_response['headersSize'] = calculate_response_header_size(response)
            if response.get('requestHeadersText'):
                har_request['headersSize'] = len(response['requestHeadersText'])
            else:
                har_request['headersSize'] = calculate_request_header_size(har_request)

    if response.get('connectionId') is not None:
        entry.har['connection'] = str(response['connectionId'])
    if response.get('remoteIPAddress'):
        entry.har['serverIPAddress'] = response['remoteIPAddress']

    if timing:
        timings = calculate_timings(timing)
        entry.har['timings'] = timings
        entry.request_sent_time = timing.get('requestTime')
        entry.receive_headers_end = timing.get('receiveHeadersEnd')
        if timing.get('pushStart', 0) > 0:
            entry.har['_was_pushed'] = 1
        entry.har['time'] = total_time(timings)

        # Some cached responses only show up as Network.requestServedFromCache
        # with fromDiskCache false, their timing data is useless.
        if not entry.served_from_cache and response.get('connectionReused') and \
                not entry.main_request and is_http1x(protocol):
            adjust_start_time(entry)
    else:
        entry.har['timings'] = missing_timings()
        entry.har['time'] = 0


def adjust_start_time(entry):
    """Move the start of a request on a reused HTTP/1 connection to when it was actually sent.

    The request may sit queued waiting for the connection so the wall time from
    requestWillBeSent is too early.
    """
    page = entry.page
    if entry.request_sent_time is None or page.wall_time is None or page.timestamp is None:
        logging.debug('Unable to adjust start time for request %s', entry.request_id)
        return
    request_sent_delta = entry.request_sent_time - page.timestamp
    entry.har['startedDateTime'] = iso_from_epoch(page.wall_time + request_sent_delta)
