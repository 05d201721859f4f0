# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Correlate a stream of devtools events into HAR pages and entries.

Events are processed strictly in order, one at a time. Each event can only see
the state built up by the events before it. Traces are frequently partial so
events that can't be matched to a page or request are logged and skipped.
"""
import logging
import re

from devtools_har.entries import PageRecord, build_entry, populate_entry_from_response
from devtools_har.finalizer import finalize
from devtools_har.frames import FrameResolver
from devtools_har.timings import format_millis, total_time

DEFAULT_OPTIONS = {
    'includeResourcesFromDiskCache': False
}

# Events that carry nothing a HAR can represent (or nothing we need)
IGNORED_EVENTS = frozenset([
    'Page.frameScheduledNavigation',
    'Page.frameNavigated',
    'Page.frameStoppedLoading',
    'Page.frameClearedScheduledNavigation',
    'Page.frameDetached',
    'Page.frameResized',
    'Page.javascriptDialogOpening',
    'Page.javascriptDialogClosed',
    'Page.screencastFrame',
    'Page.screencastVisibilityChanged',
    'Page.colorPicked',
    'Page.interstitialShown',
    'Page.interstitialHidden',
    # HAR doesn't include web sockets or event sources
    'Network.webSocketCreated',
    'Network.webSocketFrameSent',
    'Network.webSocketFrameError',
    'Network.webSocketFrameReceived',
    'Network.webSocketClosed',
    'Network.webSocketHandshakeResponseReceived',
    'Network.webSocketWillSendHandshakeRequest',
    'Network.eventSourceMessageReceived'
])

REDIRECT_SUFFIX = 'r'


class EventProcessingError(ValueError):
    """An event could not be processed and the HAR would be corrupt"""
    def __init__(self, message, method=None, index=None):
        super().__init__(message)
        self.method = method
        self.index = index


def is_supported_protocol(url):
    return re.match(r'https?:', url) is not None


class HarBuilder(object):
    """Session state for one devtools event stream"""
    def __init__(self, options=None, log_filter=None):
        self.options = dict(DEFAULT_OPTIONS)
        if options:
            self.options.update(options)
        self.log_filter = log_filter
        self.pages = []
        self.entries = []
        self.entries_by_id = {}
        self.entry_frames = set()
        self.frames = FrameResolver()
        self.ignored_requests = set()
        self.current_page = None
        self.handlers = {
            'Page.frameStartedLoading': self.frame_started_loading,
            'Page.frameAttached': self.frame_attached,
            'Page.loadEventFired': self.load_event_fired,
            'Page.domContentEventFired': self.dom_content_event_fired,
            'Network.requestWillBeSent': self.request_will_be_sent,
            'Network.requestServedFromCache': self.request_served_from_cache,
            'Network.responseReceived': self.response_received,
            'Network.dataReceived': self.data_received,
            'Network.loadingFinished': self.loading_finished,
            'Network.loadingFailed': self.loading_failed,
            'Network.resourceChangedPriority': self.resource_changed_priority
        }

    def process(self, events):
        """Process all of the events in order and return the HAR"""
        for index, event in enumerate(events):
            self.process_event(event, index)
        if self.log_filter is not None:
            self.log_filter.set_event(None, None)
        return self.finalize()

    def process_event(self, event, index=None):
        """Route a single event to its handler"""
        method = event.get('method') if isinstance(event, dict) else None
        params = event.get('params') if isinstance(event, dict) else None
        if params is None:
            params = {}
        if self.log_filter is not None:
            self.log_filter.set_event(index, method)
        handler = self.handlers.get(method)
        if handler is None:
            if method not in IGNORED_EVENTS:
                logging.debug('Unhandled event: %s', method)
            return
        try:
            handler(params)
        except Exception as err:
            logging.error('Error processing %s event %s: %s', method, index, params)
            raise EventProcessingError('Error processing {0} event {1}: {2}'.format(method, index, err),
                                       method=method, index=index) from err

    def finalize(self):
        return finalize(self.pages, self.entries,
                        include_cache=self.options['includeResourcesFromDiskCache'])

    def find_entry(self, params, method):
        """Look up the live entry for an event, None if it can't be correlated"""
        if not self.pages:
            # we haven't loaded any pages yet
            logging.debug('Received %s for requestId %s before any page was loaded.', method,
                          params.get('requestId'))
            return None
        request_id = params.get('requestId')
        if request_id in self.ignored_requests:
            return None
        entry = self.entries_by_id.get(request_id)
        if entry is None:
            logging.debug('Received %s for requestId %s with no matching request.', method, request_id)
        return entry

    def find_page(self, frame_id):
        root_frame = self.frames.root_frame(frame_id)
        for page in self.pages:
            if page.frame_id == root_frame:
                return page
        return None

    def supersede_entry(self, entry):
        """Move a redirected entry out of the way of the request that replaces it"""
        new_id = entry.request_id + REDIRECT_SUFFIX
        while new_id in self.entries_by_id:
            new_id += REDIRECT_SUFFIX
        self.entries_by_id[new_id] = entry
        entry.request_id = new_id

    def frame_started_loading(self, params):
        frame_id = params.get('frameId')
        if self.frames.is_sub_frame(frame_id) or frame_id in self.entry_frames:
            # sub-frame (or reload) of a page we already have
            return
        page = PageRecord('page_{0:d}'.format(len(self.pages) + 1), frame_id)
        self.pages.append(page)
        self.current_page = page
        logging.debug('New page %s for frame %s', page.page_id, frame_id)

    def frame_attached(self, params):
        self.frames.attach(params.get('frameId'), params.get('parentFrameId'))

    def load_event_fired(self, params):
        if self.current_page is not None:
            self.current_page.set_page_timing('onLoad', params.get('timestamp'))

    def dom_content_event_fired(self, params):
        if self.current_page is not None:
            self.current_page.set_page_timing('onContentLoad', params.get('timestamp'))

    def request_will_be_sent(self, params):
        if not self.pages:
            logging.debug('Request will be sent with requestId %s before any page was loaded.',
                          params.get('requestId'))
            return
        request_id = params['requestId']
        request = params['request']
        if not is_supported_protocol(request['url']):
            self.ignored_requests.add(request_id)
            return
        page = self.find_page(params.get('frameId'))
        if page is None:
            logging.debug('Request will be sent with requestId %s that can\'t be mapped to any page.',
                          request_id)
            return

        entry = build_entry(params, page)

        if params.get('redirectResponse'):
            previous = self.entries_by_id.get(request_id)
            if previous is not None:
                self.supersede_entry(previous)
                populate_entry_from_response(previous, params['redirectResponse'])
            else:
                logging.debug('Couldn\'t find original request for redirect response: %s', request_id)

        self.entries.append(entry)
        self.entries_by_id[request_id] = entry
        if entry.frame_id is not None:
            self.entry_frames.add(entry.frame_id)

        # first request for the page, use it for the page timestamp
        if not page.is_stamped():
            page.stamp(entry, request['url'])

    def request_served_from_cache(self, params):
        entry = self.find_entry(params, 'requestServedFromCache')
        if entry is not None:
            entry.mark_served_from_cache()

    def response_received(self, params):
        entry = self.find_entry(params, 'responseReceived')
        if entry is not None:
            populate_entry_from_response(entry, params['response'])

    def data_received(self, params):
        entry = self.find_entry(params, 'dataReceived')
        if entry is None:
            return
        if not entry.is_complete():
            logging.debug('Received data for requestId %s before the response.', entry.request_id)
            return
        entry.response['content']['size'] += params.get('dataLength', 0)

    def loading_finished(self, params):
        request_id = params.get('requestId')
        if request_id in self.ignored_requests:
            self.ignored_requests.discard(request_id)
            return
        entry = self.find_entry(params, 'loadingFinished')
        if entry is None:
            return
        if not entry.is_complete():
            logging.debug('Loading finished for requestId %s without a response.', request_id)
            return

        timings = entry.har['timings']
        if entry.request_sent_time is not None and entry.receive_headers_end is not None and \
                params.get('timestamp') is not None:
            timings['receive'] = format_millis((params['timestamp'] - entry.request_sent_time) * 1000 -
                                               entry.receive_headers_end)
        entry.har['time'] = total_time(timings)

        # encodedDataLength is -1 sometimes
        encoded_length = params.get('encodedDataLength', -1)
        if encoded_length > 0:
            response = entry.response
            response['bodySize'] = encoded_length
            compression = response['content']['size'] - encoded_length
            if compression > 0:
                response['content']['compression'] = compression

    def loading_failed(self, params):
        request_id = params.get('requestId')
        if request_id in self.ignored_requests:
            self.ignored_requests.discard(request_id)
            return
        entry = self.find_entry(params, 'loadingFailed')
        if entry is not None:
            # Incorrect domain name etc. Not something that a HAR can represent.
            logging.debug('Failed to load url: %s', entry.request['url'])

    def resource_changed_priority(self, params):
        entry = self.find_entry(params, 'resourceChangedPriority')
        if entry is not None:
            entry.har['_priority'] = params.get('newPriority')


def har_from_events(events, options=None):
    """Build a HAR from a list of devtools events"""
    return HarBuilder(options).process(events)
