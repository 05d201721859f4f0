import json

import devtools2har


def test_imports():
    # pylint: disable=W0611
    import logging
    import gzip

    import dateutil.parser
    import ujson

    import devtools_har
    from devtools_har.har_builder import HarBuilder, har_from_events
    from devtools_har.entries import build_entry, populate_entry_from_response
    from devtools_har.finalizer import finalize
    from devtools_har.frames import FrameResolver
    from devtools_har.timings import calculate_timings
    from devtools_har.support.cookies import parse_request_cookies, parse_response_cookies
    from devtools_har.support.headers import get_header_value, parse_headers
    from devtools_har.support.post_data import parse_post_data
    from devtools_har.support.devtools_io import load_events, write_har

    assert devtools_har.__version__


EVENTS = [
    {'method': 'Page.frameStartedLoading', 'params': {'frameId': 'F1'}},
    {'method': 'Network.requestWillBeSent', 'params': {
        'requestId': 'R1', 'frameId': 'F1', 'timestamp': 10.0, 'wallTime': 1000.0,
        'initiator': {'type': 'other'},
        'request': {'url': 'http://a/', 'method': 'GET', 'headers': {}}}},
    {'method': 'Network.responseReceived', 'params': {
        'requestId': 'R1', 'timestamp': 10.05,
        'response': {'status': 200, 'statusText': 'OK', 'protocol': 'HTTP/1.1',
                     'mimeType': 'text/html', 'headers': {'Content-Type': 'text/html'}}}},
    {'method': 'Network.loadingFinished', 'params': {
        'requestId': 'R1', 'timestamp': 10.1, 'encodedDataLength': 500}}
]


def test_main_converts_file(tmp_path):
    devtools_file = tmp_path / 'devtools.json'
    devtools_file.write_text(json.dumps(EVENTS), encoding='utf-8')
    out_file = tmp_path / 'page.har'
    assert devtools2har.main(['-d', str(devtools_file), '-o', str(out_file)]) == 0
    with open(str(out_file), encoding='utf-8') as f_in:
        har = json.load(f_in)
    assert har['log']['pages'][0]['title'] == 'http://a/'
    assert har['log']['entries'][0]['response']['status'] == 200
    assert har['log']['entries'][0]['response']['bodySize'] == 500


def test_main_fails_on_bad_event(tmp_path):
    events = [EVENTS[0], {'method': 'Network.requestWillBeSent', 'params': {
        'requestId': 'R1', 'frameId': 'F1', 'timestamp': 10.0, 'wallTime': 1000.0,
        'request': {'url': 'http://a/', 'method': 'POST', 'postData': '{bad',
                    'headers': {'Content-Type': 'application/json'}}}}]
    devtools_file = tmp_path / 'devtools.json'
    devtools_file.write_text(json.dumps(events), encoding='utf-8')
    out_file = tmp_path / 'page.har'
    assert devtools2har.main(['-d', str(devtools_file), '-o', str(out_file)]) == 1
    assert not out_file.exists()


def test_main_fails_on_missing_file(tmp_path):
    out_file = tmp_path / 'page.har'
    assert devtools2har.main(['-d', str(tmp_path / 'missing.json'), '-o', str(out_file)]) == 1
    assert not out_file.exists()
