# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Helpers for devtools header objects"""


def parse_headers(headers):
    """Convert a devtools header object into a list of HAR name/value pairs"""
    result = []
    if not headers:
        return result
    for name in headers:
        value = headers[name]
        if value is None:
            value = ''
        # devtools joins repeated headers with a newline
        for part in str(value).split('\n'):
            result.append({'name': name, 'value': part})
    return result


def get_header_value(headers, header):
    """Pull a specific header value from a devtools header object (case-insensitive)"""
    value = ''
    if headers:
        if header in headers:
            value = headers[header]
        else:
            for key in headers:
                if key.lower() == header.lower():
                    value = headers[key]
                    break
    return value


def is_http1x(version):
    """True for the text-based HTTP/1.x protocols"""
    return version is not None and str(version).lower().startswith('http/1.')


def calculate_request_header_size(har_request):
    """Estimate the size of the request headers from the HAR request when the raw text is missing"""
    buf = '{0} {1} {2}\r\n'.format(har_request.get('method', ''), har_request.get('url', ''),
                                   har_request.get('httpVersion', ''))
    for header in har_request.get('headers', []):
        buf += '{0}: {1}\r\n'.format(header['name'], header['value'])
    buf += '\r\n'
    return len(buf.encode('utf-8'))


def calculate_response_header_size(response):
    """Estimate the size of the response headers from a devtools response"""
    buf = '{0} {1} {2}\r\n'.format(response.get('protocol', ''), response.get('status', ''),
                                   response.get('statusText', ''))
    headers = response.get('headers') or {}
    for name in headers:
        buf += '{0}: {1}\r\n'.format(name, headers[name])
    buf += '\r\n'
    return len(buf.encode('utf-8'))
