# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Parse Cookie and Set-Cookie header values into HAR cookie objects"""
from devtools_har.support.dates import iso_from_datetime, parse_http_date


def parse_cookie(cookie_string):
    """Parse a single cookie (with optional Set-Cookie attributes)"""
    parts = cookie_string.split(';')
    pos = parts[0].find('=')
    if pos <= 0:
        return None
    cookie = {'name': parts[0][:pos].strip(),
              'value': parts[0][pos + 1:].strip()}
    http_only = False
    secure = False
    for attribute in parts[1:]:
        pos = attribute.find('=')
        if pos >= 0:
            name = attribute[:pos].strip().lower()
            val = attribute[pos + 1:].strip()
        else:
            name = attribute.strip().lower()
            val = ''
        if name == 'path' and val:
            cookie['path'] = val
        elif name == 'domain' and val:
            cookie['domain'] = val.lstrip('.')
        elif name == 'expires' and val:
            expires = parse_http_date(val)
            if expires is not None:
                cookie['expires'] = iso_from_datetime(expires)
        elif name == 'httponly':
            http_only = True
        elif name == 'secure':
            secure = True
    cookie['httpOnly'] = http_only
    cookie['secure'] = secure
    return cookie


def split_and_parse(header, divider):
    cookies = []
    if not header:
        return cookies
    for part in header.split(divider):
        if part.strip():
            cookie = parse_cookie(part)
            if cookie is not None:
                cookies.append(cookie)
    return cookies


def parse_request_cookies(cookie_header):
    """Cookies sent in a Cookie request header"""
    return split_and_parse(cookie_header, ';')


def parse_response_cookies(cookie_header):
    """Cookies set by a response (devtools joins Set-Cookie headers with newlines)"""
    return split_and_parse(cookie_header, '\n')
