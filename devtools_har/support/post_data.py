# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Request body and query string helpers"""
import re
from urllib.parse import parse_qsl, urlsplit

import ujson as json


def to_name_value_pairs(data):
    """Flatten a parsed object into HAR name/value pairs"""
    if isinstance(data, dict):
        return [{'name': key, 'value': data[key]} for key in data]
    if isinstance(data, list):
        return [{'name': str(index), 'value': value} for index, value in enumerate(data)]
    return []


def parse_url_encoded(data):
    return [{'name': name, 'value': value}
            for name, value in parse_qsl(data, keep_blank_values=True)]


def parse_query_string(url):
    """Query parameters of the url as HAR name/value pairs"""
    return parse_url_encoded(urlsplit(url).query)


def parse_post_data(content_type, post_data):
    """Build a HAR postData object for the request body.

    Invalid JSON bodies raise ValueError, the caller decides whether that is fatal.
    """
    if not content_type or not post_data:
        return None
    if re.match(r'application/x-www-form-urlencoded', content_type):
        return {'mimeType': content_type,
                'params': parse_url_encoded(post_data)}
    if re.match(r'application/json', content_type):
        return {'mimeType': content_type,
                'params': to_name_value_pairs(json.loads(post_data))}
    # TODO: split multipart/form-data bodies into params as well
    return {'mimeType': content_type,
            'text': post_data}
