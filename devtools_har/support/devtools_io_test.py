import gzip
import json

import pytest

from .devtools_io import load_events, write_har

EVENTS = [{'method': 'Page.frameStartedLoading', 'params': {'frameId': 'F1'}}]
HAR = {'log': {'version': '1.2', 'creator': {'name': 'test', 'version': '0'},
               'pages': [], 'entries': []}}


def test_load_plain_events(tmp_path):
    path = tmp_path / 'devtools.json'
    path.write_text(json.dumps(EVENTS), encoding='utf-8')
    assert load_events(str(path)) == EVENTS


def test_load_gzipped_events(tmp_path):
    path = tmp_path / 'devtools.json.gz'
    with gzip.open(str(path), 'wt', encoding='utf-8') as f_out:
        json.dump(EVENTS, f_out)
    assert load_events(str(path)) == EVENTS


def test_load_wrapped_events(tmp_path):
    path = tmp_path / 'devtools.json'
    path.write_text(json.dumps({'events': EVENTS}), encoding='utf-8')
    assert load_events(str(path)) == EVENTS


def test_load_rejects_non_list(tmp_path):
    path = tmp_path / 'devtools.json'
    path.write_text(json.dumps({'method': 'Page.frameStartedLoading'}), encoding='utf-8')
    with pytest.raises(ValueError):
        load_events(str(path))


def test_write_har(tmp_path):
    path = tmp_path / 'out.har'
    write_har(HAR, str(path))
    with open(str(path), encoding='utf-8') as f_in:
        assert json.load(f_in) == HAR


def test_write_gzipped_har(tmp_path):
    path = tmp_path / 'out.har.gz'
    write_har(HAR, str(path))
    with gzip.open(str(path), 'rt', encoding='utf-8') as f_in:
        assert json.load(f_in) == HAR
