"""
Tests for fetching and decoding banner art.
"""

import pytest
import requests
from PIL import Image, UnidentifiedImageError

from clan_banner_creator import assets
from clan_banner_creator.assets import ContentHost
from conftest import FakeResponse, makeImage, pngBytes


def test_fetch_decodes_rgba(fakeHost):
    fakeHost.serve('/img/thing.png', makeImage((3, 2), (9, 8, 7, 6)))

    image = ContentHost().fetchImage('/img/thing.png')

    assert image.mode == 'RGBA'
    assert image.size == (3, 2)
    assert image.getpixel((0, 0)) == (9, 8, 7, 6)


def test_fetch_converts_other_modes(fakeHost):
    fakeHost.serve('/img/rgb.png', Image.new('RGB', (1, 1), (1, 2, 3)))

    assert ContentHost().fetchImage('/img/rgb.png').getpixel((0, 0)) == (1, 2, 3, 255)


def test_fetch_uses_root_and_timeout(fakeHost):
    fakeHost.serve('/a.png', makeImage((1, 1)))

    ContentHost(timeout=2.5).fetchImage('/a.png')

    url, kwargs = fakeHost.calls[0]
    assert url == assets.ROOT + '/a.png'
    assert kwargs['timeout'] == 2.5


def test_timeout_read_from_environment_per_host(monkeypatch):
    monkeypatch.setenv('BANNER_TIMEOUT', '2.5')
    assert ContentHost().timeout == 2.5

    monkeypatch.delenv('BANNER_TIMEOUT')
    assert ContentHost().timeout == assets.DEFAULT_TIMEOUT
    assert ContentHost(timeout=4).timeout == 4


def test_api_key_header_only_when_configured(fakeHost, monkeypatch):
    fakeHost.serve('/a.png', makeImage((1, 1)))

    monkeypatch.setattr(assets, 'APIKEY', None)
    ContentHost().fetchImage('/a.png')
    monkeypatch.setattr(assets, 'APIKEY', 'secret')
    ContentHost().fetchImage('/a.png')

    assert fakeHost.calls[0][1]['headers'] == {}
    assert fakeHost.calls[1][1]['headers'] == {'X-Api-Key': 'secret'}


def test_http_errors_propagate(fakeHost):
    with pytest.raises(requests.HTTPError):
        ContentHost().fetchImage('/nope.png')


def test_undecodable_bytes_propagate(monkeypatch):
    monkeypatch.setattr(
        requests, 'get', lambda url, **kwargs: FakeResponse(url, b'not a png')
    )

    with pytest.raises(UnidentifiedImageError):
        ContentHost().fetchImage('/broken.png')


def test_session_is_used_when_given():
    class Session:
        def __init__(self):
            self.urls = []

        def get(self, url, **kwargs):
            self.urls.append(url)
            return FakeResponse(url, pngBytes(makeImage((2, 2))))

    session = Session()
    host = ContentHost(root='https://example.test', session=session)
    host.fetchImage('/one.png')
    host.fetchImage('/two.png')

    assert session.urls == ['https://example.test/one.png', 'https://example.test/two.png']
