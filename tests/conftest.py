"""
Shared fixtures for the clan banner tests.

Provides a throwaway clan banner database and a fake content host that
serves PNG bytes built with Pillow, so no test touches the network.
"""

import io
import json
import sqlite3

import pytest
import requests
from PIL import Image

from clan_banner_creator import assets
from clan_banner_creator.manifest import TABLES


def makeImage(size, color=(0, 0, 0, 0), pixels=None):
    """Build an RGBA image filled with `color`, then set any `pixels`."""
    image = Image.new('RGBA', size, color)
    for (x, y), value in (pixels or {}).items():
        image.putpixel((x, y), value)
    return image


def pixelsOf(image):
    """Every pixel of `image` in row-major order."""
    access = image.load()
    return [
        access[x, y] for y in range(image.height) for x in range(image.width)
    ]


def pngBytes(image, **saveOptions):
    buffer = io.BytesIO()
    image.save(buffer, format='PNG', **saveOptions)
    return buffer.getvalue()


def insertRecord(path, table, id, document):
    """Store `document` the way the game database does: JSON in a BLOB."""
    connection = sqlite3.connect(path)
    with connection:
        connection.execute(
            f'INSERT INTO {table} (id, json) VALUES (?, ?)',
            (id, json.dumps(document).encode('ascii')),
        )
    connection.close()


class FakeResponse:
    def __init__(self, url, content=b'', status_code=200):
        self.url = url
        self.content = content
        self.status_code = status_code
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(
                f'{self.status_code} Error for url: {self.url}',
                response=self,
            )


class FakeHost:
    """Records requests and answers them from a path -> image table."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def serve(self, path, image, **saveOptions):
        self.routes[path] = pngBytes(image, **saveOptions)

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        path = url[len(assets.ROOT):]
        if not url.startswith(assets.ROOT) or path not in self.routes:
            return FakeResponse(url, status_code=404)
        return FakeResponse(url, self.routes[path])


@pytest.fixture
def database(tmp_path):
    """An empty clan banner database with every table the builder reads."""
    path = tmp_path / 'clanbanner.sqlite3'
    connection = sqlite3.connect(path)
    with connection:
        for table in sorted(TABLES):
            connection.execute(
                f'CREATE TABLE {table} (id INTEGER PRIMARY KEY NOT NULL, json BLOB)'
            )
    connection.close()
    return path


@pytest.fixture
def fakeHost(monkeypatch):
    host = FakeHost()
    monkeypatch.setattr(requests, 'get', host.get)
    return host
