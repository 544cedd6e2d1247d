# stdlib imports
import dataclasses
import json
import logging
import pathlib
import sqlite3
import typing

# vendor imports

# local imports
from .errors import AssetNotFoundError, MalformedRecordError


logger = logging.getLogger(__name__)

# Constants
MODIFIER = 4294967296
TABLES = frozenset([
    'Gonfalons',
    'Decals',
    'DecalPrimaryColors',
    'DecalSecondaryColors',
    'GonfalonColors',
    'GonfalonDetails',
    'GonfalonDetailColors',
])


def toUnsigned(n):
    """Map an id stored as a signed 32-bit integer back to its unsigned hash."""
    return n + MODIFIER if n < 0 else n


def _field(document, name, table, id):
    value = document.get(name)
    if value is None:
        raise MalformedRecordError(
            f'Record {id} in {table} is missing `{name}`'
        )
    return value


@dataclasses.dataclass(frozen=True)
class AssetRecord:
    id: int
    foregroundImagePath: str
    backgroundImagePath: typing.Optional[str] = None

    @classmethod
    def fromJson(cls, table, id, document, requireBackground=False):
        foreground = _field(document, 'foregroundImagePath', table, id)
        if requireBackground:
            background = _field(document, 'backgroundImagePath', table, id)
        else:
            background = document.get('backgroundImagePath')

        return cls(
            id=id,
            foregroundImagePath=foreground,
            backgroundImagePath=background,
        )


@dataclasses.dataclass(frozen=True)
class ColorRecord:
    id: int
    red: int
    green: int
    blue: int

    @classmethod
    def fromJson(cls, table, id, document):
        components = {}
        for name in ('red', 'green', 'blue'):
            raw = _field(document, name, table, id)
            try:
                value = int(raw)
            except (TypeError, ValueError):
                raise MalformedRecordError(
                    f'Record {id} in {table} has a non-numeric `{name}`: {raw!r}'
                ) from None
            if not 0 <= value <= 255:
                raise MalformedRecordError(
                    f'Record {id} in {table} has `{name}` out of range: {value}'
                )
            components[name] = value

        return cls(id=id, **components)

    @property
    def rgba(self):
        return (self.red, self.green, self.blue, 255)


class Manifest:
    """Read-only view of the clan banner reference database."""

    def __init__(self, path, timeout=5.0):
        self.path = pathlib.Path(path)
        self.timeout = timeout
        self.connection = None

    def open(self):
        # Read-only URI so a missing path is an error instead of a new file
        uri = self.path.resolve().as_uri() + '?mode=ro'
        self.connection = sqlite3.connect(uri, uri=True, timeout=self.timeout)
        try:
            self.connection.execute('SELECT count(*) FROM sqlite_master')
        except sqlite3.Error:
            self.close()
            raise
        self.connection.create_function(
            'unsigned_id', 1, toUnsigned, deterministic=True
        )
        return self

    def close(self):
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        if self.connection is None:
            self.open()
        return self

    def __exit__(self, *exc):
        self.close()

    def lookup(self, table, id):
        """Return the decoded JSON document for `id` in `table`."""
        if table not in TABLES:
            raise ValueError(f'Unknown manifest table {table!r}')

        logger.debug('Looking up %s in %s', id, table)
        row = self.connection.execute(
            f'SELECT json FROM {table} WHERE unsigned_id(id) = ?',
            (id,),
        ).fetchone()
        if row is None:
            raise AssetNotFoundError(table, id)

        try:
            document = json.loads(row[0])
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(
                f'Record {id} in {table} is not valid JSON: {e}'
            ) from e
        if not isinstance(document, dict):
            raise MalformedRecordError(
                f'Record {id} in {table} is not a JSON object'
            )
        return document

    def asset(self, table, id):
        return AssetRecord.fromJson(
            table,
            id,
            self.lookup(table, id),
            requireBackground=(table == 'Decals'),
        )

    def color(self, table, id):
        return ColorRecord.fromJson(table, id, self.lookup(table, id))
