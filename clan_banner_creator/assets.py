# stdlib imports
import io
import logging
import os

# vendor imports
from PIL import Image
import requests

# local imports


logger = logging.getLogger(__name__)

# Constants
ROOT = os.environ.get('BANNER_ROOT', 'https://www.bungie.net')
DEFAULT_TIMEOUT = 30.0
APIKEY = os.environ.get('BUNGIE_API_KEY', None)
FLAG_STAFF = '/img/bannercreator/FlagStand00.png'
FLAG_OVERLAY = '/img/bannercreator/flag_overlay.png'


class ContentHost:
    """Downloads banner art from the remote content host."""

    def __init__(self, root=None, timeout=None, session=None):
        self.root = root or ROOT
        if timeout is None:
            timeout = float(os.environ.get('BANNER_TIMEOUT', DEFAULT_TIMEOUT))
        self.timeout = timeout
        self.session = session

    @property
    def headers(self):
        # The static art is public, the key is only sent when configured
        return {'X-Api-Key': APIKEY} if APIKEY else {}

    def fetchImage(self, path):
        """Fetch the image at `path` on the host and decode it as RGBA."""
        url = self.root + path
        get = requests.get if self.session is None else self.session.get
        logger.debug('Fetching %s', url)

        with get(url=url, headers=self.headers, timeout=self.timeout) as response:
            response.raise_for_status()
            with Image.open(io.BytesIO(response.content)) as src:
                return src.convert('RGBA')
