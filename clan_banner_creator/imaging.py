# stdlib imports
import collections
import io
import logging

# vendor imports
from PIL import Image

# local imports


logger = logging.getLogger(__name__)

# Constants
TRANSPARENT = (0, 0, 0, 0)
IGNORE_TRANSPARENT = frozenset([TRANSPARENT])
DEFAULT_DPI = (96, 96)
DEFAULT_QUALITY = 90

# An image drawn at an (x, y) offset on a canvas
Layer = collections.namedtuple('Layer', ['image', 'x', 'y'])


def _requireRgba(image):
    if image.mode != 'RGBA':
        raise ValueError(f'Expected an RGBA image, got {image.mode}')


def dpiOf(image):
    return image.info.get('dpi', DEFAULT_DPI)


def recolor(image, color, ignore=IGNORE_TRANSPARENT):
    """Paint the RGB of `color` over every pixel of `image` not in `ignore`.

    Each pixel keeps its own alpha; the alpha of `color` is never used.
    The image is modified in place and returned.
    """
    _requireRgba(image)
    red, green, blue = color[:3]

    pixels = image.load()
    for y in range(image.height):
        for x in range(image.width):
            pixel = pixels[x, y]
            if pixel not in ignore:
                pixels[x, y] = (red, green, blue, pixel[3])

    return image


def clip(mask, image, blendPartialAlpha=True):
    """Clip `image` to the opaque shape of `mask`, in place.

    Pixels outside the mask, or under a fully transparent mask pixel, are
    cleared. With `blendPartialAlpha`, pixels under a partially transparent
    mask pixel take the mask's alpha (already transparent pixels stay so).
    RGB values are never changed otherwise.
    """
    _requireRgba(mask)
    _requireRgba(image)

    maskPixels = mask.load()
    pixels = image.load()
    maskWidth, maskHeight = mask.size

    for y in range(image.height):
        for x in range(image.width):
            if x >= maskWidth or y >= maskHeight:
                pixels[x, y] = TRANSPARENT
                continue

            maskPixel = maskPixels[x, y]
            if maskPixel == TRANSPARENT:
                pixels[x, y] = TRANSPARENT
            elif blendPartialAlpha and maskPixel[3] != 255:
                existing = pixels[x, y]
                if existing != TRANSPARENT:
                    pixels[x, y] = existing[:3] + (maskPixel[3],)

    return image


def composite(layers, width, height, dpi=DEFAULT_DPI):
    """Draw `layers` back to front onto a new transparent canvas."""
    canvas = Image.new('RGBA', (width, height), TRANSPARENT)

    for layer in layers:
        # Position the layer on a blank sheet; anything off-canvas is cropped
        sheet = Image.new('RGBA', canvas.size, TRANSPARENT)
        sheet.paste(layer.image, (layer.x, layer.y))
        canvas = Image.alpha_composite(canvas, sheet)

    canvas.info['dpi'] = dpi
    return canvas


def scaleToCover(image, width, height):
    # Largest axis ratio wins, so one side may overshoot the box
    ratio = max(width / image.width, height / image.height)
    size = (int(image.width * ratio), int(image.height * ratio))
    logger.debug('Scaling %s to %s', image.size, size)

    scaled = image.resize(size, Image.Resampling.BICUBIC)
    scaled.info['dpi'] = dpiOf(image)
    return scaled


def qualityToCompressLevel(quality):
    """Map a 1-100 quality (higher is less compression) to zlib's 0-9."""
    if not 1 <= quality <= 100:
        raise ValueError(f'Quality must be between 1 and 100, got {quality}')
    return round(9 * (100 - quality) / 100)


def save(image, path, quality=DEFAULT_QUALITY):
    # Encode fully before touching the destination file
    buffer = io.BytesIO()
    image.save(
        buffer,
        format='PNG',
        compress_level=qualityToCompressLevel(quality),
        dpi=dpiOf(image),
    )

    with open(path, 'wb') as outputFile:
        outputFile.write(buffer.getvalue())
