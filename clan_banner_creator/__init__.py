# stdlib imports
import collections
import logging

# vendor imports

# local imports
from .assets import FLAG_OVERLAY, FLAG_STAFF, ContentHost
from .errors import AssetNotFoundError, BannerError, MalformedRecordError
from .imaging import Layer, clip, composite, dpiOf, recolor, save, scaleToCover
from .manifest import Manifest


__version__ = '1.0.0'

logger = logging.getLogger(__name__)

# Constants
STAFF_BOX = (422, 616)
MASK_OFFSET = (35, 0)
STAFF_OFFSET = (38, 0)
OVERLAY_OFFSET = (12, 42)
DECAL_OFFSET = (48, 42)
GONFALON_OFFSET = (48, 42)

BannerIds = collections.namedtuple('BannerIds', [
    'decalId',
    'decalColorId',
    'decalBackgroundColorId',
    'gonfalonId',
    'gonfalonColorId',
    'gonfalonDetailId',
    'gonfalonDetailColorId',
])


def buildDecal(manifest, host, gonfalonImage, decalId, decalColorId,
               decalBackgroundColorId):
    decalEntry = manifest.asset('Decals', decalId)

    # Tint the foreground and background independently
    foreground = recolor(
        host.fetchImage(decalEntry.foregroundImagePath),
        manifest.color('DecalPrimaryColors', decalColorId).rgba,
    )
    background = recolor(
        host.fetchImage(decalEntry.backgroundImagePath),
        manifest.color('DecalSecondaryColors', decalBackgroundColorId).rgba,
    )

    # Background sits behind the foreground
    decal = composite(
        [Layer(background, 0, 0), Layer(foreground, 0, 0)],
        background.width,
        background.height,
        dpiOf(background),
    )
    return clip(gonfalonImage, decal, blendPartialAlpha=True)


def buildGonfalon(manifest, host, gonfalonImage, gonfalonColorId,
                  gonfalonDetailId, gonfalonDetailColorId):
    detailEntry = manifest.asset('GonfalonDetails', gonfalonDetailId)

    detail = recolor(
        host.fetchImage(detailEntry.foregroundImagePath),
        manifest.color('GonfalonDetailColors', gonfalonDetailColorId).rgba,
    )
    clip(gonfalonImage, detail, blendPartialAlpha=True)

    # The silhouette itself is tinted in place, after it served as a mask
    recolor(
        gonfalonImage,
        manifest.color('GonfalonColors', gonfalonColorId).rgba,
    )

    return composite(
        [Layer(gonfalonImage, 0, 0), Layer(detail, 0, 0)],
        gonfalonImage.width,
        gonfalonImage.height,
        dpiOf(gonfalonImage),
    )


def buildBanner(manifest, host, ids):
    """Assemble the clan banner described by `ids`.

    `manifest` is an open `Manifest` and `host` a `ContentHost`. Every
    asset is fetched fresh; any failure aborts the whole build.
    """
    gonfalonEntry = manifest.asset('Gonfalons', ids.gonfalonId)
    gonfalonImage = host.fetchImage(gonfalonEntry.foregroundImagePath)

    # The final canvas takes the staff's native size and resolution
    flagStaffImage = host.fetchImage(FLAG_STAFF)
    masterWidth, masterHeight = flagStaffImage.size
    masterDpi = dpiOf(flagStaffImage)
    flagStaffImage = scaleToCover(flagStaffImage, *STAFF_BOX)

    # Shift the silhouette so it lines up with the overlay before clipping
    flagOverlayImage = host.fetchImage(FLAG_OVERLAY)
    overlayMask = composite(
        [Layer(gonfalonImage, *MASK_OFFSET)],
        flagOverlayImage.width,
        flagOverlayImage.height,
        dpiOf(flagOverlayImage),
    )
    clip(overlayMask, flagOverlayImage, blendPartialAlpha=True)

    logger.info('Building decal %s', ids.decalId)
    decal = buildDecal(
        manifest,
        host,
        gonfalonImage,
        ids.decalId,
        ids.decalColorId,
        ids.decalBackgroundColorId,
    )

    logger.info('Building gonfalon %s', ids.gonfalonId)
    gonfalon = buildGonfalon(
        manifest,
        host,
        gonfalonImage,
        ids.gonfalonColorId,
        ids.gonfalonDetailId,
        ids.gonfalonDetailColorId,
    )

    logger.info('Compositing banner at %dx%d', masterWidth, masterHeight)
    return composite(
        [
            Layer(gonfalon, *GONFALON_OFFSET),
            Layer(decal, *DECAL_OFFSET),
            Layer(flagOverlayImage, *OVERLAY_OFFSET),
            Layer(flagStaffImage, *STAFF_OFFSET),
        ],
        masterWidth,
        masterHeight,
        masterDpi,
    )


__all__ = [
    'AssetNotFoundError',
    'BannerError',
    'BannerIds',
    'ContentHost',
    'MalformedRecordError',
    'Manifest',
    'buildBanner',
    'buildDecal',
    'buildGonfalon',
    'save',
]
