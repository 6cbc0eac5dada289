"""
Sprite image utilities

Decodes the channel icon sprite and cuts single icons out of it. The sprite
holds square tiles of a fixed size stacked vertically.
"""
import io
import logging

from PIL import Image, UnidentifiedImageError

from tvlisting.errors import ParsingWebsiteError


logger = logging.getLogger(__name__)


def decode_sprite(data: bytes) -> Image.Image:
    """
    Decode the sprite image into an RGBA bitmap

    Args:
        data: Encoded image bytes (WebP on the live site, any Pillow format works)

    Returns:
        Decoded RGBA image

    Raises:
        ParsingWebsiteError: If the bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            sprite = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        logger.error(f"Could not decode icons image ({len(data)} bytes): {e}")
        raise ParsingWebsiteError() from e

    logger.debug(f"Decoded icons sprite {sprite.width}x{sprite.height}")
    return sprite


def crop_tile(sprite: Image.Image, index: int, size: int) -> Image.Image | None:
    """
    Cut the tile at the given index out of the sprite

    The crop box is clamped to the sprite bounds.

    Args:
        sprite: Decoded sprite image
        index: Zero-based tile index from the top
        size: Tile edge length in pixels

    Returns:
        The tile as a new image, or None if the clamped box is empty
    """
    left = 0
    top = index * size
    right = min(size, sprite.width)
    bottom = min(top + size, sprite.height)

    if right <= left or bottom <= top:
        logger.debug(f"Tile {index} lies outside the {sprite.width}x{sprite.height} sprite")
        return None

    return sprite.crop((left, top, right, bottom))
