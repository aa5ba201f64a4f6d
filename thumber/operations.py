"""Pillow implementations of the thumbnail operations.

Every function takes an open image and returns a new one. Dimensions have
already been validated by the caller, but may still be ``None``.
"""
from PIL import Image, ImageOps

from .errors import ArgumentError

# position -> (horizontal, vertical) fraction
POSITIONS = {
    "top-left": (0.0, 0.0),
    "top": (0.5, 0.0),
    "top-right": (1.0, 0.0),
    "left": (0.0, 0.5),
    "center": (0.5, 0.5),
    "right": (1.0, 0.5),
    "bottom-left": (0.0, 1.0),
    "bottom": (0.5, 1.0),
    "bottom-right": (1.0, 1.0),
}


def position_offsets(position):
    try:
        return POSITIONS[position]
    except KeyError:
        raise ArgumentError(f"Invalid position `{position}`") from None


def _square(width, height):
    return width or height, height or width


def _limit(img, width, height):
    """Scales the box down, keeping its ratio, so it fits the image."""
    scale = min(1.0, img.width / width, img.height / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def crop(img, width=None, height=None, x=None, y=None):
    width, height = _square(width, height)
    width, height = min(width, img.width), min(height, img.height)
    if x is None:
        x = (img.width - width) // 2
    if y is None:
        y = (img.height - height) // 2
    return img.crop((x, y, x + width, y + height))


def fit(img, width=None, height=None, position="center", upsize=True):
    width, height = _square(width, height)
    if not upsize:
        width, height = _limit(img, width, height)
    return ImageOps.fit(
        img, (width, height), method=Image.Resampling.LANCZOS, centering=position_offsets(position)
    )


def resize(img, width=None, height=None, aspect_ratio=True, upsize=True):
    if aspect_ratio:
        if width and not height:
            height = max(1, round(width / img.width * img.height))
        elif height and not width:
            width = max(1, round(height / img.height * img.width))
        else:
            scale = min(width / img.width, height / img.height)
            width = max(1, round(img.width * scale))
            height = max(1, round(img.height * scale))
    else:
        width, height = width or img.width, height or img.height

    if not upsize:
        width, height = _limit(img, width, height)
    return img.resize((width, height), Image.Resampling.LANCZOS)


def resize_canvas(img, width=None, height=None, anchor="center", relative=False, bgcolor="#ffffff"):
    if relative:
        width, height = img.width + (width or 0), img.height + (height or 0)
    else:
        width, height = width or img.width, height or img.height
    if width < 1 or height < 1:
        raise ArgumentError(f"Invalid canvas size {width}x{height}")

    h, v = position_offsets(anchor)
    mode = "RGBA" if "A" in img.getbands() else "RGB"
    try:
        canvas = Image.new(mode, (width, height), bgcolor)
    except ValueError as e:
        raise ArgumentError(f"Invalid background color `{bgcolor}`") from e

    offset = (round((width - img.width) * h), round((height - img.height) * v))
    canvas.paste(img.convert(mode), offset)
    return canvas
