"""
Summary PNG: total countries, top 5 by estimated GDP, refresh timestamp.

The latest image lives in the SummaryImage table (primary) and is also
written to the cache directory on disk (fallback for readers).
"""
import io
import logging
import os

from PIL import Image, ImageDraw, ImageFont

from .models import SummaryImage
from .utils import get_summary_image_path

logger = logging.getLogger(__name__)

IMAGE_SIZE = (800, 500)


def _load_fonts():
    try:
        return ImageFont.truetype("arial.ttf", 28), ImageFont.truetype("arial.ttf", 20)
    except OSError:
        return ImageFont.load_default(), ImageFont.load_default()


def render_summary_image(total_countries, top5, as_of):
    """
    Render the summary and return PNG bytes.
    `top5` is a sequence of {"name", "estimated_gdp"} mappings.
    """
    img = Image.new("RGB", IMAGE_SIZE, color="white")
    draw = ImageDraw.Draw(img)
    font_title, font_body = _load_fonts()

    draw.text((20, 20), "Country Summary Report", fill="black", font=font_title)
    draw.text((20, 70), f"Total Countries: {total_countries}", fill="black", font=font_body)
    draw.text((20, 120), "Top 5 Countries by Estimated GDP:", fill="black", font=font_body)

    y = 160
    if not top5:
        draw.text((40, y), "No GDP data available.", fill="gray", font=font_body)
    else:
        for rank, country in enumerate(top5, start=1):
            gdp = round(country["estimated_gdp"] or 0, 2)
            draw.text((40, y), f"{rank}. {country['name']}: {gdp:,}", fill="blue", font=font_body)
            y += 30

    draw.text((20, 400), f"Last Refresh: {as_of.isoformat()}", fill="black", font=font_body)

    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


def save_summary_image(png, total_countries, as_of):
    """Publish the image to the SummaryImage slot and the cache file."""
    image = SummaryImage.objects.publish(png, total_countries, as_of)

    # the database copy is authoritative; the cache file is only a fallback
    path = get_summary_image_path()
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(png)
    except OSError as exc:
        logger.warning("Summary image published, cache file %s not written: %s", path, exc)
    else:
        logger.info("Summary image saved (%d bytes) to %s", len(png), path)
    return image


def load_summary_image():
    """Latest PNG bytes, from the database first, then disk; None if neither."""
    image = SummaryImage.objects.latest_image()
    if image is not None:
        return bytes(image.png)

    path = get_summary_image_path()
    if os.path.exists(path):
        with open(path, "rb") as fh:
            return fh.read()
    return None
