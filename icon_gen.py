"""Generate the window icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

ACCENT = "#0078D4"


def create_icon_image(today: date | None = None, size: int = 64) -> Image.Image:
    """Return a square RGBA image: today's day number under an accent bar."""
    today = today or date.today()
    img = Image.new("RGBA", (size, size), "white")
    draw = ImageDraw.Draw(img)

    bar = size // 5
    draw.rectangle((0, 0, size - 1, bar), fill=ACCENT)
    text = str(today.day)
    body = size - bar

    # Find the largest font size that fits below the bar
    font_size = size * 2
    font = None
    while font_size > 10:
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            font = ImageFont.load_default()
            break
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= size and bbox[3] - bbox[1] <= body:
            break
        font_size -= 1

    # Centre the visible pixels (compensate for font metric offsets)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = bar + (body - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill="black", font=font)

    return img
