from typing import Tuple

RGB = Tuple[int, int, int]

DEFAULT_TEXT_RGB: RGB = (0, 255, 0)
FONT_PT = 12


def invert_rgb(rgb: RGB) -> RGB:
    r, g, b = rgb
    return 255 - r, 255 - g, 255 - b

def label_style(rgb: RGB, pt: int = FONT_PT) -> str:
    r, g, b = rgb
    return f"color: rgb({r}, {g}, {b}); font-size: {pt}pt; background: transparent;"
