"""Render a test image and a line chart to PNG files.

    python examples/render.py [output-dir]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import cairo_ctypes as cairo

log = logging.getLogger("render")

WIDTH = 640
HEIGHT = 480

MOTTO = "all your codebase are belong to us"

# (x, y) samples for the line chart
POINTS = ((0, 10), (1, 15), (2, 14), (3, 18), (4, 25))
MAX_VALUE = 25.0


def test_image(cr: cairo.Context, width: int, height: int) -> None:
    w = float(width)
    h = float(height)

    # white background
    cr.set_source_rgb(1.0, 1.0, 1.0)
    cr.paint_with_alpha(1.0)

    # green rectangle
    cr.rectangle(0, 0, w / 2, h / 2)
    cr.set_source_rgba(0, 1, 0, 0.75)
    cr.fill()

    # red rectangle
    cr.rectangle(w / 2, h / 2, w, h)
    cr.set_source_rgba(1, 0, 0, 0.75)
    cr.fill()

    # thick line
    cr.set_source_rgba(0, 0.68, 0.68, 1.0)
    cr.set_line_width(10.0)
    cr.move_to(0, 0)
    cr.line_to(w / 2, h / 2)
    cr.stroke()

    # centred text
    cr.select_font_face("Georgia", cairo.FontSlant.NORMAL, cairo.FontWeight.BOLD)
    cr.set_font_size(24.0)
    te = cr.text_extents(MOTTO)
    cr.move_to(
        w / 2 - te.width / 2 - te.x_bearing,
        h / 2 - te.height / 2 - te.y_bearing,
    )
    cr.set_source_rgb(0.0, 0.0, 1.0)
    cr.show_text(MOTTO)


def line_chart(cr: cairo.Context, width: int, height: int) -> None:
    w = float(width)
    h = float(height)
    max_x = len(POINTS) - 1

    cr.set_source_rgb(1, 1, 1)
    cr.paint_with_alpha(1.0)

    # semi-transparent blue line from the bottom-left corner
    cr.set_line_width(2.0)
    cr.set_source_rgba(0.0, 0.0, 1.0, 0.5)
    cr.move_to(0, h)
    for px, py in POINTS:
        x = px * w / max_x
        y = h - (py * h / MAX_VALUE)
        cr.line_to(x, y)
        cr.move_to(x, y)
    cr.stroke()


def render(draw, path: Path) -> None:
    with cairo.ImageSurface.create(cairo.Format.ARGB32, WIDTH, HEIGHT) as surface:
        with cairo.Context.create(surface) as cr:
            draw(cr, WIDTH, HEIGHT)
            cr.status().raise_for_status()
        surface.write_to_png(path)
    log.info("wrote %s", path)


def main(argv: list[str]) -> int:
    cairo.configure_logging("INFO")
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    out_dir = Path(argv[1]) if len(argv) > 1 else Path(".")
    out_dir.mkdir(parents=True, exist_ok=True)
    log.info("cairo %s", cairo.version_string())

    render(test_image, out_dir / "test_image.png")
    render(line_chart, out_dir / "line_chart.png")

    cairo.assert_no_leaks()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
