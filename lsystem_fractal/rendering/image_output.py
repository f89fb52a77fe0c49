"""
Image export for rendered fractal paths.

Paths are rasterized with Pillow onto an RGBA canvas, segments colored
along a gradient in drawing order, and written as PNG (metadata embedded
in text chunks) or JPEG (metadata in a companion JSON file). Paths can
also be written as SVG polylines.
"""

import json
import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, PngImagePlugin

from .. import __version__
from ..config import RenderConfig
from ..core.turtle import TurtlePath
from .coloring import segment_colors

logger = logging.getLogger(__name__)


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""

    # Fractal parameters
    fractal_type: str
    iterations: int
    symbol_count: int
    segment_count: int

    # Rendering parameters
    resolution: Tuple[int, int]  # width, height
    bounds: Tuple[float, float, float, float]  # xmin, xmax, ymin, ymax

    # Timing
    render_time_seconds: float

    # Generation info
    timestamp: str = ""
    software_version: str = __version__

    # Fractal-specific parameters
    fractal_parameters: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

        if self.fractal_parameters is None:
            self.fractal_parameters = {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        data = dict(data)
        data['resolution'] = tuple(data['resolution'])
        data['bounds'] = tuple(data['bounds'])
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


def _fmt(x: float, precision: int) -> str:
    # Normalise -0.0 so it never produces "-0".
    if not x:
        x = 0.0
    s = f"{x:.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s or "0"


def _hex_color(rgba) -> str:
    r, g, b = (int(c) for c in rgba[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


class ImageExporter:
    """Rasterizes turtle paths and writes them to disk."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
        }

    @staticmethod
    def _fit_transform(bounds: Tuple[float, float, float, float], width: int, height: int,
                       margin: int) -> Tuple[float, np.ndarray]:
        """Scale and offset mapping path coordinates into the drawable area."""
        xmin, xmax, ymin, ymax = bounds
        avail_w = width - 2 * margin - 1
        avail_h = height - 2 * margin - 1
        span_x = xmax - xmin
        span_y = ymax - ymin

        candidates = []
        if span_x > 0:
            candidates.append(avail_w / span_x)
        if span_y > 0:
            candidates.append(avail_h / span_y)
        scale = min(candidates) if candidates else 1.0

        offset = np.array([
            margin + (avail_w - span_x * scale) / 2.0,
            margin + (avail_h - span_y * scale) / 2.0,
        ])
        return scale, offset

    def to_pixels(self, path: TurtlePath, width: int, height: int,
                  margin: int) -> List[np.ndarray]:
        """
        Map every polyline of ``path`` to pixel coordinates.

        The y axis is flipped so the turtle's counter-clockwise turns stay
        counter-clockwise on screen.

        Returns:
            One ``(n, 2)`` float array per polyline
        """
        xmin, xmax, ymin, ymax = path.bounds()
        scale, offset = self._fit_transform((xmin, xmax, ymin, ymax), width, height, margin)
        origin = np.array([xmin, ymin])

        result = []
        for polyline in path.polylines:
            pixels = (np.asarray(polyline, dtype=np.float64) - origin) * scale + offset
            pixels[:, 1] = (height - 1) - pixels[:, 1]
            result.append(pixels)
        return result

    def rasterize(self, path: TurtlePath, config: RenderConfig) -> Image.Image:
        """
        Draw a path onto a new RGBA image.

        Args:
            path: Path to draw
            config: Canvas size, margin, line width and colors

        Returns:
            Pillow image of size (config.width, config.height)
        """
        image = Image.new('RGBA', (config.width, config.height), tuple(config.background))
        if path.segment_count == 0:
            logger.warning("Path has no segments; writing a blank image")
            return image

        draw = ImageDraw.Draw(image)
        colors = segment_colors(path.segment_count, config.gradient_start,
                                config.gradient_end, config.gradient_count)

        index = 0
        for pixels in self.to_pixels(path, config.width, config.height, config.margin):
            for start, end in zip(pixels, pixels[1:]):
                draw.line([tuple(start), tuple(end)],
                          fill=tuple(int(c) for c in colors[index]),
                          width=config.line_width)
                index += 1

        return image

    def save_image(self, image: Union[Image.Image, np.ndarray], filepath: Path,
                   metadata: Optional[RenderMetadata] = None, quality: int = 95) -> None:
        """
        Save an image to file with metadata.

        Args:
            image: Pillow image or uint8 array (height, width, 3 or 4)
            filepath: Output file path
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(list(self.supported_formats.keys()) + ['.svg'])
            raise ValueError(f"Unsupported format '{suffix}'. Supported: {supported}")

        if isinstance(image, np.ndarray):
            image = Image.fromarray(np.asarray(image, dtype=np.uint8))

        filepath.parent.mkdir(parents=True, exist_ok=True)
        save_method = self.supported_formats[suffix]
        save_method(image, filepath, metadata, quality)

        logger.info(f"Saved image: {filepath} ({image.size[0]}x{image.size[1]})")

    def _save_png(self, image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as PNG with metadata."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Title", f"Fractal: {metadata.fractal_type}")
            pnginfo.add_text("Software", f"lsystem-fractal v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_jpeg(self, image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as JPEG; metadata goes to a companion JSON file."""
        image.convert('RGB').save(filepath, "JPEG", quality=quality, optimize=True)

        if metadata:
            json_path = filepath.with_suffix('.json')
            with open(json_path, 'w', encoding='utf-8') as f:
                f.write(metadata.to_json())
            logger.info(f"Saved metadata: {json_path}")

    def load_metadata(self, filepath: Path) -> Optional[RenderMetadata]:
        """Read metadata back from a PNG text chunk or a JPEG companion file."""
        filepath = Path(filepath)
        if filepath.suffix.lower() == '.png':
            with Image.open(filepath) as img:
                raw = img.text.get("FractalMetadata")
        else:
            json_path = filepath.with_suffix('.json')
            raw = json_path.read_text(encoding='utf-8') if json_path.exists() else None

        if raw is None:
            return None
        return RenderMetadata.from_json(raw)

    def save_svg(self, path: TurtlePath, filepath: Path, config: RenderConfig,
                 title: Optional[str] = None, precision: int = 6) -> None:
        """
        Save a path as SVG polylines.

        Coordinates stay in turtle units; a group transform flips the y axis.

        Args:
            path: Path to write
            filepath: Output .svg path
            config: Width, height, margin, line width and colors
            title: Optional <title> text
            precision: Decimal places for coordinates
        """
        filepath = Path(filepath)
        xmin, xmax, ymin, ymax = path.bounds()

        scale, _ = self._fit_transform((xmin, xmax, ymin, ymax), config.width,
                                       config.height, config.margin)
        pad = config.margin / scale
        minx, miny = xmin - pad, ymin - pad
        w = (xmax - xmin) + 2 * pad
        h = (ymax - ymin) + 2 * pad
        if not (w > 0 and h > 0) or not math.isfinite(w * h):
            raise ValueError("Degenerate path bounds; nothing to draw")

        view_box = " ".join(_fmt(v, precision) for v in (minx, miny, w, h))
        stroke_width = _fmt(config.line_width / scale, precision)
        colors = segment_colors(path.segment_count, config.gradient_start,
                                config.gradient_end, config.gradient_count)

        lines = ['<?xml version="1.0" encoding="UTF-8"?>']
        lines.append(
            '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
            f'viewBox="{view_box}" width="{config.width}" height="{config.height}">')

        if title:
            safe_title = title.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
            lines.append(f"  <title>{safe_title}</title>")

        lines.append(
            f'  <rect x="{_fmt(minx, precision)}" y="{_fmt(miny, precision)}" '
            f'width="{_fmt(w, precision)}" height="{_fmt(h, precision)}" '
            f'fill="{_hex_color(config.background)}" />')

        lines.append(f'  <g transform="translate(0,{_fmt(miny + (miny + h), precision)}) scale(1,-1)">')
        index = 0
        for polyline in path.polylines:
            if len(polyline) < 2:
                continue
            pts = " ".join(f"{_fmt(x, precision)},{_fmt(y, precision)}" for x, y in polyline)
            stroke = _hex_color(colors[index])
            lines.append(
                f'    <polyline points="{pts}" stroke="{stroke}" stroke-width="{stroke_width}" '
                'fill="none" stroke-linecap="round" stroke-linejoin="round" />')
            index += len(polyline) - 1
        lines.append("  </g>")
        lines.append("</svg>")

        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines))
            f.write("\n")

        logger.info(f"Saved SVG: {filepath} ({path.segment_count} segments)")
