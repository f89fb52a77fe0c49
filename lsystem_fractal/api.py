"""
Main API classes for fractal rendering.

This module ties the Lindenmayer engine to the image exporter: it traces
a fractal definition into a TurtlePath and turns that path into an image.
"""

import time
import logging
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np

from .config import RenderConfig
from .core.fractal_types import LindenmayerFractal
from .core.lindenmayer import LindenmayerEngine, Symbol
from .core.turtle import Turtle, TurtlePath
from .errors import PreconditionError
from .rendering.image_output import ImageExporter, RenderMetadata

logger = logging.getLogger(__name__)


class FractalRenderer:
    """Main fractal rendering engine."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize fractal renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()
        self.image_exporter = ImageExporter()
        self.last_symbol_count = 0

        logger.info(f"FractalRenderer initialized: {self.config.width}x{self.config.height}, "
                    f"max_symbols={self.config.max_symbols}")

    def check_size(self, fractal: LindenmayerFractal) -> int:
        """
        Predict the expanded sequence length and enforce ``max_symbols``.

        Returns:
            Predicted number of symbols

        Raises:
            PreconditionError: If the expansion would exceed max_symbols
        """
        predicted = fractal.sequence_length(fractal.iteration())
        if predicted > self.config.max_symbols:
            raise PreconditionError(
                f"{fractal.name} at {fractal.iteration()} iterations expands to "
                f"{predicted} symbols, above max_symbols={self.config.max_symbols}")
        return predicted

    def trace(self, fractal: LindenmayerFractal,
              on_symbol: Optional[Callable[[Symbol, Turtle], None]] = None) -> TurtlePath:
        """
        Expand and interpret a fractal definition.

        Args:
            fractal: Fractal definition to trace
            on_symbol: Optional callback invoked after each interpreted symbol

        Returns:
            The traced path
        """
        predicted = self.check_size(fractal)
        logger.info(f"Tracing {fractal.name}: {fractal.iteration()} iterations, "
                    f"{predicted} symbols")

        engine = LindenmayerEngine(on_symbol=on_symbol)
        path = engine.render(fractal)
        self.last_symbol_count = engine.last_sequence_length
        return path

    def render(self, fractal: LindenmayerFractal,
               output_path: Optional[Union[str, Path]] = None) -> np.ndarray:
        """
        Render fractal to image.

        Args:
            fractal: Fractal definition to render
            output_path: Optional output file path (.png, .jpg, .jpeg or .svg)

        Returns:
            RGBA image array (height, width, 4), uint8
        """
        start_time = time.time()

        logger.info(f"Starting render: {fractal.name} fractal")
        path = self.trace(fractal)
        image = self.image_exporter.rasterize(path, self.config)

        if output_path:
            self._save(path, image, Path(output_path), time.time() - start_time, fractal)

        total_time = time.time() - start_time
        logger.info(f"Render complete: {total_time:.2f}s")

        return np.asarray(image)

    def _save(self, path: TurtlePath, image, output_path: Path, render_time: float,
              fractal: LindenmayerFractal) -> None:
        """Save rendered output with metadata."""
        if output_path.suffix.lower() == '.svg':
            self.image_exporter.save_svg(path, output_path, self.config,
                                         title=fractal.get_description())
            return

        metadata = None
        if self.config.save_metadata:
            metadata = RenderMetadata(
                fractal_type=fractal.name,
                iterations=fractal.iteration(),
                symbol_count=self.last_symbol_count,
                segment_count=path.segment_count,
                resolution=(self.config.width, self.config.height),
                bounds=path.bounds() if path.segment_count else (0.0, 0.0, 0.0, 0.0),
                render_time_seconds=render_time,
                fractal_parameters=fractal.to_dict(),
            )

        self.image_exporter.save_image(image, output_path, metadata, self.config.jpeg_quality)
