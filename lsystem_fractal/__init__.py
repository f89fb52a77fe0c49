"""
L-system fractal rendering library.

Fractal curves are described as Lindenmayer systems: an axiom, a total
rewrite table over a closed symbol alphabet, and a mapping from symbols to
turtle motions. The engine expands the grammar to the requested depth and
walks the result with a turtle, producing a path that can be exported as
PNG, JPEG or SVG.

Example usage:
    >>> from lsystem_fractal import CesaroFractal, LindenmayerEngine
    >>> path = LindenmayerEngine().render(CesaroFractal(3))
    >>> path.segment_count
    256
"""

__version__ = "1.0.0"

from lsystem_fractal.errors import ConstructionError, PreconditionError
from lsystem_fractal.core.turtle import Point, Turtle, TurtlePath
from lsystem_fractal.core.lindenmayer import (
    LindenmayerEngine,
    LindenmayerSystem,
    LindenmayerSystemDrawingParameters,
    expand,
)
from lsystem_fractal.core.fractal_types import (
    CesaroFractal,
    DragonCurve,
    FractalRegistry,
    KochSnowflake,
    LevyCCurve,
    LindenmayerFractal,
)
from lsystem_fractal.rendering.coloring import color_range_linear
from lsystem_fractal.rendering.image_output import ImageExporter, RenderMetadata
from lsystem_fractal.config import RenderConfig, ConfigManager

# Main API classes
from lsystem_fractal.api import FractalRenderer

__all__ = [
    "FractalRenderer",
    "RenderConfig",
    "ConfigManager",
    "LindenmayerEngine",
    "LindenmayerSystem",
    "LindenmayerSystemDrawingParameters",
    "LindenmayerFractal",
    "CesaroFractal",
    "KochSnowflake",
    "LevyCCurve",
    "DragonCurve",
    "FractalRegistry",
    "Turtle",
    "TurtlePath",
    "Point",
    "expand",
    "color_range_linear",
    "ImageExporter",
    "RenderMetadata",
    "ConstructionError",
    "PreconditionError",
]
