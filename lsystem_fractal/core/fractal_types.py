"""
Fractal curve definitions and registry.

Each fractal declares its own closed symbol alphabet as an Enum and
implements both the grammar capability (axiom and productions) and the
drawing capability (turtle setup and per-symbol interpretation). Forward
distances shrink with the iteration count so the figure keeps roughly
the same overall size at every depth.
"""

import enum
import math
import logging
from typing import Any, Dict, Mapping, Sequence, Type

from ..errors import ConstructionError
from .lindenmayer import (
    LindenmayerSystem,
    LindenmayerSystemDrawingParameters,
    check_iterations,
)
from .turtle import Point, Turtle

logger = logging.getLogger(__name__)


class LindenmayerFractal(LindenmayerSystem, LindenmayerSystemDrawingParameters):
    """Base class for fractals drawn by rewriting and turtle interpretation."""

    name = "L-system"

    def __init__(self, iterations: int):
        """
        Initialize fractal definition.

        Args:
            iterations: Number of rewrite passes to render

        Raises:
            ConstructionError: If iterations is not a non-negative integer or
                the definition rejects it
        """
        self._iterations = check_iterations(iterations)
        self.validate()
        # Builds and checks the rewrite table once, at construction.
        self.rewrite_table()

    def validate(self) -> None:
        """Reject illegal construction parameters with ConstructionError."""
        pass

    @property
    def iterations(self) -> int:
        return self._iterations

    def iteration(self) -> int:
        return self._iterations

    def get_description(self) -> str:
        """Get a description of this fractal type."""
        return f"{self.name} curve"

    def to_dict(self) -> Dict[str, Any]:
        """Convert definition parameters to dictionary."""
        return {'name': self.name, 'iterations': self._iterations}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(iterations={self._iterations})"


class CesaroSymbol(enum.Enum):
    F = "F"  # move forward
    Q = "Q"  # corner of the square
    L = "L"  # turn left
    R = "R"  # turn right


class CesaroFractal(LindenmayerFractal):
    """Césaro curve drawn on the four sides of a unit square."""

    name = "Cesaro"
    alphabet = CesaroSymbol

    SCALE_FACTOR = 2.2
    CORNER_ANGLE = 90.0
    SPIKE_ANGLE = 85.0

    def distance_forward(self) -> float:
        return 1.0 / self.SCALE_FACTOR ** self._iterations

    def initial(self) -> Sequence[CesaroSymbol]:
        F, Q = CesaroSymbol.F, CesaroSymbol.Q
        return [F, Q, F, Q, F, Q, F, Q]

    def productions(self) -> Mapping[CesaroSymbol, Sequence[CesaroSymbol]]:
        F, L, R = CesaroSymbol.F, CesaroSymbol.L, CesaroSymbol.R
        return {F: [F, L, F, R, R, F, L, F]}

    def initialize_turtle(self, turtle: Turtle) -> None:
        turtle.set_pos(Point(0.0, -0.5))
        turtle.set_rad(0.0)

    def interpret_symbol(self, symbol: CesaroSymbol, turtle: Turtle) -> None:
        if symbol is CesaroSymbol.F:
            turtle.forward(self.distance_forward())
        elif symbol is CesaroSymbol.Q:
            turtle.turn_deg(self.CORNER_ANGLE)
        elif symbol is CesaroSymbol.L:
            turtle.turn_deg(self.SPIKE_ANGLE)
        elif symbol is CesaroSymbol.R:
            turtle.turn_deg(-self.SPIKE_ANGLE)
        else:
            raise KeyError(symbol)

    def get_description(self) -> str:
        return ("Césaro: each side F -> F L F R R F L F with 85 degree spikes, "
                f"{self._iterations} iterations")


class KochSymbol(enum.Enum):
    F = "F"
    PLUS = "+"
    MINUS = "-"


class KochSnowflake(LindenmayerFractal):
    """Koch snowflake built on an equilateral triangle of unit side."""

    name = "Koch"
    alphabet = KochSymbol

    ANGLE = 60.0

    def distance_forward(self) -> float:
        return 1.0 / 3.0 ** self._iterations

    def initial(self) -> Sequence[KochSymbol]:
        F, M = KochSymbol.F, KochSymbol.MINUS
        return [F, M, M, F, M, M, F]

    def productions(self) -> Mapping[KochSymbol, Sequence[KochSymbol]]:
        F, P, M = KochSymbol.F, KochSymbol.PLUS, KochSymbol.MINUS
        return {F: [F, P, F, M, M, F, P, F]}

    def initialize_turtle(self, turtle: Turtle) -> None:
        turtle.set_pos(Point(-0.5, math.sqrt(3.0) / 6.0))
        turtle.set_rad(0.0)

    def interpret_symbol(self, symbol: KochSymbol, turtle: Turtle) -> None:
        if symbol is KochSymbol.F:
            turtle.forward(self.distance_forward())
        elif symbol is KochSymbol.PLUS:
            turtle.turn_deg(self.ANGLE)
        elif symbol is KochSymbol.MINUS:
            turtle.turn_deg(-self.ANGLE)
        else:
            raise KeyError(symbol)

    def get_description(self) -> str:
        return f"Koch snowflake: F -> F+F--F+F at 60 degrees, {self._iterations} iterations"


class LevySymbol(enum.Enum):
    F = "F"
    PLUS = "+"
    MINUS = "-"


class LevyCCurve(LindenmayerFractal):
    """Lévy C curve spanning the unit interval."""

    name = "Levy C"
    alphabet = LevySymbol

    ANGLE = 45.0

    def distance_forward(self) -> float:
        return 1.0 / math.sqrt(2.0) ** self._iterations

    def initial(self) -> Sequence[LevySymbol]:
        return [LevySymbol.F]

    def productions(self) -> Mapping[LevySymbol, Sequence[LevySymbol]]:
        F, P, M = LevySymbol.F, LevySymbol.PLUS, LevySymbol.MINUS
        return {F: [P, F, M, M, F, P]}

    def initialize_turtle(self, turtle: Turtle) -> None:
        turtle.set_pos(Point(0.0, 0.0))
        turtle.set_rad(0.0)

    def interpret_symbol(self, symbol: LevySymbol, turtle: Turtle) -> None:
        if symbol is LevySymbol.F:
            turtle.forward(self.distance_forward())
        elif symbol is LevySymbol.PLUS:
            turtle.turn_deg(self.ANGLE)
        elif symbol is LevySymbol.MINUS:
            turtle.turn_deg(-self.ANGLE)
        else:
            raise KeyError(symbol)

    def get_description(self) -> str:
        return f"Lévy C curve: F -> +F--F+ at 45 degrees, {self._iterations} iterations"


class DragonSymbol(enum.Enum):
    F = "F"
    X = "X"  # no-op, rewritten
    Y = "Y"  # no-op, rewritten
    PLUS = "+"
    MINUS = "-"


class DragonCurve(LindenmayerFractal):
    """Heighway dragon spanning the unit interval."""

    name = "Dragon"
    alphabet = DragonSymbol

    ANGLE = 90.0

    def distance_forward(self) -> float:
        return 1.0 / math.sqrt(2.0) ** self._iterations

    def initial(self) -> Sequence[DragonSymbol]:
        return [DragonSymbol.F, DragonSymbol.X]

    def productions(self) -> Mapping[DragonSymbol, Sequence[DragonSymbol]]:
        F, X, Y = DragonSymbol.F, DragonSymbol.X, DragonSymbol.Y
        P, M = DragonSymbol.PLUS, DragonSymbol.MINUS
        return {
            X: [X, P, Y, F, P],
            Y: [M, F, X, M, Y],
        }

    def initialize_turtle(self, turtle: Turtle) -> None:
        turtle.set_pos(Point(0.0, 0.0))
        # Each pass rotates the chord by 45 degrees; start rotated back.
        turtle.set_rad(-self._iterations * math.pi / 4.0)

    def interpret_symbol(self, symbol: DragonSymbol, turtle: Turtle) -> None:
        if symbol is DragonSymbol.F:
            turtle.forward(self.distance_forward())
        elif symbol is DragonSymbol.PLUS:
            turtle.turn_deg(self.ANGLE)
        elif symbol is DragonSymbol.MINUS:
            turtle.turn_deg(-self.ANGLE)
        elif symbol in (DragonSymbol.X, DragonSymbol.Y):
            pass
        else:
            raise KeyError(symbol)

    def get_description(self) -> str:
        return f"Heighway dragon: X -> X+YF+, Y -> -FX-Y, {self._iterations} iterations"


class FractalRegistry:
    """Registry for managing available fractal types."""

    _fractals: Dict[str, Type[LindenmayerFractal]] = {
        'cesaro': CesaroFractal,
        'koch': KochSnowflake,
        'levy': LevyCCurve,
        'dragon': DragonCurve,
    }

    @classmethod
    def register(cls, name: str, fractal_class: type) -> None:
        """
        Register a new fractal type.

        Args:
            name: Unique identifier for the fractal
            fractal_class: Class implementing the fractal
        """
        if not (isinstance(fractal_class, type) and issubclass(fractal_class, LindenmayerFractal)):
            raise ValueError("Fractal class must inherit from LindenmayerFractal")
        cls._fractals[name.lower()] = fractal_class
        logger.info(f"Registered fractal type: {name}")

    @classmethod
    def get(cls, name: str) -> Type[LindenmayerFractal]:
        """
        Get a fractal class by name.

        Args:
            name: Fractal identifier

        Returns:
            Fractal class
        """
        fractal_class = cls._fractals.get(name.lower())
        if fractal_class is None:
            available = ', '.join(cls._fractals.keys())
            raise ValueError(f"Unknown fractal type '{name}'. Available: {available}")
        return fractal_class

    @classmethod
    def names(cls):
        return list(cls._fractals.keys())

    @classmethod
    def list_fractals(cls) -> Dict[str, str]:
        """Get a dictionary of available fractals and their descriptions."""
        result = {}
        for name, fractal_class in cls._fractals.items():
            try:
                result[name] = fractal_class(0).get_description()
            except ConstructionError as e:
                result[name] = f"{fractal_class.name} (unavailable: {e})"
        return result

    @classmethod
    def create_fractal(cls, name: str, iterations: int) -> LindenmayerFractal:
        """
        Create a fractal instance.

        Args:
            name: Fractal type name
            iterations: Rewrite depth

        Returns:
            Configured fractal instance
        """
        return cls.get(name)(iterations)
