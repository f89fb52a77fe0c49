"""
Lindenmayer-system rewriting and turtle interpretation.

A fractal plugs into the engine through two capabilities:

- ``LindenmayerSystem`` (grammar): a closed symbol alphabet, an initial
  sequence and a total rewrite table over that alphabet.
- ``LindenmayerSystemDrawingParameters`` (drawing): the iteration depth,
  the turtle's starting state and the interpretation of one symbol as
  turtle motions.

``LindenmayerEngine`` expands the grammar to the requested depth and then
walks the final sequence with a fresh turtle, producing a TurtlePath.
"""

import enum
import logging
import operator
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

import numpy as np

from ..errors import ConstructionError, PreconditionError
from .turtle import Turtle, TurtlePath

logger = logging.getLogger(__name__)

Symbol = enum.Enum
RewriteRule = Callable[[Symbol], Sequence[Symbol]]


def check_iterations(iterations, error: Type[Exception] = ConstructionError) -> int:
    """
    Validate an iteration count.

    Args:
        iterations: Value to validate
        error: Exception type raised when the value is not a non-negative integer

    Returns:
        The iteration count as a plain int
    """
    if isinstance(iterations, bool):
        raise error(f"iterations must be an integer, got {iterations!r}")
    try:
        value = operator.index(iterations)
    except TypeError:
        raise error(f"iterations must be an integer, got {iterations!r}") from None
    if value < 0:
        raise error(f"iterations must be >= 0, got {value}")
    return value


def expand(initial: Sequence[Symbol], rule: RewriteRule, iterations: int) -> List[Symbol]:
    """
    Rewrite every symbol of ``initial`` simultaneously, ``iterations`` times.

    Each pass reads only the output of the previous pass, so a symbol produced
    during a pass is never rewritten again within that same pass.

    Args:
        initial: Axiom to start from
        rule: Total rewrite function, symbol -> replacement sequence
        iterations: Number of rewrite passes (0 returns a copy of the axiom)

    Returns:
        The expanded symbol sequence
    """
    iterations = check_iterations(iterations, PreconditionError)

    current = list(initial)
    for depth in range(iterations):
        following: List[Symbol] = []
        for symbol in current:
            following.extend(rule(symbol))
        current = following
        logger.debug(f"Rewrite pass {depth + 1}/{iterations}: {len(current)} symbols")
    return current


class LindenmayerSystem(ABC):
    """Grammar capability: axiom plus total rewrite table over a closed alphabet."""

    #: Enum type holding every symbol this grammar may produce
    alphabet: Type[enum.Enum]

    @abstractmethod
    def initial(self) -> Sequence[Symbol]:
        """Get the axiom."""
        pass

    @abstractmethod
    def productions(self) -> Mapping[Symbol, Sequence[Symbol]]:
        """
        Get the non-identity rewrite rules.

        Symbols of the alphabet without an entry rewrite to themselves.
        """
        pass

    def rewrite_table(self) -> Dict[Symbol, Tuple[Symbol, ...]]:
        """Get the total rewrite mapping, one entry per alphabet member."""
        table = self.__dict__.get('_rewrite_table')
        if table is None:
            table = self._build_rewrite_table()
            self._rewrite_table = table
        return table

    def _build_rewrite_table(self) -> Dict[Symbol, Tuple[Symbol, ...]]:
        alphabet = self.alphabet
        productions = self.productions()

        for symbol, image in productions.items():
            if not isinstance(symbol, alphabet):
                raise ConstructionError(
                    f"Production for {symbol!r} is outside alphabet {alphabet.__name__}")
            stray = [s for s in image if not isinstance(s, alphabet)]
            if stray:
                raise ConstructionError(
                    f"Production for {symbol!r} yields symbols outside "
                    f"{alphabet.__name__}: {stray!r}")

        stray = [s for s in self.initial() if not isinstance(s, alphabet)]
        if stray:
            raise ConstructionError(f"Axiom has symbols outside {alphabet.__name__}: {stray!r}")

        return {symbol: tuple(productions.get(symbol, (symbol,))) for symbol in alphabet}

    def apply_rule(self, symbol: Symbol) -> Tuple[Symbol, ...]:
        """Rewrite one symbol. Values outside the alphabet raise KeyError."""
        return self.rewrite_table()[symbol]

    def expand(self, iterations: int) -> List[Symbol]:
        """Expand the axiom for ``iterations`` passes."""
        return expand(self.initial(), self.rewrite_table().__getitem__, iterations)

    def branching_factor(self) -> int:
        """Longest replacement any single symbol produces."""
        return max(len(image) for image in self.rewrite_table().values())

    def sequence_length(self, iterations: int) -> int:
        """
        Predict the length of the expanded sequence without building it.

        Symbol counts are pushed through the grammar's growth matrix, using
        Python integers so deep expansions cannot overflow.

        Args:
            iterations: Number of rewrite passes

        Returns:
            Exact length of ``self.expand(iterations)``
        """
        iterations = check_iterations(iterations, PreconditionError)
        symbols = list(self.alphabet)
        index = {symbol: i for i, symbol in enumerate(symbols)}

        growth = np.zeros((len(symbols), len(symbols)), dtype=object)
        for symbol, image in self.rewrite_table().items():
            for produced in image:
                growth[index[symbol], index[produced]] += 1

        counts = np.zeros(len(symbols), dtype=object)
        for symbol in self.initial():
            counts[index[symbol]] += 1

        for _ in range(iterations):
            counts = counts.dot(growth)
        return int(counts.sum())


class LindenmayerSystemDrawingParameters(ABC):
    """Drawing capability: binds a grammar to turtle geometry."""

    @abstractmethod
    def iteration(self) -> int:
        """Get the fixed iteration depth for this render."""
        pass

    @abstractmethod
    def initialize_turtle(self, turtle: Turtle) -> None:
        """Set the turtle's starting position and heading."""
        pass

    @abstractmethod
    def interpret_symbol(self, symbol: Symbol, turtle: Turtle) -> None:
        """Apply the turtle motions for one symbol."""
        pass


class EnginePhase(enum.Enum):
    IDLE = "idle"
    EXPANDING = "expanding"
    INTERPRETING = "interpreting"
    DONE = "done"


_TRANSITIONS = {
    EnginePhase.IDLE: {EnginePhase.EXPANDING},
    EnginePhase.EXPANDING: {EnginePhase.INTERPRETING},
    EnginePhase.INTERPRETING: {EnginePhase.DONE},
    EnginePhase.DONE: set(),
}


class LindenmayerEngine:
    """Expands a fractal's grammar and interprets it with a turtle."""

    def __init__(self, on_symbol: Optional[Callable[[Symbol, Turtle], None]] = None):
        """
        Initialize the engine.

        Args:
            on_symbol: Optional callback invoked after each symbol is interpreted
        """
        self.on_symbol = on_symbol
        self.phase = EnginePhase.IDLE
        self.last_sequence_length = 0

    def _enter(self, phase: EnginePhase) -> None:
        if phase not in _TRANSITIONS[self.phase]:
            raise RuntimeError(f"Invalid engine transition {self.phase.value} -> {phase.value}")
        logger.debug(f"Engine phase: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def render(self, fractal) -> TurtlePath:
        """
        Render a fractal definition to a path.

        Args:
            fractal: Object implementing both LindenmayerSystem and
                LindenmayerSystemDrawingParameters

        Returns:
            The traced TurtlePath
        """
        if not (isinstance(fractal, LindenmayerSystem)
                and isinstance(fractal, LindenmayerSystemDrawingParameters)):
            raise TypeError(
                "fractal must implement LindenmayerSystem and LindenmayerSystemDrawingParameters")

        iterations = check_iterations(fractal.iteration())

        # A render always starts from scratch; the previous one may have aborted.
        self.phase = EnginePhase.IDLE
        self._enter(EnginePhase.EXPANDING)
        sequence = fractal.expand(iterations)
        self.last_sequence_length = len(sequence)

        self._enter(EnginePhase.INTERPRETING)
        turtle = Turtle()
        fractal.initialize_turtle(turtle)
        for symbol in sequence:
            fractal.interpret_symbol(symbol, turtle)
            if self.on_symbol is not None:
                self.on_symbol(symbol, turtle)

        self._enter(EnginePhase.DONE)
        logger.debug(f"Interpreted {len(sequence)} symbols into {turtle.path.segment_count} segments")
        return turtle.path
