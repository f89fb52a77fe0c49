"""
Exception types raised by the fractal engine and its helpers.

Both error kinds are programmer-input validation failures reported at the
point of the offending call. They subclass ValueError so callers that
already guard parameter validation with ``except ValueError`` keep working.
"""


class FractalError(ValueError):
    """Base class for lsystem_fractal errors."""


class ConstructionError(FractalError):
    """A fractal definition was constructed with invalid parameters."""


class PreconditionError(FractalError):
    """A helper was called with arguments violating its documented minimum."""
