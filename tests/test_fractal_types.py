import math

import pytest

from lsystem_fractal.core.fractal_types import (
    CesaroFractal,
    CesaroSymbol,
    DragonCurve,
    FractalRegistry,
    KochSnowflake,
    LevyCCurve,
    LindenmayerFractal,
)
from lsystem_fractal.core.lindenmayer import LindenmayerEngine
from lsystem_fractal.core.turtle import Point, Turtle
from lsystem_fractal.errors import ConstructionError


def _render(fractal):
    return LindenmayerEngine().render(fractal)


class TestCesaro:
    def test_axiom(self) -> None:
        F, Q = CesaroSymbol.F, CesaroSymbol.Q
        assert CesaroFractal(0).expand(0) == [F, Q, F, Q, F, Q, F, Q]

    def test_first_rewrite(self) -> None:
        text = "".join(s.value for s in CesaroFractal(1).expand(1))
        assert text == "FLFRRFLFQ" * 4

    def test_iteration_zero_is_closed_square(self) -> None:
        path = _render(CesaroFractal(0))
        expected = [(0, -0.5), (1, -0.5), (1, 0.5), (0, 0.5), (0, -0.5)]
        assert len(path.polylines) == 1
        assert path.segment_count == 4
        for point, (x, y) in zip(path.polylines[0], expected):
            assert point.x == pytest.approx(x, abs=1e-12)
            assert point.y == pytest.approx(y, abs=1e-12)
        assert path.is_closed(1e-12)

    @pytest.mark.parametrize("iterations", range(1, 5))
    def test_closed_at_every_depth(self, iterations) -> None:
        assert _render(CesaroFractal(iterations)).is_closed(1e-9)

    def test_scale_invariance(self) -> None:
        extents = [_render(CesaroFractal(n)).extent() for n in range(6)]
        assert extents[0] == pytest.approx(1.0)
        for extent in extents:
            assert extent == pytest.approx(1.0, abs=0.1)

    def test_distance_forward(self) -> None:
        assert CesaroFractal(0).distance_forward() == pytest.approx(1.0)
        assert CesaroFractal(2).distance_forward() == pytest.approx(1 / 4.84)

    def test_interpret_single_symbols(self) -> None:
        cesaro = CesaroFractal(1)
        turtle = Turtle()
        cesaro.interpret_symbol(CesaroSymbol.L, turtle)
        assert math.degrees(turtle.heading) == pytest.approx(85.0)
        cesaro.interpret_symbol(CesaroSymbol.R, turtle)
        cesaro.interpret_symbol(CesaroSymbol.R, turtle)
        assert math.degrees(turtle.heading) == pytest.approx(275.0)
        cesaro.interpret_symbol(CesaroSymbol.Q, turtle)
        assert math.degrees(turtle.heading) == pytest.approx(5.0)

        turtle = Turtle()
        cesaro.interpret_symbol(CesaroSymbol.F, turtle)
        assert turtle.position.x == pytest.approx(1 / 2.2)

    def test_segment_count(self) -> None:
        assert _render(CesaroFractal(3)).segment_count == 4 * 4 ** 3


class TestConstruction:
    @pytest.mark.parametrize("value", [-1, 2.5, "2", None, False])
    def test_invalid_iterations(self, value) -> None:
        with pytest.raises(ConstructionError):
            CesaroFractal(value)

    def test_construction_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            KochSnowflake(-3)

    def test_validate_hook(self) -> None:
        class Shallow(CesaroFractal):
            def validate(self):
                if self.iterations > 3:
                    raise ConstructionError("Shallow supports at most 3 iterations")

        assert Shallow(3).iteration() == 3
        with pytest.raises(ConstructionError, match="at most 3"):
            Shallow(4)

    def test_definition_is_read_only(self) -> None:
        cesaro = CesaroFractal(2)
        with pytest.raises(AttributeError):
            cesaro.iterations = 5
        assert cesaro.to_dict() == {'name': 'Cesaro', 'iterations': 2}
        assert repr(cesaro) == "CesaroFractal(iterations=2)"


class TestOtherCurves:
    @pytest.mark.parametrize("iterations", range(0, 5))
    def test_koch_closed(self, iterations) -> None:
        path = _render(KochSnowflake(iterations))
        assert path.is_closed(1e-9)
        assert path.segment_count == 3 * 4 ** iterations

    @pytest.mark.parametrize("fractal_class", [LevyCCurve, DragonCurve])
    @pytest.mark.parametrize("iterations", range(0, 8))
    def test_spans_unit_interval(self, fractal_class, iterations) -> None:
        path = _render(fractal_class(iterations))
        assert path.start == Point(0.0, 0.0)
        assert path.end.x == pytest.approx(1.0)
        assert path.end.y == pytest.approx(0.0, abs=1e-9)
        assert path.segment_count == 2 ** iterations

    def test_dragon_no_op_symbols(self) -> None:
        text = "".join(s.value for s in DragonCurve(2).expand(2))
        assert text == "FX+YF++-FX-YF+"


class TestRegistry:
    def test_get(self) -> None:
        assert FractalRegistry.get('cesaro') is CesaroFractal
        assert FractalRegistry.get('CESARO') is CesaroFractal

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown fractal type"):
            FractalRegistry.get('mandelbrot')

    def test_create(self) -> None:
        fractal = FractalRegistry.create_fractal('koch', 2)
        assert isinstance(fractal, KochSnowflake)
        assert fractal.iteration() == 2

    def test_list_fractals(self) -> None:
        listing = FractalRegistry.list_fractals()
        assert set(listing) >= {'cesaro', 'koch', 'levy', 'dragon'}
        assert all(isinstance(text, str) and text for text in listing.values())

    def test_register(self, monkeypatch) -> None:
        monkeypatch.setattr(FractalRegistry, '_fractals', dict(FractalRegistry._fractals))

        class Square(CesaroFractal):
            name = "Square"

        FractalRegistry.register('square', Square)
        assert FractalRegistry.create_fractal('square', 0).name == "Square"

        with pytest.raises(ValueError):
            FractalRegistry.register('bad', dict)

    def test_all_registered_are_fractals(self) -> None:
        for name in FractalRegistry.names():
            assert issubclass(FractalRegistry.get(name), LindenmayerFractal)
