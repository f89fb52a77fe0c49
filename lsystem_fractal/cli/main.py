"""
Command-line interface for L-system fractal rendering.
"""

import sys
import time
import logging
from pathlib import Path

import click

from .. import __version__
from ..api import FractalRenderer
from ..config import load_config_from_args
from ..core.fractal_types import FractalRegistry

logger = logging.getLogger(__name__)


def _fail(ctx, error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get('verbose'):
        import traceback
        traceback.print_exc()
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    L-system fractal renderer.

    Expands a fractal's rewrite grammar, walks the result with a turtle
    and writes the traced curve as PNG, JPEG or SVG.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"lsystem-fractal v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            sys.exit(0)

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('fractal_type')
@click.argument('output', type=click.Path())
@click.option('--iterations', '-n', type=int, default=4, show_default=True,
              help='Number of rewrite passes')
@click.option('--width', type=int, help='Image width')
@click.option('--height', type=int, help='Image height')
@click.option('--margin', type=int, help='Margin around the curve, in pixels')
@click.option('--line-width', type=int, help='Stroke width, in pixels')
@click.option('--max-symbols', type=int, help='Refuse expansions longer than this')
@click.pass_context
def render(ctx, fractal_type, output, iterations, **overrides):
    """
    Render a fractal curve.

    FRACTAL_TYPE: Registered fractal name (see the list command)
    OUTPUT: Output file path (.png, .jpg, .jpeg or .svg)
    """
    try:
        render_config = load_config_from_args(ctx.obj.get('config_file'))
        for key, value in overrides.items():
            if value is not None:
                setattr(render_config, key, value)
        render_config.validate()

        fractal = FractalRegistry.create_fractal(fractal_type, iterations)
        renderer = FractalRenderer(render_config)

        if not ctx.obj.get('quiet'):
            click.echo(f"Rendering {fractal.name} ({iterations} iterations)...")
        start_time = time.time()

        renderer.render(fractal, Path(output))

        if not ctx.obj.get('quiet'):
            click.echo(f"Render complete: {time.time() - start_time:.2f}s")
            click.echo(f"Saved: {output}")

    except Exception as e:
        _fail(ctx, e)


@main.command(name='list')
def list_fractals():
    """List available fractal types."""
    for name, description in FractalRegistry.list_fractals().items():
        click.echo(f"{name:8s} {description}")


@main.command()
@click.argument('fractal_type')
@click.option('--iterations', '-n', type=int, default=1, show_default=True,
              help='Number of rewrite passes')
@click.option('--limit', type=int, default=None, help='Print at most this many symbols')
@click.option('--max-symbols', type=int, help='Refuse expansions longer than this')
@click.pass_context
def expand(ctx, fractal_type, iterations, limit, max_symbols):
    """
    Print the expanded symbol sequence of a fractal.

    FRACTAL_TYPE: Registered fractal name (see the list command)
    """
    try:
        render_config = load_config_from_args(ctx.obj.get('config_file'))
        if max_symbols is not None:
            render_config.max_symbols = max_symbols
        render_config.validate()

        fractal = FractalRegistry.create_fractal(fractal_type, iterations)
        FractalRenderer(render_config).check_size(fractal)
        sequence = fractal.expand(iterations)

        shown = sequence if limit is None else sequence[:max(limit, 0)]
        text = "".join(symbol.value for symbol in shown)
        if len(shown) < len(sequence):
            text += "..."

        click.echo(text)
        click.echo(f"length: {len(sequence)}")
    except Exception as e:
        _fail(ctx, e)


if __name__ == '__main__':
    main()
