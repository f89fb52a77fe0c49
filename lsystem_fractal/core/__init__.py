"""Lindenmayer rewriting engine, turtle and fractal definitions."""
