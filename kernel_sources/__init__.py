# Kernel sources package
from .cpu.escape import mandelbrot_escape, julia_escape, escape_iterations
from .cpu.render import render_index_range, render_index_list, shift_pixels

__all__ = [
    "mandelbrot_escape",
    "julia_escape",
    "escape_iterations",
    "render_index_range",
    "render_index_list",
    "shift_pixels",
]
