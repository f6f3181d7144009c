from numba import njit

# |z| > 2.0
ESCAPE_MAGNITUDE_SQUARED = 4.0


# No fastmath: contracting into FMA would change which boundary points escape.
@njit(cache=True, nogil=True)
def mandelbrot_escape(max_iter, cr, ci):
    zr = 0.0
    zi = 0.0
    real_sq = 0.0
    imag_sq = 0.0
    for i in range(max_iter):
        zi = 2.0 * zr * zi + ci
        zr = real_sq - imag_sq + cr
        real_sq = zr * zr
        imag_sq = zi * zi
        if real_sq + imag_sq > ESCAPE_MAGNITUDE_SQUARED:
            return i
    return max_iter


@njit(cache=True, nogil=True)
def julia_escape(max_iter, zr, zi, kr, ki):
    real_sq = zr * zr
    imag_sq = zi * zi
    for i in range(max_iter):
        zi = 2.0 * zr * zi + ki
        zr = real_sq - imag_sq + kr
        real_sq = zr * zr
        imag_sq = zi * zi
        if real_sq + imag_sq > ESCAPE_MAGNITUDE_SQUARED:
            return i
    return max_iter


@njit(cache=True, nogil=True)
def escape_iterations(kind, kr, ki, max_iter, re, im):
    """Dispatch on SetKind value: 0 = Mandelbrot, 1 = quadratic Julia."""
    if kind == 1:
        return julia_escape(max_iter, re, im, kr, ki)
    return mandelbrot_escape(max_iter, re, im)
