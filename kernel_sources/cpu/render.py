from numba import njit

from kernel_sources.cpu.escape import escape_iterations


@njit(cache=True, nogil=True, inline="always")
def _render_pixel(pixels, index, width, half_w, half_h,
                  center_re, center_im, pixel_scale,
                  kind, kr, ki, max_iter, table):
    gx = index % width - half_w
    gy = index // width - half_h
    re = center_re + pixel_scale * float(gx)
    im = center_im + pixel_scale * float(gy)
    n = escape_iterations(kind, kr, ki, max_iter, re, im)
    for ch in range(pixels.shape[1]):
        pixels[index, ch] = table[n, ch]


@njit(cache=True, nogil=True)
def render_index_range(pixels, width, height,
                       center_re, center_im, pixel_scale,
                       kind, kr, ki, max_iter, table,
                       start, end):
    """
    Evaluates and colors the contiguous buffer slice [start, end).
    pixels: (area, channels), table: (max_iter + 1, channels), same dtype.
    """
    half_w = width // 2
    half_h = height // 2
    for index in range(start, end):
        _render_pixel(pixels, index, width, half_w, half_h,
                      center_re, center_im, pixel_scale,
                      kind, kr, ki, max_iter, table)


@njit(cache=True, nogil=True)
def render_index_list(pixels, width, height,
                      center_re, center_im, pixel_scale,
                      kind, kr, ki, max_iter, table,
                      indices):
    """Same as render_index_range for an arbitrary array of buffer indices."""
    half_w = width // 2
    half_h = height // 2
    for j in range(indices.shape[0]):
        _render_pixel(pixels, indices[j], width, half_w, half_h,
                      center_re, center_im, pixel_scale,
                      kind, kr, ki, max_iter, table)


@njit(cache=True, nogil=True)
def shift_pixels(pixels, width, height, offset_x, offset_y):
    """
    Moves every pixel by (offset_x, offset_y) in place, dropping the ones
    that leave the screen. Walks destinations from the far side of the
    shift so that no source is overwritten before it has been read.
    Exposed pixels keep stale values.
    """
    if offset_y > 0:
        y_first, y_last, y_step = height - 1, offset_y - 1, -1
    else:
        y_first, y_last, y_step = 0, height + offset_y, 1
    if offset_x > 0:
        x_first, x_last, x_step = width - 1, offset_x - 1, -1
    else:
        x_first, x_last, x_step = 0, width + offset_x, 1

    for y in range(y_first, y_last, y_step):
        src_row = (y - offset_y) * width
        dst_row = y * width
        for x in range(x_first, x_last, x_step):
            src = src_row + x - offset_x
            dst = dst_row + x
            for ch in range(pixels.shape[1]):
                pixels[dst, ch] = pixels[src, ch]
