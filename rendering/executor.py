from __future__ import annotations

import logging
import os
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional, Tuple

from fractals.base import EscapeTimeSet
from renderers.renderer_core import FrameRenderer
from rendering.exposed import exposed_regions
from utils.coords import ScreenRegion, region_indices

logger = logging.getLogger(__name__)


def partition(total: int, parts: int) -> List[Tuple[int, int]]:
    """
    Splits [0, total) into `parts` contiguous [start, end) chunks of
    total // parts items. The remainder is folded into the last chunk.
    """
    per_part = total // parts
    chunks = [(i * per_part, (i + 1) * per_part) for i in range(parts - 1)]
    chunks.append(((parts - 1) * per_part, total))
    return chunks


class RenderExecutor:
    """
    Fixed worker pool shared by every render of a session.

    A render splits its pixels into one chunk per worker plus one for the
    calling thread. Chunks cover disjoint buffer indices, so workers write
    into the renderer without locking. Every call waits for all of its
    chunks before returning.
    """

    def __init__(self, num_threads: Optional[int] = None) -> None:
        num_threads = num_threads if num_threads is not None else (os.cpu_count() or 1)
        if num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {num_threads}")
        self.num_threads = int(num_threads)
        # The calling thread takes the last chunk itself.
        self.num_workers = self.num_threads - 1
        self._pool: Optional[ThreadPoolExecutor] = None
        if self.num_workers > 0:
            self._pool = ThreadPoolExecutor(max_workers=self.num_workers,
                                            thread_name_prefix="render")

    # ---- Lifecycle ------------------------------------------------------

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> RenderExecutor:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---- Dispatch -------------------------------------------------------

    def _run_chunks(self, chunks: List[Tuple[int, int]], run) -> None:
        *pooled, own = chunks
        futures: List[Future] = []
        if self._pool is not None:
            futures = [self._pool.submit(run, start, end) for start, end in pooled]
        else:
            own = (pooled[0][0], own[1]) if pooled else own
        try:
            run(*own)
        finally:
            # Barrier: nothing is returned while a worker still writes.
            wait(futures)
        for fut in futures:
            fut.result()

    # ---- Renders --------------------------------------------------------

    def render(self, renderer: FrameRenderer, fractal: EscapeTimeSet) -> None:
        """Renders the whole frame."""
        t0 = time.perf_counter()
        area = renderer.resolution().area
        chunks = partition(area, self.num_workers + 1)
        self._run_chunks(chunks, lambda start, end: renderer.render_index_range(fractal, start, end))
        logger.debug("Rendered %d px on %d threads in %.2f ms",
                     area, self.num_threads, (time.perf_counter() - t0) * 1000.0)

    def render_region(self, renderer: FrameRenderer, region: ScreenRegion,
                      fractal: EscapeTimeSet) -> None:
        """Renders only the pixels of `region`, any other pixel is untouched."""
        indices = region_indices(region, renderer.resolution().width)
        if len(indices) == 0:
            return
        chunks = partition(len(indices), self.num_workers + 1)
        self._run_chunks(chunks, lambda start, end: renderer.render_indices(fractal, indices[start:end]))

    def render_missing_edges(self, renderer: FrameRenderer, fractal: EscapeTimeSet,
                             offset_x: int, offset_y: int) -> None:
        """
        Completes a frame whose pixels were just shifted by
        (offset_x, offset_y): only the exposed border strips are rendered.
        """
        regions = exposed_regions(renderer.resolution(), offset_x, offset_y)
        if regions is None:
            self.render(renderer, fractal)
            return
        t0 = time.perf_counter()
        for region in regions:
            self.render_region(renderer, region, fractal)
        logger.debug("Rendered %d exposed px for offset (%d, %d) in %.2f ms",
                     sum(len(r) for r in regions), offset_x, offset_y,
                     (time.perf_counter() - t0) * 1000.0)
