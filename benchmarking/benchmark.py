"""
Benchmark the threaded CPU renderer.
Times full-frame renders against incremental pans (shift + exposed edges)
for every resolution / thread-count combination.

Usage examples:
  python -m benchmarking.benchmark --res 800x600,1280x720 --threads 1,4,8 \
      --max-iter 1000 --runs 5

  python -m benchmarking.benchmark --julia --pan 16 --csv pan_results.csv
"""

import os
import csv
import time
import argparse
import platform
from typing import List, Tuple, Optional

from fractals.base import EscapeTimeSet
from fractals.julia import QuadraticJuliaSet
from fractals.mandelbrot import mandelbrot_set
from renderers.renderer_core import FrameRenderer
from rendering.executor import RenderExecutor
from utils.coords import Resolution
from utils.enums import PixelFormat

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "800x600,1280x720".
    """
    if not res_str:
        return [(800, 600), (1280, 720), (1920, 1080)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        w, h = token.split('x')
        out.append((int(w), int(h)))
    return out

def parse_thread_list(threads_str: str) -> List[int]:
    """
    Parse thread counts like "1,2,4". Empty -> one per CPU.
    """
    counts = [int(t) for t in threads_str.split(',') if t.strip()]
    return counts or [os.cpu_count() or 1]

def cpu_summary() -> str:
    cpu_info = platform.processor() or platform.machine()
    return f"{cpu_info or 'Unknown CPU'} ({os.cpu_count() or 1} logical cores)"

# --- Benchmark core ----------------------------------------------------------

def time_runs(runs: int, warmup: int, fn) -> Tuple[float, float]:
    """
    Runs warmups (not timed), then 'runs' timed calls.
    Returns (avg_time_seconds, fps).
    """
    for _ in range(max(0, warmup)):
        fn()

    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        times.append(t1 - t0)

    avg = sum(times) / len(times)
    fps = 1.0 / avg if avg > 0 else 0.0
    return avg, fps

def benchmark_combo(fractal: EscapeTimeSet,
                    pixel_format: PixelFormat,
                    max_iter: int,
                    threads: int,
                    pan: int,
                    width: int,
                    height: int,
                    runs: int,
                    warmup: int = 1) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    Returns ((full_avg, full_fps), (pan_avg, pan_fps)).
    """
    renderer = FrameRenderer(Resolution(width, height),
                             pixel_format=pixel_format,
                             max_iterations=max_iter)
    with RenderExecutor(threads) as executor:
        full = time_runs(runs, warmup, lambda: executor.render(renderer, fractal))

        def pan_once():
            renderer.translate_frame(pan, pan)
            renderer.translate_pixels(pan, pan)
            executor.render_missing_edges(renderer, fractal, pan, pan)

        incremental = time_runs(runs, warmup, pan_once)
    return full, incremental

# --- CSV writer --------------------------------------------------------------

def write_csv_row(writer: csv.writer,
                  resolution: Tuple[int, int],
                  threads: int,
                  full: Optional[Tuple[float, float]],
                  incremental: Optional[Tuple[float, float]]):
    base = [f"{resolution[0]}x{resolution[1]}", str(threads)]
    for result in (full, incremental):
        if result is None:
            base.extend(["n/a", "n/a"])
        else:
            avg, fps = result
            base.extend([f"{avg:.4f}", f"{fps:.2f}"])
    writer.writerow(base)

# --- CLI ---------------------------------------------------------------------

def main():
    p = argparse.ArgumentParser(description="Benchmark the threaded escape-time renderer.")
    p.add_argument("--res", type=str, default="800x600,1280x720,1920x1080",
                   help="Comma separated WxH list")
    p.add_argument("--threads", type=str, default="",
                   help="Comma separated thread counts (calling thread included)")
    p.add_argument("--format", type=str, default="rgba", choices=["mono", "rgb", "rgba"])
    p.add_argument("--max-iter", type=int, default=500)
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--warmup", type=int, default=1)
    p.add_argument("--pan", type=int, default=8, help="Pixels panned per incremental run")
    p.add_argument("--julia", action="store_true", help="Benchmark a Julia set instead of Mandelbrot")
    p.add_argument("--csv", type=str, default="benchmark_results.csv")
    args = p.parse_args()

    resolutions = parse_resolution_list(args.res)
    thread_counts = parse_thread_list(args.threads)
    pixel_format = PixelFormat.from_name(args.format)
    fractal = QuadraticJuliaSet(complex(-0.75, 0.11)) if args.julia else mandelbrot_set

    cpu_info = cpu_summary()
    print("=== Hardware Summary ===")
    print("CPU:", cpu_info)
    print()

    if os.path.exists(args.csv):
        os.remove(args.csv)
    with open(args.csv, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Hardware Summary"])
        writer.writerow(["CPU", cpu_info])
        writer.writerow([])
        writer.writerow(["Resolution", "Threads",
                         "Full Time (s)", "Full FPS",
                         f"Pan {args.pan}px Time (s)", f"Pan {args.pan}px FPS"])

        print(f"Settings: format={pixel_format.name}, max_iter={args.max_iter}, pan={args.pan}px, "
              f"set={'julia' if args.julia else 'mandelbrot'}")
        print()

        for (w, h) in resolutions:
            print(f"=== {w}x{h} ===")
            for threads in thread_counts:
                try:
                    full, incremental = benchmark_combo(
                        fractal=fractal,
                        pixel_format=pixel_format,
                        max_iter=args.max_iter,
                        threads=threads,
                        pan=args.pan,
                        width=w,
                        height=h,
                        runs=args.runs,
                        warmup=args.warmup,
                    )
                    print(f"{threads:>3} threads  full avg={full[0]:.4f}s fps={full[1]:.2f}  "
                          f"pan avg={incremental[0]:.4f}s fps={incremental[1]:.2f}")
                except ValueError as e:
                    print(f"{threads:>3} threads  FAIL: {e}")
                    full = incremental = None
                write_csv_row(writer, (w, h), threads, full, incremental)
            print()

    print(f"Benchmark results saved to {args.csv}")

if __name__ == "__main__":
    main()
