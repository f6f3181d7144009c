import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from api.render_api import RenderConfigBuilder
from fractals.generators import DiskJuliaGenerator
from fractals.mandelbrot import mandelbrot_set
from ui.view import FractalViewer


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Interactive escape-time fractal viewer.")
    p.add_argument("--size", default="512x512", help="Window size WxH or a preset like 720p")
    p.add_argument("--max-iter", type=int, default=500)
    p.add_argument("--threads", type=int, default=None, help="Render threads including the UI thread")
    p.add_argument("--mandelbrot", action="store_true",
                   help="Show the static Mandelbrot set instead of the animated Julia sets")
    p.add_argument("--period", type=float, default=240.0, help="Seconds per Julia animation lap")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    fractal = mandelbrot_set if args.mandelbrot else DiskJuliaGenerator(period=args.period)
    service = (RenderConfigBuilder()
               .resolution(args.size)
               .max_iterations(args.max_iter)
               .threads(args.threads)
               .fractal(fractal)
               .build())

    app = QApplication(sys.argv[:1])
    viewer = FractalViewer(service)
    viewer.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
