import os
import sys
import warnings
from argparse import ArgumentParser

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from fractal import (
    PRESETS,
    CenteredViewport,
    ConfigError,
    FixedBounds,
    RenderConfig,
    lenient_float,
    lenient_int,
    render,
    resolve_config,
    to_image,
    write_image,
)
from fractal.escape import CPU_DEVICE

log("TensorFlow version: %s" % tf.__version__)

_CENTERED_FLAGS = ("center_x", "center_y", "zoom", "span_x", "span_y")
_BOUNDS_FLAGS = ("xmin", "xmax", "ymin", "ymax")


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set to an image file.")

    parser.add_argument('--preset', choices=sorted(PRESETS), default='explorer',
                        help='starting configuration: "explorer" (centered RGB view) or "classic" (fixed-bounds grayscale).')

    parser.add_argument('--zoom', dest='zoom', metavar='ZOOM',
                        help='positive multiplier shrinking the viewport span. Default: 1.0')

    parser.add_argument('--center-x', dest='center_x', metavar='CENTER_X',
                        help='real coordinate of the viewport center. Default: 0.746999')

    parser.add_argument('--center-y', dest='center_y', metavar='CENTER_Y',
                        help='imaginary coordinate of the viewport center. Default: 0.249991')

    parser.add_argument('--span-x', dest='span_x', metavar='SPAN_X',
                        help='half-width of the viewport before zoom. Default: 2.0')

    parser.add_argument('--span-y', dest='span_y', metavar='SPAN_Y',
                        help='half-height of the viewport before zoom. Default: 2.0')

    parser.add_argument('--xmin', dest='xmin', metavar='XMIN', help='left bound; any bound flag selects a fixed-bounds viewport.')
    parser.add_argument('--xmax', dest='xmax', metavar='XMAX', help='right bound of a fixed-bounds viewport.')
    parser.add_argument('--ymin', dest='ymin', metavar='YMIN', help='lower bound of a fixed-bounds viewport.')
    parser.add_argument('--ymax', dest='ymax', metavar='YMAX', help='upper bound of a fixed-bounds viewport.')

    parser.add_argument('--threshold', dest='threshold', metavar='THRESHOLD',
                        help='escape radius compared against |z|. Default: 2.0 (100.0 for classic)')

    parser.add_argument('--max-iterations', dest='max_iterations', metavar='MAX_ITERATIONS',
                        help='maximum number of iterations per pixel. Default: 40')

    parser.add_argument('--size', dest='size', metavar='SIZE',
                        help='side length of the square output image in pixels. Default: 400 (200 for classic)')

    parser.add_argument('--channels', choices=['gray', 'rgb'], default=None,
                        help='single-channel grayscale or three-channel output.')

    parser.add_argument('--crosshairs', action='store_true', default=None,
                        help='overlay accent crosshairs on the image center lines; ignored in gray mode.')

    parser.add_argument('--output', dest='output', type=str, metavar='OUTPUT',
                        help='destination image file. Default: "fractal.png"')

    parser.add_argument('--format', dest='format', type=str, metavar='FORMAT',
                        help='file format for the output image, any extension supported by Pillow. Default: the output suffix.')

    parser.add_argument('--workers', dest='workers', metavar='WORKERS',
                        help='number of worker threads. Default: one per CPU')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def _fixed_bounds(opt, base: RenderConfig) -> FixedBounds:
    defaults = base.viewport if isinstance(base.viewport, FixedBounds) else PRESETS["classic"].viewport
    return FixedBounds(
        cxmin=lenient_float(opt.xmin, defaults.cxmin),
        cxmax=lenient_float(opt.xmax, defaults.cxmax),
        cymin=lenient_float(opt.ymin, defaults.cymin),
        cymax=lenient_float(opt.ymax, defaults.cymax),
    )


def resolve_render_config(opt, parser: ArgumentParser) -> RenderConfig:
    """Turn parsed flags into a validated configuration.

    Numeric flags that do not parse fall back to the preset's value without
    a message; structurally invalid values end the program through
    ``parser.error``.
    """

    base = PRESETS[opt.preset]
    bounds_given = any(getattr(opt, name) is not None for name in _BOUNDS_FLAGS)
    centered_given = [name for name in _CENTERED_FLAGS if getattr(opt, name) is not None]

    viewport = None
    viewport_values = {}
    if bounds_given:
        if centered_given:
            parser.error("--xmin/--xmax/--ymin/--ymax cannot be combined with center, span or zoom flags.")
        viewport = _fixed_bounds(opt, base)
    elif isinstance(base.viewport, CenteredViewport):
        viewport_values = {name: lenient_float(getattr(opt, name), getattr(base.viewport, name)) for name in _CENTERED_FLAGS}
    elif centered_given:
        parser.error(f"the {opt.preset} preset uses fixed bounds; center, span and zoom flags do not apply.")

    try:
        return resolve_config(
            opt.preset,
            viewport=viewport,
            size=lenient_int(opt.size, base.size),
            max_iterations=lenient_int(opt.max_iterations, base.max_iterations),
            threshold=lenient_float(opt.threshold, base.threshold),
            channels=opt.channels,
            crosshairs=opt.crosshairs,
            output=opt.output,
            workers=lenient_int(opt.workers, 0) or None,
            **viewport_values,
        )
    except ConfigError as exc:
        parser.error(str(exc))


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = resolve_render_config(opt, parser)
    log("Resolved configuration: %s" % (config,))
    log("Using %d worker thread(s) on %s" % (config.workers, CPU_DEVICE))

    print("Rendering {0}x{0} image, {1} iterations, escape threshold {2}".format(
        config.size, config.max_iterations, config.threshold))

    result = render(config, device=CPU_DEVICE)
    bounds = result.bounds
    print("Viewport x: [{0:.6g}, {1:.6g}]  y: [{2:.6g}, {3:.6g}]".format(
        bounds.cxmin, bounds.cxmax, bounds.cymin, bounds.cymax))
    log("Raw intensity range: [%d, %d]" % (result.intensity_range.minimum, result.intensity_range.maximum))

    output_path = write_image(to_image(result.pixels), config.output, opt.format)
    print("Saved {0}".format(output_path))
    return 0


if __name__ == '__main__':
    sys.exit(main())
