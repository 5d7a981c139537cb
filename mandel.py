import os
import sys
import time
import warnings
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

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


import PIL.Image

from mandelband import (
    RenderError,
    RenderParameters,
    RenderResult,
    Viewport,
    build_colorizer,
    parse_complex,
    parse_hex_color,
    parse_pair,
    render_frame,
)


def _quiet_tensorflow():
    import tensorflow as tf

    log("TensorFlow version: %s" % tf.__version__)
    if _suppress_messages and not VERBOSE:
        tf.get_logger().setLevel("ERROR")
        for handler in tf.get_logger().handlers:
            handler.setLevel("ERROR")


@dataclass
class RenderConfig:
    params: RenderParameters
    color: str
    colorizer_options: dict
    workers: int | None
    backend: str


@dataclass
class OutputConfig:
    image_path: Path
    image_format: str


def build_parser():
    parser = ArgumentParser(
        description="Render the Mandelbrot set to an image file, computing bands of rows in parallel.",
        epilog="Negative coordinates must be attached with '=', e.g. --upper-left=-1.20,0.35",
    )

    parser.add_argument('output', type=str, help='image file to write')

    parser.add_argument('--size', type=str, dest='size', metavar='WxH', default='1000x750',
                        help='image dimensions in pixels, e.g. 1000x750')

    parser.add_argument('--upper-left', type=str, dest='upper_left', metavar='RE,IM', default='-1.20,0.35',
                        help='point of the complex plane at the upper-left corner of the image')

    parser.add_argument('--lower-right', type=str, dest='lower_right', metavar='RE,IM', default='-1,0.20',
                        help='point of the complex plane at the lower-right corner of the image')

    parser.add_argument('--max-iterations', type=int, dest='max_iterations', metavar='MAX_ITERATIONS', default=255,
                        help='maximum number of times to iterate z <- z**2 + c before a point counts as bounded')

    parser.add_argument('--bound-radius', type=float, dest='bound_radius', metavar='RADIUS', default=2.0,
                        help='escape radius of the orbit test')

    parser.add_argument('--color', choices=['gray', 'rainbow', 'colormap'], default='gray',
                        help='pixel coloring: 8-bit grayscale, the seven-band rainbow palette, or a matplotlib colormap')

    parser.add_argument('--colormap', type=str, dest='colormap', metavar='COLORMAP', default='twilight_shifted',
                        help='matplotlib colormap used with --color colormap (e.g. "viridis", "inferno")')

    parser.add_argument('--invert', action='store_true', help='Invert the selected colormap.')

    parser.add_argument('--inside-color', type=str, default='#000000',
                        help='Hex color for points inside the Mandelbrot set (--color colormap).')

    parser.add_argument('--execution', choices=['single', 'multi'], default='multi',
                        help='"single" renders every row on the calling thread; "multi" splits rows into parallel bands.')

    parser.add_argument('--workers', type=int, dest='workers', metavar='WORKERS', default=None,
                        help='number of row bands for multi execution (default: number of CPUs). '
                             'Bands only run in parallel with --backend tensor; python bands share the GIL.')

    parser.add_argument('--backend', choices=['python', 'tensor'], default='python',
                        help='escape-time implementation: per-pixel Python or a TensorFlow kernel per band')

    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default='png',
                        help='file format of the output image. Can be any extension supported by Pillow. Default: "png".')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_render_config(opt, parser: ArgumentParser) -> RenderConfig:
    bounds = parse_pair(opt.size, 'x', int)
    if bounds is None:
        parser.error(f"error parsing image dimensions '{opt.size}'.")
    upper_left = parse_complex(opt.upper_left)
    if upper_left is None:
        parser.error(f"error parsing upper left corner point '{opt.upper_left}'.")
    lower_right = parse_complex(opt.lower_right)
    if lower_right is None:
        parser.error(f"error parsing lower right corner point '{opt.lower_right}'.")

    params = RenderParameters(
        width=bounds[0],
        height=bounds[1],
        viewport=Viewport(upper_left=upper_left, lower_right=lower_right),
        max_iterations=opt.max_iterations,
        bound_radius=opt.bound_radius,
    )
    try:
        params.validate()
    except RenderError as exc:
        parser.error(str(exc))

    colorizer_options = {}
    if opt.color == 'colormap':
        try:
            inside_rgb = parse_hex_color(opt.inside_color)
        except ValueError as exc:
            parser.error(f"invalid --inside-color '{opt.inside_color}': {exc}")
        colorizer_options = {"name": opt.colormap, "invert": bool(opt.invert), "inside_color": inside_rgb}

    if opt.workers is not None and opt.workers < 1:
        parser.error("--workers must be a positive integer.")
    if opt.execution == 'single':
        if opt.workers not in (None, 1):
            parser.error("--workers cannot be combined with --execution single.")
        workers = 1
    else:
        workers = opt.workers

    return RenderConfig(
        params=params,
        color=opt.color,
        colorizer_options=colorizer_options,
        workers=workers,
        backend=opt.backend,
    )


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    image_format = (getattr(opt, "format", "png") or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"

    output_arg = opt.output
    if str(output_arg).endswith(tuple(filter(None, {os.sep, os.altsep}))) or str(output_arg).endswith("/"):
        parser.error("output must be a file path.")
    output_path = Path(output_arg).expanduser()
    if output_path.exists() and output_path.is_dir():
        parser.error("output must point to a file, not a directory.")

    suffix = output_path.suffix
    expected_suffix = f".{image_format}"
    if suffix:
        if suffix.lower() != expected_suffix.lower():
            parser.error(f"output extension {suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(expected_suffix)

    return OutputConfig(image_path=output_path.resolve(), image_format=image_format)


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(result: RenderResult) -> PIL.Image.Image:
    """Wrap a finished pixel buffer as an ``L`` or ``RGB`` Pillow image."""

    return PIL.Image.fromarray(result.to_array())


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    render_config = resolve_render_config(opt, parser)
    output_config = resolve_output_config(opt, parser)

    try:
        colorizer = build_colorizer(render_config.color, **render_config.colorizer_options)
    except ValueError as exc:
        parser.error(str(exc))

    if render_config.backend == 'tensor':
        _quiet_tensorflow()

    params = render_config.params
    log("rendering {0}x{1} from {2} to {3}, {4} iterations, {5} backend".format(
        params.width, params.height, params.viewport.upper_left, params.viewport.lower_right,
        params.max_iterations, render_config.backend))

    started = time.perf_counter()
    result = render_frame(params, colorizer, workers=render_config.workers, backend=render_config.backend)
    log("rendered {0} band(s) in {1:.3f}s".format(len(result.bands), time.perf_counter() - started))

    write_single_image(to_image(result), output_config.image_path, output_config.image_format)
    log("wrote %s" % output_config.image_path)


if __name__ == '__main__':
    main()
