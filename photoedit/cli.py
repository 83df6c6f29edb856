#!/usr/bin/env python3
"""
PhotoEdit Command Line Interface

Applies color adjustments and look filters to single photos or whole
directories, and shows how a set of slider values maps onto the
pipeline's operators.
"""

import functools
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from tqdm import tqdm

from .config import get_config_value, load_config
from .errors import PhotoEditError
from .io import FileImageSource, PillowRenderer, find_images
from .processing import PARAMETER_NAMES, AdjustmentParameters, AdjustmentPipeline, FilterKind
from .session import EditSession
from .utils.logging import setup_console_logging

logger = logging.getLogger(__name__)

FILTER_CHOICES = [kind.value.replace('_', '-') for kind in FilterKind]


def adjustment_options(func):
    """Attach one option per adjustment plus the filter options"""
    for name in reversed(PARAMETER_NAMES):
        func = click.option(
            f"--{name.replace('_', '-')}", name, type=float, default=None,
            help=f"{name.replace('_', ' ').title()} (-100 to 100)",
        )(func)
    func = click.option('--filter', 'filter_kind', type=click.Choice(FILTER_CHOICES),
                        default=None, help='Look filter')(func)
    func = click.option('--intensity', type=float, default=None,
                        help='Look filter intensity (0.0-1.0)')(func)
    return func


def _collect_values(options: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the adjustments given on the command line"""
    values = {name: options[name] for name in PARAMETER_NAMES if options.get(name) is not None}
    if options.get('filter_kind') is not None:
        values['filter'] = options['filter_kind']
    if options.get('intensity') is not None:
        values['filter_intensity'] = options['intensity']
    return values


def _parameters_from(values: Dict[str, Any]) -> AdjustmentParameters:
    params = AdjustmentParameters()
    values = dict(values)
    kind = values.pop('filter', None)
    intensity = values.pop('filter_intensity', None)
    for name, value in values.items():
        params.set(name, value)
    if kind is not None or intensity is not None:
        params.set_filter(params.filter.kind if kind is None else kind, intensity)
    return params


def handle_errors(func):
    """Report library errors as click errors (exit status 1)"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PhotoEditError as e:
            raise click.ClickException(str(e)) from e
    return wrapper


def edit_file(input_path: Path, output_path: Path, values: Dict[str, Any],
              config: Dict[str, Any], renderer: PillowRenderer) -> Path:
    """Load, adjust and save one photo"""
    with EditSession(config=config) as session:
        session.select_image(FileImageSource(input_path))
        session.update(**values)
        if session.result_image is None:
            raise PhotoEditError(f"No result produced for {input_path}")
        if session.last_result is not None and session.last_result.fallbacks:
            logger.warning(f"{input_path.name}: stages without output: "
                           f"{', '.join(session.last_result.fallbacks)}")
        return renderer.save(session.result_image, output_path)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.version_option(package_name='photoedit')
@click.pass_context
def main(ctx, config: Optional[str] = None, verbose: bool = False, quiet: bool = False):
    """
    PhotoEdit - ordered color adjustments for photos

    Every command builds the full adjustment pipeline from the given slider
    values (exposure, contrast, warmth ...) and an optional look filter.
    """
    ctx.ensure_object(dict)

    cfg = load_config(config)
    level = get_config_value(cfg, 'logging.level', 'INFO')
    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        setup_console_logging(
            level=level,
            color=get_config_value(cfg, 'logging.color', True),
            fmt=get_config_value(cfg, 'logging.format',
                                 '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        )
    else:
        root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    ctx.obj['config'] = cfg
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output_path', type=click.Path(dir_okay=False, path_type=Path))
@adjustment_options
@click.pass_context
@handle_errors
def apply(ctx, input_path: Path, output_path: Path, **options):
    """
    Adjust a single photo.

    INPUT_PATH: Photo to edit
    OUTPUT_PATH: Where to write the result (format from the suffix)
    """
    config = ctx.obj['config']
    values = _collect_values(options)
    renderer = PillowRenderer.from_config(config)

    saved = edit_file(input_path, output_path, values, config, renderer)
    if not ctx.obj['quiet']:
        click.echo(f"Saved {saved}")


@main.command()
@click.argument('input_dir', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument('output_dir', type=click.Path(file_okay=False, path_type=Path))
@adjustment_options
@click.option('--recursive/--no-recursive', default=False, help='Process subdirectories')
@click.pass_context
@handle_errors
def batch(ctx, input_dir: Path, output_dir: Path, recursive: bool = False, **options):
    """
    Apply the same adjustments to every photo in a directory.

    INPUT_DIR: Directory with photos
    OUTPUT_DIR: Directory for results, mirroring the input layout
    """
    config = ctx.obj['config']
    quiet = ctx.obj['quiet']
    values = _collect_values(options)
    renderer = PillowRenderer.from_config(config)

    images = find_images(input_dir, recursive=recursive)
    if not images:
        click.echo("No photos found in directory", err=True)
        return

    processed = 0
    failed = []
    for image_path in tqdm(images, desc="Editing photos", unit="photo", disable=quiet):
        target = output_dir / image_path.relative_to(input_dir)
        try:
            edit_file(image_path, target, values, config, renderer)
            processed += 1
        except PhotoEditError as e:
            logger.error(f"Failed to process {image_path}: {e}")
            failed.append(image_path)

    if not quiet:
        click.echo(f"Processed {processed} of {len(images)} photos")
        for path in failed:
            click.echo(f"  failed: {path}", err=True)
    if failed:
        ctx.exit(1)


@main.command()
@adjustment_options
@click.option('--width', type=int, default=1000, help='Image width used for the gradient anchors')
@click.option('--height', type=int, default=1000, help='Image height used for the gradient anchors')
@click.pass_context
@handle_errors
def show(ctx, width: int = 1000, height: int = 1000, **options):
    """Print the parameters and the operator settings of each active stage"""
    config = ctx.obj['config']
    params = _parameters_from(_collect_values(options))
    pipeline = AdjustmentPipeline.from_config(config)

    click.echo("Parameters:")
    for name, value in params.as_dict().items():
        click.echo(f"  {name:<16} {value}")

    stages = pipeline.describe(params, width=width, height=height)
    click.echo("\nActive stages:")
    if not stages:
        click.echo("  (none, result equals the source)")
    for index, (name, native) in enumerate(stages, 1):
        click.echo(f"  {index:2d}. {name:<12} {native}")


if __name__ == '__main__':
    main()
