"""CLI interface for photogeo — locate and check subcommands."""

import json
import sys
import time
from pathlib import Path

import click

import photogeo
from photogeo import log
from photogeo.config import ExtractorConfig
from photogeo.extractor import collect_photo_files, extract_batch, extract_file
from photogeo.formats import preflight_check


@click.group()
@click.version_option(version=photogeo.__version__, prog_name='photogeo')
@click.option('--no-color', is_flag=True, help='Disable colored output.')
def main(no_color):
    """photogeo — read the GPS location embedded in JPEG and HEIC photos."""
    if no_color:
        log.set_color_enabled(False)


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--verbose', '-v', is_flag=True, help='Show format and timing per photo.')
@click.option('--workers', '-w', type=int, default=None,
              help='Number of parallel workers (default: from config, 1).')
@click.option('--json-out', type=click.Path(), help='Write results as JSON to file.')
@click.option('--log', 'log_path', type=click.Path(), help='Write log to file.')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='JSON settings file.')
@click.option('--no-preflight', is_flag=True,
              help='Parse every file, even if its name does not look like a photo.')
def locate(path, verbose, workers, json_out, log_path, config_path, no_preflight):
    """Print the GPS coordinates of photos.

    PATH can be a single photo or a directory to search recursively.
    """
    config = ExtractorConfig.from_json(config_path) if config_path else ExtractorConfig.default()
    if no_preflight:
        config.preflight = False

    input_path = Path(path)
    files = collect_photo_files(input_path, config.extensions)
    if not files:
        click.echo(f'No photos found in {input_path}')
        return

    log_file = open(log_path, 'w') if log_path else None

    try:
        click.echo(log.cli_header(f'photogeo v{photogeo.__version__} — '
                                  f'locating {len(files)} photo(s)'))

        def progress(i, total, filepath, result):
            if log_file:
                log_file.write(log.log_result(filepath, result, config.precision) + '\n')
                log_file.flush()
            if verbose:
                click.echo(log.cli_dim(f'  [{i}/{total}] {filepath.name} '
                                       f'({result.format}, {result.extract_time_ms:.1f} ms)'))

        batch = extract_batch(input_path, config=config, workers=workers,
                              progress_callback=progress)

        # Per-file lines in input order, independent of completion order
        for i, result in enumerate(batch.results, 1):
            click.echo(f'  [{i}/{batch.total_files}] {result.filepath.name} | '
                       f'{log.cli_result(result, config.precision)}')

        click.echo(log.cli_separator())
        click.echo(f'Done in {batch.total_time_seconds:.2f}s')
        click.echo(f'  Total:            {batch.total_files}')
        click.echo(f'  With location:    {batch.files_located}')
        click.echo(f'  Without location: {batch.files_without_location}')
        click.echo(f'  Errors:           {batch.files_errored}')

        if json_out:
            with open(json_out, 'w') as f:
                json.dump([_result_to_dict(r) for r in batch.results], f, indent=2)
            click.echo(f'Results written to {json_out}')
    finally:
        if log_file:
            log_file.close()

    if batch.files_errored > 0:
        sys.exit(1)


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--mime', 'mime_type', help='MIME type hint (e.g. image/heic).')
def check(path, mime_type):
    """Show format detection and the extraction result for one photo."""
    filepath = Path(path)

    warning = preflight_check(mime_type, filepath.name)
    click.echo(f'File: {log.cli_bold(filepath.name)}')
    click.echo(f'Pre-flight: {"ok" if warning is None else warning}')

    t0 = time.monotonic()
    result = extract_file(filepath, mime_type=mime_type,
                          config=ExtractorConfig(preflight=False))
    if result.error:
        click.echo(log.cli_error(f'Error: {result.error}'), err=True)
        sys.exit(1)

    click.echo(log.cli_info(f'Format: {result.format}'))
    click.echo(f'Size: {result.file_size} bytes')
    click.echo(f'Location: {log.cli_result(result)}')
    click.echo(log.cli_dim(f'Parsed in {(time.monotonic() - t0) * 1000:.1f} ms'))


def _result_to_dict(result) -> dict:
    coordinate = result.coordinate
    return {
        'file': str(result.filepath),
        'format': result.format,
        'latitude': coordinate.latitude if coordinate else None,
        'longitude': coordinate.longitude if coordinate else None,
        'reason': result.reason.value if result.reason else None,
        'message': result.message,
        'error': result.error,
        'warning': result.warning,
    }


if __name__ == '__main__':
    main()
