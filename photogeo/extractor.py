"""Core extraction logic -- in-memory extraction, single files and batches.

``extract()`` is a pure function of its input: no I/O, no shared state, so
batches can run it on any number of threads at once.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional

from photogeo.config import ExtractorConfig
from photogeo.errors import ExifError
from photogeo.exif import ByteReader, read_gps_coordinate
from photogeo.formats import detect_format, get_locator, preflight_check
from photogeo.models import BatchResult, ErrorKind, ExtractionResult, PhotoResult

logger = logging.getLogger(__name__)


def extract(data, mime_type: Optional[str] = None,
            filename: Optional[str] = None) -> ExtractionResult:
    """Extract the GPS coordinate embedded in a photo's bytes.

    Args:
        data: Complete file content (bytes, bytearray or memoryview).
        mime_type: Optional MIME type hint, used only to recognize HEIC.
        filename: Optional filename hint, used only to recognize HEIC.

    Returns:
        ExtractionResult holding either a Coordinate or an ErrorKind.
    """
    fmt = detect_format(data, mime_type, filename)
    locator = get_locator(fmt)
    if locator is None:
        return ExtractionResult(error=ErrorKind.UNSUPPORTED_FORMAT)

    reader = ByteReader(data)
    try:
        stream = locator(reader)
        coordinate = read_gps_coordinate(reader, stream)
    except ExifError as e:
        logger.debug("extract(%s): %s (%s)", fmt, e.kind.value, e)
        return ExtractionResult(error=e.kind)

    return ExtractionResult(coordinate=coordinate)


def extract_file(filepath: Path, mime_type: Optional[str] = None,
                 config: Optional[ExtractorConfig] = None) -> PhotoResult:
    """Extract the GPS coordinate of a single photo file.

    Args:
        filepath: Path to the photo.
        mime_type: Optional MIME type hint.
        config: Settings; ``preflight`` and ``extensions`` are used here.

    Returns:
        PhotoResult. I/O failures are reported in ``error``, parse failures
        in ``reason``.
    """
    filepath = Path(filepath)
    config = config or ExtractorConfig.default()
    t0 = time.monotonic()

    if config.preflight:
        warning = preflight_check(mime_type, filepath.name, config.extensions)
        if warning is not None:
            return PhotoResult(filepath=filepath, format='unknown',
                               reason=ErrorKind.UNSUPPORTED_FORMAT, warning=warning)

    try:
        data = filepath.read_bytes()
    except OSError as e:
        return PhotoResult(filepath=filepath, format='unknown',
                           error=f'Cannot read file: {e}')

    result = extract(data, mime_type=mime_type, filename=filepath.name)
    elapsed = (time.monotonic() - t0) * 1000
    return PhotoResult(
        filepath=filepath,
        format=detect_format(data, mime_type, filepath.name),
        coordinate=result.coordinate,
        reason=result.error,
        extract_time_ms=elapsed,
        file_size=len(data),
    )


def collect_photo_files(path: Path, extensions=None) -> List[Path]:
    """Collect all photo files from a path (file or directory).

    A single file is always returned as-is; directories are walked
    recursively and filtered by extension.
    """
    path = Path(path)
    if path.is_file():
        return [path]

    extensions = {e.lower() for e in (extensions or ExtractorConfig.default().extensions)}
    files = []
    for root, _, filenames in os.walk(path):
        for fname in sorted(filenames):
            if Path(fname).suffix.lower() in extensions:
                files.append(Path(root) / fname)
    files.sort()
    return files


def extract_batch(
    input_path: Path,
    config: Optional[ExtractorConfig] = None,
    progress_callback: Optional[Callable] = None,
    workers: Optional[int] = None,
) -> BatchResult:
    """Extract coordinates from every photo under a path.

    Args:
        input_path: File or directory containing photos.
        config: Settings (extensions, workers, preflight).
        progress_callback: Called with (index, total, filepath, result) after each file.
        workers: Overrides ``config.workers``. 1 = sequential.

    Returns:
        BatchResult whose ``results`` follow input order.
    """
    config = config or ExtractorConfig.default()
    workers = workers if workers is not None else config.workers
    t0 = time.monotonic()

    files = collect_photo_files(Path(input_path), config.extensions)
    total = len(files)
    batch = BatchResult(total_files=total)

    if workers > 1 and total > 1:
        results = _batch_parallel(files, config, workers, progress_callback, batch)
    else:
        results = _batch_sequential(files, config, progress_callback, batch)

    batch.results = results
    batch.total_time_seconds = time.monotonic() - t0
    return batch


def _extract_one(filepath: Path, config: ExtractorConfig) -> PhotoResult:
    try:
        return extract_file(filepath, config=config)
    except Exception as e:
        logger.exception("extract_file failed for %s", filepath)
        return PhotoResult(filepath=filepath, format='unknown', error=str(e))


def _batch_sequential(
    files: List[Path],
    config: ExtractorConfig,
    progress_callback: Optional[Callable],
    batch: BatchResult,
) -> List[PhotoResult]:
    """Process files sequentially."""
    results = []
    total = len(files)

    for i, filepath in enumerate(files):
        result = _extract_one(filepath, config)
        results.append(result)
        _update_batch_stats(batch, result)

        if progress_callback:
            progress_callback(i + 1, total, filepath, result)

    return results


def _batch_parallel(
    files: List[Path],
    config: ExtractorConfig,
    workers: int,
    progress_callback: Optional[Callable],
    batch: BatchResult,
) -> List[PhotoResult]:
    """Process files in parallel using a thread pool.

    Files complete in any order but results are stored by submission index,
    so the association between each file and its result is preserved.
    """
    total = len(files)
    results: List[Optional[PhotoResult]] = [None] * total
    lock = threading.Lock()
    completed_count = 0

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_extract_one, filepath, config): (i, filepath)
            for i, filepath in enumerate(files)
        }

        for future in as_completed(futures):
            index, filepath = futures[future]
            result = future.result()
            results[index] = result

            with lock:
                _update_batch_stats(batch, result)
                completed_count += 1
                if progress_callback:
                    progress_callback(completed_count, total, filepath, result)

    return results


def _update_batch_stats(batch: BatchResult, result: PhotoResult):
    """Update batch statistics from a single result."""
    if result.error:
        batch.files_errored += 1
    elif result.found:
        batch.files_located += 1
    else:
        batch.files_without_location += 1
