"""Extraction settings -- built-in defaults with an optional JSON overlay."""

import json
from dataclasses import dataclass, field
from typing import Set

# File extensions considered for batch processing
PHOTO_EXTENSIONS = {'.jpg', '.jpeg', '.heic', '.heif'}

# Default number of parallel workers (1 = sequential)
DEFAULT_WORKERS = 1

# Decimal places used when printing coordinates
DEFAULT_PRECISION = 6


@dataclass
class ExtractorConfig:
    """Settings for file and batch extraction.

    The parser itself takes no configuration; these only affect which files
    are collected, how many run at once, and how results are displayed.
    """

    extensions: Set[str] = field(default_factory=lambda: set(PHOTO_EXTENSIONS))
    workers: int = DEFAULT_WORKERS
    precision: int = DEFAULT_PRECISION
    preflight: bool = True

    @classmethod
    def default(cls) -> 'ExtractorConfig':
        """Return the built-in defaults."""
        return cls()

    @classmethod
    def from_json(cls, path) -> 'ExtractorConfig':
        """Load settings from a JSON file and merge with defaults.

        JSON format::

            {
              "extensions": [".jpe"],
              "workers": 4,
              "precision": 5,
              "preflight": false
            }

        All keys are optional; omitted keys inherit built-in defaults.
        Extensions in the JSON are *added* to the defaults, not replacing them.
        """
        with open(str(path), 'r') as f:
            data = json.load(f)

        config = cls.default()

        for ext in data.get('extensions', []):
            ext = ext.lower()
            config.extensions.add(ext if ext.startswith('.') else '.' + ext)
        if 'workers' in data:
            config.workers = max(1, int(data['workers']))
        if 'precision' in data:
            config.precision = max(0, int(data['precision']))
        if 'preflight' in data:
            config.preflight = bool(data['preflight'])

        return config
