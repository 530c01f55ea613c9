"""
corpus-vocab Configuration Module
Centralized configuration for vocabulary building and post-processing.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "CorpusVocab"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"

# Ensure directories exist
for directory in [APPDATA_DIR, LOGS_DIR]:
    directory.mkdir(parents=True, exist_ok=True)

# Logging Configuration
LOG_FILE = LOGS_DIR / "processing.log"
DEBUG_FLOW_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Quarantine for files that failed at any stage (open, decode, extract, scan).
# Created relative to the working directory unless overridden.
QUARANTINE_DIR_NAME = "vocab_errors"
ERROR_LOG_NAME = "vocab_errors.log"

# Line Scanning
# Natural-language lines never legitimately exceed this; longer lines fail the file.
MAX_LINE_BYTES = 1024 * 1024  # 1 MiB

# Supported Formats
TEXT_EXTENSIONS = {'.txt', '.md'}
PDF_EXTENSIONS = {'.pdf'}
DOCX_EXTENSIONS = {'.docx'}
GZIP_EXTENSION = '.gz'

# Output
DEFAULT_OUTPUT_FILE = "vocab_processed.txt"
SORT_CHOICES = ("freq", "alpha")

# Parallel Processing Configuration
# One worker per file, admitted through a gate of this size.
# Defaults to host parallelism; a non-positive value from the CLI or
# settings file falls back to this.
PARALLEL_MAX_WORKERS = os.cpu_count() or 1

# --- Settings File ---
SETTINGS_FILE = Path(__file__).parent.parent / "config" / "settings.yaml"

DEFAULT_SETTINGS = {
    'lowercase': False,
    'filter_punct': False,
    'sort': None,
    'max_workers': 0,
    'output': DEFAULT_OUTPUT_FILE,
    'quarantine_dir': QUARANTINE_DIR_NAME,
}

# Accepted YAML types per setting; None allowed only for 'sort'
SETTING_TYPES = {
    'lowercase': bool,
    'filter_punct': bool,
    'sort': (str, type(None)),
    'max_workers': int,
    'output': str,
    'quarantine_dir': str,
}


def load_settings(settings_path: Path | str | None = None) -> dict:
    """
    Load run defaults from a YAML settings file, with fallbacks.

    Values found under the top-level ``vocab`` key override DEFAULT_SETTINGS.
    Unknown keys are ignored. A missing file yields the built-in defaults;
    a file that exists but cannot be parsed is an error.

    Args:
        settings_path: Path to the YAML file. Defaults to config/settings.yaml.

    Returns:
        A new dictionary of settings.

    Raises:
        yaml.YAMLError: If the file exists but is not valid YAML.
        ValueError: If the ``vocab`` section is not a mapping, or a known
                    setting has the wrong type (e.g. ``lowercase: "false"``).
    """
    from corpus_vocab.logging_config import debug_log

    path = Path(settings_path) if settings_path else SETTINGS_FILE
    settings = dict(DEFAULT_SETTINGS)

    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        debug_log(f"[Config] Settings file not found at {path}. Using defaults.")
        return settings

    section = data.get('vocab', {}) if isinstance(data, dict) else None
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError(f"'vocab' in {path} must be a mapping")
    for key, value in section.items():
        if key not in DEFAULT_SETTINGS:
            debug_log(f"[Config] Ignoring unknown setting '{key}' in {path}")
            continue
        expected = SETTING_TYPES[key]
        # bool is an int subclass; "max_workers: true" is still a mistake
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(
                f"setting '{key}' in {path} has invalid value {value!r} "
                f"({type(value).__name__})"
            )
        settings[key] = value

    debug_log(f"[Config] Loaded {len(section)} setting(s) from {path}")
    return settings
