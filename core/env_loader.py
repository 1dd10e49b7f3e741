# core/env_loader.py
"""
Flat KEY=VALUE configuration loader for the contact relay.

The mail settings file is read fresh on every request. A missing or
unreadable file yields an empty mapping so the handler degrades instead of
failing.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Union

logger = logging.getLogger(__name__)

QUOTE_CHARS = ('"', "'")


def _strip_quotes(value: str) -> str:
    """Remove one layer of matching surrounding quotes"""
    if len(value) >= 2 and value[0] in QUOTE_CHARS and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_env_lines(lines: Iterable[str]) -> Dict[str, str]:
    """
    Parse KEY=VALUE lines into a dictionary

    Blank lines, lines starting with '#', and lines without '=' are skipped.
    The split happens at the first '=' only; later duplicates win.
    """
    result: Dict[str, str] = {}

    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue
        if '=' not in line:
            continue

        key, value = line.split('=', 1)
        result[key.strip()] = _strip_quotes(value.strip())

    return result


def load_env(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load configuration from a file path

    Returns:
        Mapping of key to value, empty if the file cannot be read
    """
    try:
        with open(path, 'r', encoding='utf-8') as handle:
            return parse_env_lines(handle.read().splitlines())
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Mail configuration not loaded from {path}: {e}")
        return {}
