"""Key-value line sources.

The same grammar applies to ``.env`` files and to the process environment:

- Each line should be in KEY=VALUE format
- Lines beginning with # are comments and ignored
- Blank lines are ignored
- Whitespace around the key and the value is stripped
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from envcfg.exceptions import MalformedLineError, SourceReadError


def parse_line(raw: str) -> Optional[Tuple[str, str]]:
    """Split one line into ``(key, value)``.

    Returns None for blank and comment lines.

    Raises:
        MalformedLineError: If the line has no '=' separator
    """
    line = raw.strip()

    # Skip blank lines and comments
    if not line or line.startswith("#"):
        return None

    key, sep, value = line.partition("=")
    if not sep:
        raise MalformedLineError(line)

    return key.strip(), value.strip()


def read_source(lines: Iterable[str]) -> Dict[str, str]:
    """Parse lines into a key/value mapping; later duplicates win."""
    values: Dict[str, str] = {}
    for raw in lines:
        parsed = parse_line(raw)
        if parsed is not None:
            key, value = parsed
            values[key] = value
    return values


def iter_file_lines(path: Path | str) -> Iterator[str]:
    """Yield the lines of a UTF-8 file; yield nothing if it does not exist.

    The file stays open while the caller iterates; wrap the generator in
    ``contextlib.closing`` so it is also closed when the consumer stops early.

    Raises:
        SourceReadError: If the file exists but cannot be opened or decoded
    """
    try:
        handle = open(path, encoding="utf-8")
    except FileNotFoundError:
        return
    except OSError as exc:
        raise SourceReadError(str(path), exc.strerror or str(exc)) from exc

    with handle:
        try:
            yield from handle
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(str(path), str(exc)) from exc


def iter_mapping_lines(values: Mapping[str, object]) -> Iterator[str]:
    """Yield ``KEY=VALUE`` entries for a mapping, values via ``str()``."""
    for key, value in list(values.items()):
        yield f"{key}={value}"


def iter_environ_lines(environ: Optional[Mapping[str, str]] = None) -> Iterator[str]:
    """Yield ``KEY=VALUE`` entries for the environment (default: os.environ)."""
    return iter_mapping_lines(os.environ if environ is None else environ)


__all__ = [
    "iter_environ_lines",
    "iter_file_lines",
    "iter_mapping_lines",
    "parse_line",
    "read_source",
]
