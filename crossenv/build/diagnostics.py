"""
Binary diagnostics: static-link check and size report.

Shells out to ``readelf`` and ``file``; nothing here parses binary formats.
Missing tools degrade the answer to "unknown" instead of failing.
"""

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

_NEEDED = re.compile(r"\(NEEDED\).*\[(?P<lib>[^\]]+)\]")
_INTERP = re.compile(r"Requesting program interpreter:\s*(?P<interp>[^\]]+)\]")


@dataclass
class StaticCheckResult:
    """
    Result of a static-link check.

    Attributes:
        path: Binary that was checked
        is_static: True/False, or None when it could not be determined
        needed: Shared libraries listed as NEEDED
        interpreter: ELF program interpreter, if any
        file_description: Output of `file -b`
    """

    path: Path
    is_static: Optional[bool]
    needed: List[str] = field(default_factory=list)
    interpreter: Optional[str] = None
    file_description: Optional[str] = None

    def summary(self) -> str:
        if self.is_static is True:
            return "static (no dynamic dependencies)"
        if self.is_static is False:
            deps = ", ".join(self.needed) or "dynamic interpreter"
            return f"dynamic ({deps})"
        return "unknown"


@dataclass
class SizeEntry:
    """Size of one file."""

    path: Path
    size: int

    @property
    def human_size(self) -> str:
        return format_size(self.size)


def _run_tool(argv: List[str]) -> Optional[subprocess.CompletedProcess]:
    try:
        return subprocess.run(argv, capture_output=True, text=True, timeout=30)
    except FileNotFoundError:
        logger.debug(f"{argv[0]} not found")
        return None
    except subprocess.TimeoutExpired:
        logger.warning(f"Timeout running {argv[0]}")
        return None


def check_static(path: Path) -> StaticCheckResult:
    """
    Check whether a binary is statically linked.

    ELF binaries are judged by `readelf` (NEEDED entries, program
    interpreter); other formats fall back to the `file` description.

    Args:
        path: Binary to inspect

    Returns:
        StaticCheckResult

    Raises:
        FileNotFoundError: If the binary does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Binary not found: {path}")

    result = StaticCheckResult(path=path, is_static=None)

    file_proc = _run_tool(["file", "-b", str(path)])
    if file_proc is not None and file_proc.returncode == 0:
        result.file_description = file_proc.stdout.strip()

    readelf = _run_tool(["readelf", "-d", "-l", str(path)])
    if readelf is not None and readelf.returncode == 0:
        result.needed = [m.group("lib") for m in _NEEDED.finditer(readelf.stdout)]
        interp = _INTERP.search(readelf.stdout)
        if interp:
            result.interpreter = interp.group("interp").strip()
        result.is_static = not result.needed and result.interpreter is None
    elif result.file_description:
        description = result.file_description.lower()
        if "statically linked" in description or "static-pie" in description:
            result.is_static = True
        elif "dynamically linked" in description:
            result.is_static = False

    logger.debug(f"Static check for {path}: {result.summary()}")
    return result


def size_report(paths: Iterable[Path]) -> List[SizeEntry]:
    """Sizes of existing files, in the given order; missing paths are skipped."""
    entries = []
    for path in paths:
        path = Path(path)
        if not path.is_file():
            logger.warning(f"Skipping missing file: {path}")
            continue
        entries.append(SizeEntry(path=path, size=path.stat().st_size))
    return entries


def format_size(size: int) -> str:
    """
    Format a byte count like `ls -lh`.

    Example:
        >>> format_size(1536)
        '1.5K'
    """
    value = float(size)
    for unit in ("", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            if not unit:
                return str(int(value))
            return f"{value:.1f}{unit}" if value < 10 else f"{value:.0f}{unit}"
        value /= 1024
    return str(size)
