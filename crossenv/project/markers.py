"""
Filesystem marker reader.

Collects the marker files present in a project directory so that detection
can stay a pure function. Only existence checks are made, plus reading the
few files whose content refines the classification (Cargo.toml for wasm-pack,
Gradle build files for the Android plugin).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

# Subdirectories whose files also count as markers (Android application module)
CONVENTIONAL_SUBDIRS = ("app",)

# Files whose content the detector inspects
CONTENT_MARKERS = (
    "Cargo.toml",
    "build.gradle",
    "build.gradle.kts",
    "app/build.gradle",
    "app/build.gradle.kts",
)

MAX_CONTENT_BYTES = 256 * 1024


@dataclass(frozen=True)
class ProjectMarkers:
    """
    Marker files found at a project root.

    Attributes:
        names: Root entry names; directories carry a trailing '/', files from
            conventional subdirectories appear as 'app/build.gradle'
        contents: Text of the content markers that exist
        root: Directory the markers were read from, if any
    """

    names: FrozenSet[str]
    contents: Mapping[str, str] = field(default_factory=dict)
    root: Optional[Path] = None

    @classmethod
    def from_names(
        cls, names: Iterable[str], contents: Optional[Mapping[str, str]] = None
    ) -> "ProjectMarkers":
        return cls(names=frozenset(names), contents=dict(contents or {}))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def has_any(self, *names: str) -> bool:
        return any(name in self.names for name in names)


def scan_markers(project_root: Path) -> ProjectMarkers:
    """
    Read the marker set of a project directory.

    Args:
        project_root: Project directory

    Returns:
        ProjectMarkers for the directory

    Raises:
        FileNotFoundError: If the directory does not exist
        NotADirectoryError: If the path is not a directory
    """
    project_root = Path(project_root)
    if not project_root.exists():
        raise FileNotFoundError(f"Project directory not found: {project_root}")
    if not project_root.is_dir():
        raise NotADirectoryError(f"Not a directory: {project_root}")

    names = set()
    for entry in project_root.iterdir():
        names.add(f"{entry.name}/" if entry.is_dir() else entry.name)

    for subdir in CONVENTIONAL_SUBDIRS:
        sub_path = project_root / subdir
        if sub_path.is_dir():
            for entry in sub_path.iterdir():
                if entry.is_file():
                    names.add(f"{subdir}/{entry.name}")

    contents = {}
    for name in CONTENT_MARKERS:
        if name in names:
            text = _read_marker(project_root / name)
            if text is not None:
                contents[name] = text

    logger.debug(f"Markers in {project_root}: {sorted(names)}")
    return ProjectMarkers(names=frozenset(names), contents=contents, root=project_root)


def _read_marker(path: Path) -> Optional[str]:
    """Read a marker file as text, capped at MAX_CONTENT_BYTES."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read(MAX_CONTENT_BYTES)
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        return None
