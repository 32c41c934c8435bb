"""
Project detection and build dispatch for crossenv.

Modules:
    markers: Read marker files from a project directory
    detector: Classify a project from its markers
    ecosystems: Rust/Go/Zig target translation tables
    dispatcher: Turn a classification into a build plan
"""

from .markers import ProjectMarkers, scan_markers
from .detector import (
    DETECTION_RULES,
    DetectionRule,
    ProjectClassification,
    detect,
    explain,
)
from .ecosystems import GO_TARGETS, RUST_TARGETS, ZIG_TARGETS, GoPlatform
from .dispatcher import BuildPlan, BuildStep, Dispatcher, PlanOptions

__all__ = [
    "ProjectMarkers",
    "scan_markers",
    "DETECTION_RULES",
    "DetectionRule",
    "ProjectClassification",
    "detect",
    "explain",
    "GO_TARGETS",
    "RUST_TARGETS",
    "ZIG_TARGETS",
    "GoPlatform",
    "BuildPlan",
    "BuildStep",
    "Dispatcher",
    "PlanOptions",
]
