"""
Build dispatcher: project classification (+ optional target) -> build plan.

A BuildPlan is inert data: an ordered list of argv invocations with the
step-specific environment each one needs. Running it is the job of
crossenv.build.executor.

Usage:
    from crossenv.project import Dispatcher, ProjectClassification

    plan = Dispatcher().plan_for(ProjectClassification.GO_MODULES, "linux-arm64")
    for step in plan.steps:
        print(step.command_line())
    # CGO_ENABLED=0 GOOS=linux GOARCH=arm64 go build -ldflags '...' -o app-linux-arm64 .
"""

import logging
import shlex
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from crossenv.core.exceptions import UnsupportedClassificationError
from crossenv.project.detector import ProjectClassification, detect
from crossenv.project.ecosystems import (
    GO_ARM_VERSIONS,
    GO_TARGETS,
    ZIG_TARGETS,
    cargo_linker_variable,
    rust_target,
)
from crossenv.project.markers import ProjectMarkers
from crossenv.targets import TargetRegistry, get_registry

logger = logging.getLogger(__name__)

RUST_STATIC_FLAGS = "-C target-feature=+crt-static"
GO_STATIC_LDFLAGS = "-s -w -extldflags '-static'"
GO_STRIP_LDFLAGS = "-s -w"

# Classifications whose plans change with the target
TARGET_AWARE = frozenset(
    {
        ProjectClassification.RUST_CARGO,
        ProjectClassification.GO_MODULES,
        ProjectClassification.ZIG_BUILD,
        ProjectClassification.CMAKE,
        ProjectClassification.AUTOTOOLS_CONFIGURE,
        ProjectClassification.AUTOTOOLS_AUTORECONF,
    }
)


@dataclass(frozen=True)
class BuildStep:
    """
    One command of a build plan.

    Attributes:
        argv: Command and arguments
        env: Variables set for this step only (on top of the resolved environment)
        description: Short label for logs
        check: Whether a non-zero exit status fails the plan
    """

    argv: Tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)
    description: str = ""
    check: bool = True

    def __post_init__(self):
        object.__setattr__(self, "argv", tuple(self.argv))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    def command_line(self) -> str:
        """Shell rendering with the step environment as assignments."""
        assignments = [f"{key}={shlex.quote(value)}" for key, value in self.env.items()]
        return " ".join(assignments + [shlex.join(self.argv)])


@dataclass(frozen=True)
class BuildPlan:
    """
    Ordered build steps for one project and (optional) target.

    classification is None for a plan that runs a caller-supplied command.
    """

    classification: Optional[ProjectClassification]
    steps: Tuple[BuildStep, ...]
    target_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))

    def __iter__(self):
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

@dataclass(frozen=True)
class PlanOptions:
    """
    Knobs for plan generation.

    Attributes:
        build_dir: Out-of-tree build directory (default 'build' or 'build-<target>')
        jobs: Parallel jobs for make/cmake/meson (None lets the tool decide)
        output_name: Base name of produced binaries (Go, Dart)
        static: Request static binaries
    """

    build_dir: Optional[str] = None
    jobs: Optional[int] = None
    output_name: str = "app"
    static: bool = True

    def build_dir_for(self, target_id: Optional[str]) -> str:
        if self.build_dir:
            return self.build_dir
        return f"build-{target_id}" if target_id else "build"


class Dispatcher:
    """Map project classifications to build plans."""

    def __init__(self, registry: Optional[TargetRegistry] = None):
        self.registry = registry or get_registry()
        self._planners: Dict[ProjectClassification, Callable[..., List[BuildStep]]] = {
            ProjectClassification.RUST_CARGO: self._plan_cargo,
            ProjectClassification.WASM_PACK_RUST: self._plan_wasm_pack,
            ProjectClassification.GO_MODULES: self._plan_go,
            ProjectClassification.ZIG_BUILD: self._plan_zig,
            ProjectClassification.CMAKE: self._plan_cmake,
            ProjectClassification.MESON: self._plan_meson,
            ProjectClassification.AUTOTOOLS_CONFIGURE: self._plan_configure,
            ProjectClassification.AUTOTOOLS_AUTORECONF: self._plan_autoreconf,
            ProjectClassification.PLAIN_MAKEFILE: self._plan_make,
            ProjectClassification.GRADLE_ANDROID: self._plan_gradle_android,
            ProjectClassification.GRADLE_KOTLIN: self._plan_gradle,
            ProjectClassification.MAVEN_JAVA: self._plan_maven,
            ProjectClassification.DART_PUB: self._plan_dart,
        }

    def plan_for(
        self,
        classification: ProjectClassification,
        target_id: Optional[str] = None,
        options: Optional[PlanOptions] = None,
        markers: Optional[ProjectMarkers] = None,
    ) -> BuildPlan:
        """
        Build the plan for a classified project.

        Args:
            classification: Detected project classification
            target_id: Target to cross-compile for (None builds for the host)
            options: Plan options
            markers: Marker set, used to prefer wrapper scripts such as gradlew

        Returns:
            BuildPlan

        Raises:
            UnsupportedClassificationError: For UNCLASSIFIED projects
            UnknownTargetError: If target_id is not registered
            UnmappedEcosystemTargetError: If Rust/Go/Zig cannot build for the target
        """
        options = options or PlanOptions()
        planner = self._planners.get(classification)
        if planner is None:
            raise UnsupportedClassificationError(
                classification, "no build system markers found"
            )

        profile = self.registry.lookup(target_id) if target_id is not None else None
        if profile is not None and classification not in TARGET_AWARE:
            logger.debug(
                f"{classification} builds cannot cross-compile; "
                f"target {target_id} only affects the environment"
            )

        steps = planner(profile, options, markers)
        logger.debug(
            f"Plan for {classification} ({target_id or 'host'}): "
            f"{[step.argv for step in steps]}"
        )
        return BuildPlan(classification=classification, steps=steps, target_id=target_id)

    def plan_for_markers(
        self,
        markers: ProjectMarkers,
        target_id: Optional[str] = None,
        options: Optional[PlanOptions] = None,
    ) -> BuildPlan:
        """Detect the project type and plan its build."""
        return self.plan_for(detect(markers), target_id, options, markers)

    def plan_command(
        self, argv: Sequence[str], target_id: Optional[str] = None
    ) -> BuildPlan:
        """
        Plan a single caller-supplied command, such as ``make clean all``.

        Raises:
            ValueError: If argv is empty
            UnknownTargetError: If target_id is not registered
        """
        if not argv:
            raise ValueError("No command given")
        if target_id is not None:
            self.registry.lookup(target_id)
        step = BuildStep(tuple(argv), description=argv[0])
        return BuildPlan(classification=None, steps=(step,), target_id=target_id)

    # ------------------------------------------------------------------
    # Language toolchains with their own target naming
    # ------------------------------------------------------------------

    def _plan_cargo(self, profile, options, markers) -> List[BuildStep]:
        argv = ["cargo", "build", "--release"]
        env = {}
        steps = []

        if options.static and (profile is None or profile.supports_static):
            env["RUSTFLAGS"] = RUST_STATIC_FLAGS

        if profile is not None:
            triple, linker = rust_target(profile.target_id)
            argv += ["--target", triple]
            if linker:
                env[cargo_linker_variable(triple)] = linker
            steps.append(
                BuildStep(
                    ("rustup", "target", "add", triple),
                    description=f"install Rust target {triple}",
                    check=False,
                )
            )

        steps.append(BuildStep(tuple(argv), env, description="cargo build"))
        return steps

    def _plan_wasm_pack(self, profile, options, markers) -> List[BuildStep]:
        return [
            BuildStep(
                ("wasm-pack", "build", "--release", "--target", "web"),
                description="wasm-pack build",
            )
        ]

    def _plan_go(self, profile, options, markers) -> List[BuildStep]:
        env = {"CGO_ENABLED": "0"}
        output = options.output_name

        if profile is not None:
            platform = GO_TARGETS.translate(profile.target_id)
            env.update(platform.environment())
            if profile.target_id in GO_ARM_VERSIONS:
                env["GOARM"] = GO_ARM_VERSIONS[profile.target_id]
            output = f"{output}-{profile.target_id}{profile.executable_suffix()}"

        ldflags = GO_STATIC_LDFLAGS if options.static else GO_STRIP_LDFLAGS
        return [
            BuildStep(
                ("go", "build", "-ldflags", ldflags, "-o", output, "."),
                env,
                description="go build",
            )
        ]

    def _plan_zig(self, profile, options, markers) -> List[BuildStep]:
        argv = ["zig", "build", "-Doptimize=ReleaseFast"]
        if profile is not None:
            argv.append(f"-Dtarget={ZIG_TARGETS.translate(profile.target_id)}")
        return [BuildStep(tuple(argv), description="zig build")]

    # ------------------------------------------------------------------
    # C/C++ build systems (cross-compile through the resolved environment)
    # ------------------------------------------------------------------

    def _plan_cmake(self, profile, options, markers) -> List[BuildStep]:
        build_dir = options.build_dir_for(profile.target_id if profile else None)
        configure = [
            "cmake",
            "-S",
            ".",
            "-B",
            build_dir,
            "-DCMAKE_BUILD_TYPE=Release",
            "-DBUILD_SHARED_LIBS=OFF",
        ]
        if profile is not None:
            for key, value in profile.cmake_variables(static=options.static).items():
                configure.append(f"-D{key}={value}")

        build = ["cmake", "--build", build_dir, "--parallel"]
        if options.jobs:
            build.append(str(options.jobs))

        return [
            BuildStep(tuple(configure), description="cmake configure"),
            BuildStep(tuple(build), description="cmake build"),
        ]

    def _plan_meson(self, profile, options, markers) -> List[BuildStep]:
        build_dir = options.build_dir_for(profile.target_id if profile else None)
        setup = [
            "meson",
            "setup",
            build_dir,
            "--buildtype=release",
            "--default-library=static",
        ]
        if options.static and profile is not None and profile.supports_static:
            setup.append("-Dprefer_static=true")

        compile_cmd = ["meson", "compile", "-C", build_dir]
        if options.jobs:
            compile_cmd += ["-j", str(options.jobs)]

        return [
            BuildStep(tuple(setup), description="meson setup"),
            BuildStep(tuple(compile_cmd), description="meson compile"),
        ]

    def _plan_configure(self, profile, options, markers) -> List[BuildStep]:
        configure = ["./configure", "--enable-static", "--disable-shared"]
        if profile is not None and profile.triple:
            configure.append(f"--host={profile.triple}")
        return [BuildStep(tuple(configure), description="configure")] + self._make_steps(
            options
        )

    def _plan_autoreconf(self, profile, options, markers) -> List[BuildStep]:
        return [
            BuildStep(("autoreconf", "-fi"), description="autoreconf")
        ] + self._plan_configure(profile, options, markers)

    def _plan_make(self, profile, options, markers) -> List[BuildStep]:
        return self._make_steps(options)

    def _make_steps(self, options: PlanOptions) -> List[BuildStep]:
        argv = ["make"]
        if options.jobs:
            argv.append(f"-j{options.jobs}")
        return [BuildStep(tuple(argv), description="make")]

    # ------------------------------------------------------------------
    # JVM and Dart (host builds only)
    # ------------------------------------------------------------------

    @staticmethod
    def _gradle(markers: Optional[ProjectMarkers]) -> str:
        return "./gradlew" if markers is not None and "gradlew" in markers else "gradle"

    def _plan_gradle_android(self, profile, options, markers) -> List[BuildStep]:
        return [
            BuildStep(
                (self._gradle(markers), "assembleRelease"), description="gradle assemble"
            )
        ]

    def _plan_gradle(self, profile, options, markers) -> List[BuildStep]:
        return [BuildStep((self._gradle(markers), "build"), description="gradle build")]

    def _plan_maven(self, profile, options, markers) -> List[BuildStep]:
        return [BuildStep(("mvn", "-B", "package"), description="maven package")]

    def _plan_dart(self, profile, options, markers) -> List[BuildStep]:
        build_dir = options.build_dir_for(None)
        return [
            BuildStep(("dart", "pub", "get"), description="dart pub get"),
            BuildStep(
                (
                    "dart",
                    "compile",
                    "exe",
                    "bin/main.dart",
                    "-o",
                    f"{build_dir}/{options.output_name}",
                ),
                description="dart compile",
            ),
        ]

