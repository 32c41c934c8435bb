"""
Info command implementation.

Shows the toolchain profile of one target.
"""

import shlex

from crossenv.cli.utils import load_effective_config


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    profile = load_effective_config(args).registry().lookup(args.target)

    details = {
        "Target": profile.target_id,
        "Family": profile.family.value,
        "Description": profile.description,
        "C compiler": shlex.join(profile.compiler_c),
        "C++ compiler": shlex.join(profile.compiler_cxx),
        "Archiver": profile.archiver,
        "Ranlib": profile.ranlib,
        "Strip": profile.strip_tool or "-",
        "Triple": profile.triple or "-",
        "Static linking": profile.static_link_support.value,
    }
    if profile.alias_of:
        details["Alias of"] = profile.alias_of
    if profile.sysroot_pkg_config_path:
        details["pkg-config path"] = ":".join(profile.sysroot_pkg_config_path)
    if profile.cmake_system_name:
        details["CMake system"] = (
            f"{profile.cmake_system_name} / {profile.cmake_system_processor}"
        )

    width = max(len(key) for key in details)
    for key, value in details.items():
        print(f"{key + ':':<{width + 1}} {value}")
    return 0
