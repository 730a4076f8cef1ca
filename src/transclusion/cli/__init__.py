"""
Command-line interface.

Provides the ``transclusion`` command with auto-discovery of commands from
subfolders (commands/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Engine setup from configuration and flags
"""
from ._output import (
    OutputFormatter,
    format_transclusion_error,
    print_success,
    transclusion_error_dicts,
)
from ._args import (
    add_dry_run_flag,
    add_engine_flags,
    add_input_arg,
    add_json_flag,
    add_log_level_flag,
    add_repo_root_flag,
    add_standard_flags,
)
from ._utils import (
    EngineSetup,
    build_engine,
    get_input_path,
    get_repo_root,
    iter_stdin_chunks,
    parse_assignments,
    read_stdin,
    setup_logging,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_transclusion_error",
    "print_success",
    "transclusion_error_dicts",
    # Argument helpers
    "add_dry_run_flag",
    "add_engine_flags",
    "add_input_arg",
    "add_json_flag",
    "add_log_level_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    # Utilities
    "EngineSetup",
    "build_engine",
    "get_input_path",
    "get_repo_root",
    "iter_stdin_chunks",
    "parse_assignments",
    "read_stdin",
    "setup_logging",
]
