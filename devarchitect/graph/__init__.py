"""Import graph construction and queries."""

from .aliases import AliasTable, find_compiler_config, load_alias_table
from .builder import DependencyGraph, resolve_import
from .imports import extract_import_targets

__all__ = [
    "AliasTable",
    "DependencyGraph",
    "extract_import_targets",
    "find_compiler_config",
    "load_alias_table",
    "resolve_import",
]
