"""Run configuration for the twoslash pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Final

from twoslashmap.engine.types import RewriteMode

SVELTE_SHIM_FILES: Final[tuple[str, ...]] = (
    "svelte-shims.d.ts",
    "svelte-jsx.d.ts",
    "svelte-native-jsx.d.ts",
)

RENDER_HELPER_NAME: Final[str] = "render"
"""Identifier of the rendering helper the rewriter synthesizes."""


@dataclass(frozen=True, slots=True)
class TwoslashOptions:
    """Knobs for one pipeline run."""

    reference_paths: tuple[str, ...] = SVELTE_SHIM_FILES
    rewrite_mode: RewriteMode = RewriteMode.TS
    is_ts_file: bool = False
    language: str = "js"
    default_compiler_options: Mapping[str, object] = field(
        default_factory=lambda: MappingProxyType({"checkJs": True})
    )
    excluded_targets: frozenset[str] = frozenset({RENDER_HELPER_NAME})

    def __post_init__(self):
        if not self.language:
            raise ValueError("TwoslashOptions.language cannot be empty")
        if any(not path for path in self.reference_paths):
            raise ValueError("TwoslashOptions.reference_paths cannot contain empty paths")

    @staticmethod
    def for_shims_dir(shims_dir: str) -> "TwoslashOptions":
        """Default options referencing the Svelte shim declarations under `shims_dir`."""
        return TwoslashOptions().with_shims_dir(shims_dir)

    def with_shims_dir(self, shims_dir: str) -> "TwoslashOptions":
        """Copy of these options whose reference paths point under `shims_dir`."""
        paths = tuple(str(PurePosixPath(shims_dir) / name) for name in SVELTE_SHIM_FILES)
        return replace(self, reference_paths=paths)

    def reference_header(self) -> str:
        """One triple-slash reference line per configured path."""
        return "".join(f'/// <reference path="{path}" />\n' for path in self.reference_paths)
