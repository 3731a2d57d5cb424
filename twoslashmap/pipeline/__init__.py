"""Component analysis pipeline: rewrite, analyze, remap."""

from twoslashmap.pipeline.entrypoints import remove_lines, run_fixture, run_twoslash
from twoslashmap.pipeline.options import RENDER_HELPER_NAME, SVELTE_SHIM_FILES, TwoslashOptions
from twoslashmap.pipeline.results import EngineInfo, MappedResult, TwoslashRunResult

__all__ = [
    "RENDER_HELPER_NAME",
    "SVELTE_SHIM_FILES",
    "EngineInfo",
    "MappedResult",
    "TwoslashOptions",
    "TwoslashRunResult",
    "remove_lines",
    "run_fixture",
    "run_twoslash",
]
