from rightdown.formatters.base import ExternalToolFormatter, ProcessOutput, run_tool
from rightdown.formatters.biome import BiomeFormatter
from rightdown.formatters.prettier import PrettierFormatter
from rightdown.formatters.registry import FormatterRegistry, default_registry

__all__ = [
    "BiomeFormatter",
    "ExternalToolFormatter",
    "FormatterRegistry",
    "PrettierFormatter",
    "ProcessOutput",
    "default_registry",
    "run_tool",
]
