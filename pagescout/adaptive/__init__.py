"""Page structure analysis."""

from pagescout.adaptive.structure_analyzer import (
    AnalysisConfig,
    StructureAnalyzer,
)

__all__ = [
    "AnalysisConfig",
    "StructureAnalyzer",
]
