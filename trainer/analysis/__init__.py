"""Session analysis and its background worker."""

from trainer.analysis.compute import (
    AnalysisData,
    AnalysisMode,
    AnalysisParams,
    AnalysisRequest,
    AnalysisResult,
    AnalysisType,
    BetRecord,
    RuinMilestone,
    base_house_edge,
    compute_analysis,
    sample_variance,
)
from trainer.analysis.worker import AnalysisWorker, generate_request_id, run_analysis

__all__ = [
    "AnalysisData",
    "AnalysisMode",
    "AnalysisParams",
    "AnalysisRequest",
    "AnalysisResult",
    "AnalysisType",
    "BetRecord",
    "RuinMilestone",
    "base_house_edge",
    "compute_analysis",
    "sample_variance",
    "AnalysisWorker",
    "generate_request_id",
    "run_analysis",
]
