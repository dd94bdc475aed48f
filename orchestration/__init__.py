from .pipeline import TechnicalAnalysisPipeline, data_quality_score

__all__ = ["TechnicalAnalysisPipeline", "data_quality_score"]
