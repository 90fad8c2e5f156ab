"""End-to-end ROA generation pipeline."""

from .workflow import PipelineConfig, PipelineResult, ROAPipeline, run_pipeline

__all__ = ["PipelineConfig", "PipelineResult", "ROAPipeline", "run_pipeline"]
