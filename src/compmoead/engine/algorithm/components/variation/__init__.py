from .pipeline import REPAIR_STAGES, STAGE_PARAMS, VariationPipeline, build_stage, resolve_stage, resolve_stages

__all__ = ["REPAIR_STAGES", "STAGE_PARAMS", "VariationPipeline", "build_stage", "resolve_stage", "resolve_stages"]
