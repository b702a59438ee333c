"""Algorithm configuration module.

Examples:
    from compmoead.engine.config import MOEADConfig

    # Fluent builder
    cfg = MOEADConfig().decomposition("sld", H=12).neighborhood("by_weight", T=10) ... .fixed()

    # Quick defaults
    cfg = MOEADConfig.default()
"""

from .moead import MOEADConfig, MOEADConfigData

__all__ = ["MOEADConfig", "MOEADConfigData"]
