# Importing a site module registers its source
from .rte import RTE

__all__ = ["RTE"]
