from .config import Settings, load_settings
from .orchestrator import Orchestrator, PipelineResult, select_seeds

__all__ = ["Settings", "load_settings", "Orchestrator", "PipelineResult", "select_seeds"]
