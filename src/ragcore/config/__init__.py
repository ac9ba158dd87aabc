from .factory import ComponentFactory, Pipeline
from .models import ComponentConfig, PipelineConfig
from .settings import ProviderSettings, load_settings

__all__ = [
    "ComponentConfig",
    "ComponentFactory",
    "Pipeline",
    "PipelineConfig",
    "ProviderSettings",
    "load_settings",
]
