# profileextract/__init__.py

__version__ = "0.1.0"

from .errors import ProfileExtractError
from .pipeline import PipelineResult, ProfilePipeline
from .settings import Settings
from .shared import SourceKind

__all__ = [
    "__version__",
    "ProfileExtractError",
    "PipelineResult",
    "ProfilePipeline",
    "Settings",
    "SourceKind",
]
