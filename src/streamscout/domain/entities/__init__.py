from .outcome import StepOutcome, StepStatus
from .stream import (
    CatalogEntry,
    CatalogType,
    StreamContainer,
    StreamDescriptor,
    StreamQuality,
    StreamRequest,
)

__all__ = [
    "CatalogEntry",
    "CatalogType",
    "StepOutcome",
    "StepStatus",
    "StreamContainer",
    "StreamDescriptor",
    "StreamQuality",
    "StreamRequest",
]
