from boulderlog.models.enums import (
    AttemptStatus,
    GradingSystem,
    HeightBand,
    StyleBucket,
)

__all__ = ["AttemptStatus", "GradingSystem", "HeightBand", "StyleBucket"]
