from boulderlog.services.insights.config import InsightsConfig
from boulderlog.services.insights.insights_engine import InsightsEngine

__all__ = ["InsightsConfig", "InsightsEngine"]
