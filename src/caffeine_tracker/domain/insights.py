"""Models for AI-generated wellness insights."""

from pydantic import BaseModel, ConfigDict, Field


class InsightScores(BaseModel):
    """Scores reported by the model, 0-100 by convention."""

    model_config = ConfigDict(populate_by_name=True)

    sleep_quality: int = Field(default=0, alias="sleepQuality")
    caffeine_balance: int = Field(default=0, alias="caffeineBalance")
    physical_activity: int = Field(default=0, alias="physicalActivity")
    overall: int = 0


class WeeklyAnalysis(BaseModel):
    """Structured weekly analysis returned by the insight model."""

    summary: str
    insights: list[str]
    recommendations: list[str]
    scores: InsightScores = Field(default_factory=InsightScores)
