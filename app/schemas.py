"""
Pydantic schemas for the Lounge API payload and our response models
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ===== UPSTREAM (LOUNGE) SCHEMAS =====

class MmrChange(BaseModel):
    """One entry of a player's MMR history, most recent first upstream"""
    model_config = ConfigDict(populate_by_name=True)

    delta: Optional[int] = Field(default=None, alias="mmrDelta")
    reason: Optional[str] = None
    partner_scores: List[int] = Field(default_factory=list, alias="partnerScores")

    @field_validator("partner_scores", mode="before")
    @classmethod
    def _null_scores_as_empty(cls, value):
        # Placement and penalty events send null
        return [] if value is None else value


class UpstreamRecord(BaseModel):
    """Raw player details as returned by /api/player/details"""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    country_code: Optional[str] = Field(default=None, alias="countryCode")
    country_name: Optional[str] = Field(default=None, alias="countryName")
    mmr: Optional[int] = None
    max_mmr: Optional[int] = Field(default=None, alias="maxMmr")
    overall_rank: Optional[int] = Field(default=None, alias="overallRank")
    events_played: Optional[int] = Field(default=None, alias="eventsPlayed")
    win_rate: Optional[float] = Field(default=None, alias="winRate")
    win_loss_last_ten: Optional[str] = Field(default=None, alias="winLossLastTen")
    gain_loss_last_ten: Optional[int] = Field(default=None, alias="gainLossLastTen")
    largest_gain: Optional[int] = Field(default=None, alias="largestGain")
    average_score: Optional[float] = Field(default=None, alias="averageScore")
    average_last_ten: Optional[float] = Field(default=None, alias="averageLastTen")
    rank: Optional[str] = None
    mmr_changes: List[MmrChange] = Field(default_factory=list, alias="mmrChanges")

    @field_validator("mmr_changes", mode="before")
    @classmethod
    def _null_history_as_empty(cls, value):
        return [] if value is None else value


# ===== RESPONSE SCHEMAS =====

class PlayerRecord(BaseModel):
    """Player details served to the overlay. None fields are omitted on output."""
    model_config = ConfigDict(frozen=True)

    name: str
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    mmr: Optional[int] = None
    max_mmr: Optional[int] = None
    overall_rank: Optional[int] = None
    events_played: Optional[int] = None
    win_rate: Optional[float] = None
    win_loss_last_ten: Optional[str] = None
    gain_loss_last_ten: Optional[int] = None
    largest_gain: Optional[int] = None
    average_score: Optional[float] = None
    average_last_ten: Optional[float] = None
    rank: Optional[str] = None

    # Derived
    rank_icon_url: Optional[str] = None
    partner_avg: Optional[float] = None
    last_diff: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization, dropping empty fields."""
        return self.model_dump(exclude_none=True)


class ErrorResponse(BaseModel):
    """Error body shared by every failing route"""
    error: str
