"""
View Models for the overlay
Strict mapping layer that converts Lounge API responses into the stable
PlayerRecord payload. The overlay should ONLY consume PlayerRecord, never the
raw upstream schema.
"""
import math
from typing import Dict, List, Optional

from app.schemas import MmrChange, PlayerRecord, UpstreamRecord
from app.utils.helpers import safe_lower, safe_strip

TABLE_REASON = "Table"

RANK_ICON_DIR = "/static/ranks"

# Lowercased Lounge tier name -> icon file
RANK_ICONS: Dict[str, str] = {
    "iron": f"{RANK_ICON_DIR}/iron.png",
    "bronze": f"{RANK_ICON_DIR}/bronze.png",
    "silver": f"{RANK_ICON_DIR}/silver.png",
    "gold": f"{RANK_ICON_DIR}/gold.png",
    "platinum": f"{RANK_ICON_DIR}/platinum.png",
    "sapphire": f"{RANK_ICON_DIR}/sapphire.png",
    "ruby": f"{RANK_ICON_DIR}/ruby.png",
    "diamond": f"{RANK_ICON_DIR}/diamond.png",
    "master": f"{RANK_ICON_DIR}/master.png",
    "grandmaster": f"{RANK_ICON_DIR}/grandmaster.png",
    "grand master": f"{RANK_ICON_DIR}/grandmaster.png",
}


def rank_icon_url(rank: Optional[str]) -> Optional[str]:
    """Static icon path for a rank tier, or None for unknown tiers."""
    return RANK_ICONS.get(safe_lower(safe_strip(rank)))


def table_changes(changes: List[MmrChange]) -> List[MmrChange]:
    """Table events only, keeping the upstream most-recent-first order."""
    return [change for change in changes if change.reason == TABLE_REASON]


def partner_average(tables: List[MmrChange]) -> Optional[float]:
    """
    Mean of every partner score across table events, to 2 decimals.

    Returns None when no table event carries partner scores (e.g. FFA only).
    """
    scores = [score for change in tables for score in change.partner_scores]
    if not scores:
        return None
    # Half rounds up, not to even
    return math.floor(sum(scores) / len(scores) * 100 + 0.5) / 100


def last_table_diff(tables: List[MmrChange]) -> Optional[int]:
    """MMR delta of the most recent table event."""
    if not tables:
        return None
    return tables[0].delta


def player_record_from_upstream(raw: UpstreamRecord) -> PlayerRecord:
    """
    Map a raw Lounge record to the stable payload.

    Pure function: unknown ranks and missing history degrade to None fields
    instead of failing the whole record.
    """
    tables = table_changes(raw.mmr_changes)

    return PlayerRecord(
        name=raw.name,
        country_code=raw.country_code,
        country_name=raw.country_name,
        mmr=raw.mmr,
        max_mmr=raw.max_mmr,
        overall_rank=raw.overall_rank,
        events_played=raw.events_played,
        win_rate=raw.win_rate,
        win_loss_last_ten=raw.win_loss_last_ten,
        gain_loss_last_ten=raw.gain_loss_last_ten,
        largest_gain=raw.largest_gain,
        average_score=raw.average_score,
        average_last_ten=raw.average_last_ten,
        rank=raw.rank,
        rank_icon_url=rank_icon_url(raw.rank),
        partner_avg=partner_average(tables),
        last_diff=last_table_diff(tables),
    )
