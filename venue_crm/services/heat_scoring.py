import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence
from uuid import UUID

from venue_crm.core.constants import (
    FREQUENCY_WINDOW_DAYS,
    HOT_THRESHOLD,
    INTERACTION_WEIGHTS,
    WARM_THRESHOLD,
)
from venue_crm.core.exceptions import ContactNotFoundError
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.schemas.common import HeatLevel
from venue_crm.schemas.scoring import (
    HeatScoreCalculation,
    HeatScoreResult,
    ScoringConfig,
)

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86_400


def classify_heat(score: float) -> HeatLevel:
    """Map a heat score onto COLD / WARM / HOT using the fixed thresholds."""
    if score >= HOT_THRESHOLD:
        return HeatLevel.HOT
    if score >= WARM_THRESHOLD:
        return HeatLevel.WARM
    return HeatLevel.COLD


def interaction_weight(interaction_type: Any) -> int:
    """Base weight of an interaction type; unknown types weigh 0."""
    key = getattr(interaction_type, "value", interaction_type)
    return INTERACTION_WEIGHTS.get(key, 0)


def age_in_days(created_at: Optional[datetime], now: datetime) -> float:
    """Days between *created_at* and *now*.

    A missing timestamp counts as "now" and future timestamps are clamped
    to zero.  Naive datetimes are taken to be UTC.
    """
    if created_at is None:
        return 0.0
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return max(0.0, (now - created_at).total_seconds() / _SECONDS_PER_DAY)


def _round_half_up(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def simple_score(interactions: Iterable[Any]) -> float:
    """Sum of base weights."""
    return float(sum(interaction_weight(i.type) for i in interactions))


def advanced_score(
    interactions: Sequence[Any],
    config: ScoringConfig,
    now: Optional[datetime] = None,
) -> float:
    """Weighted score with time decay, recency boost and frequency boost.

    Decay and recency are applied to each interaction before summing;
    the frequency multiplier is applied once to the total.
    """
    if not interactions:
        return 0.0
    now = now or datetime.now(timezone.utc)

    total = 0.0
    recent_count = 0
    for interaction in interactions:
        age = age_in_days(getattr(interaction, "created_at", None), now)
        weight = float(interaction_weight(interaction.type))

        if config.time_decay_enabled:
            weight *= 0.5 ** (age / config.time_decay_half_life)

        if config.recency_boost_enabled and age <= config.recency_boost_window:
            weight *= config.recency_boost_multiplier

        if age <= FREQUENCY_WINDOW_DAYS:
            recent_count += 1
        total += weight

    if (
        config.frequency_boost_enabled
        and recent_count >= config.frequency_boost_threshold
    ):
        total *= config.frequency_boost_multiplier

    return _round_half_up(total)


def compute_heat_score(
    interactions: Sequence[Any],
    config: Optional[ScoringConfig] = None,
    now: Optional[datetime] = None,
) -> HeatScoreResult:
    """Score *interactions* and classify the result.

    Simple mode is used when *config* is ``None``; passing a
    :class:`ScoringConfig` switches to advanced mode.  Interactions only
    need ``type`` and ``created_at`` attributes.
    """
    if config is None:
        score = simple_score(interactions)
    else:
        score = advanced_score(interactions, config, now=now)
    return HeatScoreResult(score=score, heat_level=classify_heat(score))


class HeatScoringService:
    """Recalculate and persist a contact's lead heat.

    Automatic recalculation after an interaction is created or deleted
    always uses simple mode.  Advanced mode is only used when explicitly
    requested.
    """

    async def recalculate(
        self,
        contact_id: UUID,
        contact_repo: ContactRepository,
        interaction_repo: InteractionRepository,
        use_advanced_scoring: bool = False,
        config: Optional[ScoringConfig] = None,
        now: Optional[datetime] = None,
        commit: bool = False,
    ) -> HeatScoreCalculation:
        contact = await contact_repo.get_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(f"Contact {contact_id} not found")

        interactions = await interaction_repo.list_for_contact(contact_id)
        scoring_config = (config or ScoringConfig()) if use_advanced_scoring else None
        result = compute_heat_score(interactions, scoring_config, now=now)

        await contact_repo.patch(
            contact,
            lead_heat_score=result.score,
            lead_heat=result.heat_level.value,
            updated_at=datetime.now(timezone.utc),
        )
        if commit:
            await contact_repo.commit()
        logger.debug(
            "Contact %s heat recalculated: %.2f (%s)",
            contact_id,
            result.score,
            result.heat_level.value,
        )

        return HeatScoreCalculation(
            contact_id=contact_id,
            score=result.score,
            heat_level=result.heat_level,
            interaction_count=len(interactions),
            scoring_method="advanced" if use_advanced_scoring else "simple",
        )
