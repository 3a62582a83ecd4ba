# scoring.py
import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from ai import IntentClassifier
from exceptions import ValidationError
from models import (
    AIClassification,
    IndustryMatch,
    Intent,
    Lead,
    Offer,
    RoleMatch,
    RuleScoreResult,
    ScoredLead,
    ScoringDebug,
)
from rules import calculate_rule_score

logger = logging.getLogger(__name__)

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40

FALLBACK_SCORE = 40
FALLBACK_REASONING = "Error during scoring, assigned default medium intent"


def determine_intent(score: int, high_threshold: int = HIGH_THRESHOLD, medium_threshold: int = MEDIUM_THRESHOLD) -> Intent:
    if score >= high_threshold:
        return Intent.HIGH
    if score >= medium_threshold:
        return Intent.MEDIUM
    return Intent.LOW


def build_reasoning(rule_result: RuleScoreResult, ai_result: AIClassification, lead: Lead) -> str:
    details = rule_result.details
    parts = []
    if details.role_match not in (RoleMatch.OTHER, RoleMatch.UNKNOWN):
        parts.append(f"{details.role_match.value} role")
    if details.industry_match != IndustryMatch.NO_DATA:
        parts.append(details.industry_match.value.lower())
    if details.data_complete:
        parts.append("complete profile")
    if ai_result.reasoning:
        parts.append(ai_result.reasoning)

    if not parts:
        return f"Standard fit assessment for {lead.role} at {lead.company}"
    return ", ".join(parts)


def _lead_fields(lead: Lead) -> dict:
    return lead.model_dump(include=set(Lead.model_fields))


def merge_scores(
    lead: Lead,
    rule_result: RuleScoreResult,
    ai_result: AIClassification,
    high_threshold: int = HIGH_THRESHOLD,
    medium_threshold: int = MEDIUM_THRESHOLD,
) -> ScoredLead:
    """Combine rule and AI points. The label comes from the total, not the AI's own label."""
    total = rule_result.total + ai_result.score
    return ScoredLead(
        **_lead_fields(lead),
        intent=determine_intent(total, high_threshold, medium_threshold),
        score=total,
        reasoning=build_reasoning(rule_result, ai_result, lead),
        debug=ScoringDebug(
            rule_score=rule_result.total,
            ai_score=ai_result.score,
            rule_breakdown=rule_result.breakdown,
            rule_details=rule_result.details,
            ai_intent=ai_result.intent,
            ai_reasoning=ai_result.reasoning,
            ai_raw=ai_result.raw,
        ),
    )


def fallback_scored_lead(lead: Lead, error: Exception) -> ScoredLead:
    return ScoredLead(
        **_lead_fields(lead),
        intent=Intent.MEDIUM,
        score=FALLBACK_SCORE,
        reasoning=FALLBACK_REASONING,
        error=str(error) or error.__class__.__name__,
    )


# --- pacing between AI calls ---
class Pacer(Protocol):
    async def pause(self) -> None:
        ...


class FixedDelayPacer:
    def __init__(self, delay_seconds: float = 0.5):
        self.delay_seconds = delay_seconds

    async def pause(self) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)


# --- full pipeline ---
class ScoringPipeline:
    """Scores a batch of leads one at a time against a single offer."""

    def __init__(
        self,
        classifier: IntentClassifier,
        pacer: Optional[Pacer] = None,
        high_threshold: int = HIGH_THRESHOLD,
        medium_threshold: int = MEDIUM_THRESHOLD,
    ):
        self.classifier = classifier
        self.pacer = pacer or FixedDelayPacer()
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold

    async def score_lead(self, lead: Lead, offer: Offer) -> ScoredLead:
        rule_result = calculate_rule_score(lead, offer)
        ai_result = await self.classifier.classify(offer, lead)
        return merge_scores(lead, rule_result, ai_result, self.high_threshold, self.medium_threshold)

    async def score_leads(self, leads: Sequence[Lead], offer: Optional[Offer]) -> List[ScoredLead]:
        if not leads:
            raise ValidationError("No leads to score")
        if offer is None:
            raise ValidationError("Offer data is required for scoring")

        logger.info(f"Starting to score {len(leads)} leads...")
        results: List[ScoredLead] = []
        for i, lead in enumerate(leads):
            if i > 0:
                await self.pacer.pause()
            logger.debug(f"Scoring lead {i + 1}/{len(leads)}: {lead.name}")
            try:
                results.append(await self.score_lead(lead, offer))
            except Exception as e:
                logger.error(f"Error scoring lead {lead.name}: {e}")
                results.append(fallback_scored_lead(lead, e))

        logger.info(f"Scoring complete: {len(results)} leads")
        return results
