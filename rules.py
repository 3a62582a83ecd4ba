# rules.py
from typing import List, Optional, Tuple

from models import (
    IndustryMatch,
    Lead,
    Offer,
    RoleMatch,
    RuleBreakdown,
    RuleDetails,
    RuleScoreResult,
)

# --- Rule layer (max 50) ---
DECISION_MAKER_POINTS = 20
INFLUENCER_POINTS = 10
INDUSTRY_EXACT_POINTS = 20
INDUSTRY_ADJACENT_POINTS = 10
COMPLETENESS_POINTS = 10

# Order matters: decision-maker keywords win over influencer keywords.
DECISION_MAKER_KEYWORDS = [
    "ceo", "cto", "cfo", "coo", "chief", "president", "vp", "vice president",
    "director", "head", "founder", "owner", "partner", "principal",
]
INFLUENCER_KEYWORDS = [
    "manager", "lead", "senior", "sr", "specialist", "architect",
    "consultant", "advisor", "strategist", "coordinator",
]
ADJACENT_INDUSTRY_KEYWORDS = ["saas", "software", "technology", "tech", "b2b", "enterprise"]

REQUIRED_FIELDS = ["name", "role", "company", "industry", "location", "linkedin_bio"]


def score_role(role: Optional[str]) -> Tuple[int, RoleMatch]:
    if not role or not role.strip():
        return 0, RoleMatch.UNKNOWN

    role_lower = role.lower()
    if any(k in role_lower for k in DECISION_MAKER_KEYWORDS):
        return DECISION_MAKER_POINTS, RoleMatch.DECISION_MAKER
    if any(k in role_lower for k in INFLUENCER_KEYWORDS):
        return INFLUENCER_POINTS, RoleMatch.INFLUENCER
    return 0, RoleMatch.OTHER


def score_industry(industry: Optional[str], ideal_use_cases: List[str]) -> Tuple[int, IndustryMatch]:
    """Match the lead's industry against the offer's ideal use cases.

    An exact ICP match is containment in either direction. Failing that, an
    industry that names one of the adjacency keywords counts as adjacent.
    """
    industry = (industry or "").strip().lower()
    if not industry or not ideal_use_cases:
        return 0, IndustryMatch.NO_DATA

    for use_case in ideal_use_cases:
        use_case_lower = use_case.strip().lower()
        if use_case_lower and (use_case_lower in industry or industry in use_case_lower):
            return INDUSTRY_EXACT_POINTS, IndustryMatch.EXACT

    # only the lead side: "Manufacturing" vs ["B2B SaaS"] must stay a different industry
    if any(k in industry for k in ADJACENT_INDUSTRY_KEYWORDS):
        return INDUSTRY_ADJACENT_POINTS, IndustryMatch.ADJACENT
    return 0, IndustryMatch.DIFFERENT


def score_completeness(lead: Lead) -> Tuple[int, bool]:
    complete = all((getattr(lead, field, None) or "").strip() for field in REQUIRED_FIELDS)
    return (COMPLETENESS_POINTS if complete else 0), complete


def calculate_rule_score(lead: Lead, offer: Offer) -> RuleScoreResult:
    """Deterministic 0-50 score from role, industry fit and profile completeness."""
    role_points, role_match = score_role(lead.role)

    industry_points, industry_match = 0, IndustryMatch.NO_DATA
    if offer is not None and offer.ideal_use_cases:
        industry_points, industry_match = score_industry(lead.industry, offer.ideal_use_cases)

    completeness_points, complete = score_completeness(lead)

    breakdown = RuleBreakdown(
        role=role_points,
        industry=industry_points,
        completeness=completeness_points,
    )
    return RuleScoreResult(
        total=role_points + industry_points + completeness_points,
        breakdown=breakdown,
        details=RuleDetails(
            role_match=role_match,
            industry_match=industry_match,
            data_complete=complete,
        ),
    )
