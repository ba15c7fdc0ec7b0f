"""Keyword-based topic tagging for headlines.

Rules are checked in declaration order and the first rule with any keyword
contained in the lower-cased headline wins. Matching is plain substring
containment with no tokenization, so short keywords can hit inside unrelated
words ("eps" in "steps", "ai" in "raises", which makes "Fed raises rates"
a TECH headline). That approximation is accepted.
"""

from dataclasses import dataclass

from finscrape.models import Category, CategoryTag


@dataclass(frozen=True)
class CategoryRule:
    keywords: tuple[str, ...]
    tag: CategoryTag
    tag_label: str


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        ("earnings", "revenue", "profit", "quarter", "eps", "beat", "miss"),
        CategoryTag.EARNINGS,
        "EARNINGS",
    ),
    CategoryRule(
        ("tech", "chip", "ai", "software", "cloud", "cyber"),
        CategoryTag.TECH,
        "TECH",
    ),
    CategoryRule(
        ("crypto", "bitcoin", "ethereum", "btc", "eth", "blockchain"),
        CategoryTag.CRYPTO,
        "CRYPTO",
    ),
    CategoryRule(
        ("fed", "rate", "treasury", "inflation", "cpi", "jobs", "employment"),
        CategoryTag.FED,
        "FED",
    ),
    CategoryRule(
        ("oil", "energy", "solar", "gas", "renewable", "opec"),
        CategoryTag.ENERGY,
        "ENERGY",
    ),
)

DEFAULT_CATEGORY = Category(tag=CategoryTag.MARKET, tag_label="MARKET")


def categorize(headline: str, rules: tuple[CategoryRule, ...] = CATEGORY_RULES) -> Category:
    """Map a headline to its topic tag."""
    lower = headline.lower()
    for rule in rules:
        if any(keyword in lower for keyword in rule.keywords):
            return Category(tag=rule.tag, tag_label=rule.tag_label)
    return DEFAULT_CATEGORY.model_copy()
