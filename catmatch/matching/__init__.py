"""Matching Layer - Normalization, Keywords, Scoring and Taxonomy

This package holds the pure (I/O free) part of category resolution:
- normalize: Turkish-aware text normalization
- KeywordExtractor: tokens, translations, gender/product-type/brand classes
- Scorer: weighted relevance score and confidence bucket
- TaxonomyStore: category lookup, manual search and display tree
- CategoryMatcher: extraction + scoring for one marketplace profile
"""

from .keywords import KeywordExtractor, KeywordSet
from .matcher import CategoryMatcher
from .normalize import contains_term, normalize, tokenize
from .profile import MarketplaceProfile, ScoringWeights, build_profile, load_profile
from .result import Confidence, MatchResult, ScoreBreakdown
from .scorer import Scorer, classify_confidence
from .taxonomy import CategoryText, TaxonomyStore, build_tree

__all__ = [
    "normalize",
    "tokenize",
    "contains_term",
    "KeywordExtractor",
    "KeywordSet",
    "MarketplaceProfile",
    "ScoringWeights",
    "build_profile",
    "load_profile",
    "Confidence",
    "MatchResult",
    "ScoreBreakdown",
    "Scorer",
    "classify_confidence",
    "CategoryText",
    "TaxonomyStore",
    "build_tree",
    "CategoryMatcher",
]
