from .data_models import (
    Recommendation,
    RecommendationStatus,
    Relation,
    Url,
    UrlMetadata,
    UrlSearch,
)

__all__ = [
    "Recommendation",
    "RecommendationStatus",
    "Relation",
    "Url",
    "UrlMetadata",
    "UrlSearch",
]
