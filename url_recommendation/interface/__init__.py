from .api_interface import (
    get_liked_urls,
    get_owned_urls,
    get_urls_by_relation,
    get_user_recommendation,
    recommend_urls,
    search_urls_for_user,
)

__all__ = [
    "get_liked_urls",
    "get_owned_urls",
    "get_urls_by_relation",
    "get_user_recommendation",
    "recommend_urls",
    "search_urls_for_user",
]
