from .aggregation import merge_counts
from .enrichment import add_num_likes_to_search_results
from .pipeline import recommend_for_user

__all__ = ["merge_counts", "add_num_likes_to_search_results", "recommend_for_user"]
