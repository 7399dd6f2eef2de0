from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional

from ..data.graph_loader import Neo4jGraphLoader
from ..deadline import Deadline, ensure_deadline
from ..models.data_models import UrlSearch
from .aggregation import merge_counts

logger = logging.getLogger(__name__)


def add_num_likes_to_search_results(
    url_search: UrlSearch,
    user: str,
    graph: Neo4jGraphLoader,
    deadline: Optional[Deadline] = None,
) -> UrlSearch:
    """
    검색 결과에 사용자 좋아요 수(num_likes_user)와 전체 좋아요 수(num_likes_total)를 채운
    새 UrlSearch 를 반환.

    두 카운터 조회는 서로 독립이라 동시에 실행한다.
    하나라도 실패하면 deadline 을 취소하고 예외를 그대로 올린다 (부분 결과 없음).
    """
    if not url_search.has_hits:
        return url_search

    deadline = ensure_deadline(deadline)
    urls = url_search.urls()

    with ThreadPoolExecutor(max_workers=2) as executor:
        user_future = executor.submit(graph.get_user_num_likes, urls, user, deadline)
        total_future = executor.submit(graph.get_total_num_likes, urls, deadline)
        try:
            user_likes = user_future.result()
            total_likes = total_future.result()
        except Exception:
            deadline.cancel()
            logger.error(f"[Enrich] Like counter lookup failed for user={user}")
            raise

    hits = merge_counts(url_search.hits, user_likes, "num_likes_user")
    hits = merge_counts(hits, total_likes, "num_likes_total")
    logger.info(
        f"[Enrich] user={user} hits={len(hits)} "
        f"user_likes={len(user_likes)} total_likes={len(total_likes)}"
    )
    return replace(url_search, hits=hits)
