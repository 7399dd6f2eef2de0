from __future__ import annotations

import logging
import threading
from typing import Optional

from ..data.graph_loader import Neo4jGraphLoader
from ..data.search_loader import ElasticSearchLoader, url_to_key
from ..deadline import Deadline, ensure_deadline
from ..models.data_models import Recommendation, RecommendationStatus
from .enrichment import add_num_likes_to_search_results

logger = logging.getLogger(__name__)

_graph: Neo4jGraphLoader | None = None
_search: ElasticSearchLoader | None = None
_lock = threading.Lock()


def get_graph_loader() -> Neo4jGraphLoader:
    global _graph
    with _lock:
        if _graph is None:
            _graph = Neo4jGraphLoader()
    return _graph


def get_search_loader() -> ElasticSearchLoader:
    global _search
    with _lock:
        if _search is None:
            _search = ElasticSearchLoader()
    return _search


def dispose_loaders() -> None:
    global _graph, _search
    with _lock:
        if _graph is not None:
            _graph.dispose()
            _graph = None
        if _search is not None:
            _search.close()
            _search = None


def recommend_for_user(
    user: str,
    graph: Optional[Neo4jGraphLoader] = None,
    search: Optional[ElasticSearchLoader] = None,
    deadline: Optional[Deadline] = None,
) -> Recommendation:
    """
    1) 사용자 네트워크(2-hop)에서 인기 url 최대 100개 탐색
    2) 각 url 의 MD5 key 로 more_like_this 유사 문서 검색
    3) 검색 결과에 좋아요 수 보강
    네트워크가 비었거나 유사 문서가 없으면 result=None (에러 아님)
    """
    graph = graph or get_graph_loader()
    search = search or get_search_loader()
    deadline = ensure_deadline(deadline)

    logger.info(f"[Pipeline] 🚀 Recommendation start: user={user}")

    # 1) 네트워크 탐색
    network = graph.list_urls_by_network(user, deadline)
    logger.info(f"[Pipeline] Step 1: network urls={len(network)}")
    if not network:
        logger.warning(f"[Pipeline] ⚠️ No network for user={user} → no recommendation")
        return Recommendation(status=RecommendationStatus.NO_NETWORK)

    # 2) 유사 문서 검색
    keys = [url_to_key(u.url) for u in network]
    similar = search.find_similar(keys, deadline)
    logger.info(f"[Pipeline] Step 2: similar hits={similar.num_hits}")
    if not similar.has_hits:
        logger.warning(f"[Pipeline] ⚠️ No similar documents for user={user} → no recommendation")
        return Recommendation(
            status=RecommendationStatus.NO_SIMILAR,
            network_size=len(network),
        )

    # 3) 좋아요 수 보강
    enriched = add_num_likes_to_search_results(similar, user, graph, deadline)

    for i, hit in enumerate(enriched.hits[:3]):
        logger.info(
            f"[Pipeline]   결과 {i+1}: {hit.url} | score={hit.score:.4f} "
            f"| likes_user={hit.num_likes_user} | likes_total={hit.num_likes_total}"
        )
    logger.info(f"[Pipeline] 🎯 Recommendation done: {enriched.num_hits} urls")

    return Recommendation(
        status=RecommendationStatus.OK,
        result=enriched,
        network_size=len(network),
    )
