from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..deadline import Deadline
from ..models.data_models import Recommendation, Relation
from ..service.enrichment import add_num_likes_to_search_results
from ..service.pipeline import get_graph_loader, get_search_loader, recommend_for_user

logger = logging.getLogger(__name__)


# ------------------------------------------------------
# 사용자가 좋아요 / 소유한 url 목록
# ------------------------------------------------------
def get_urls_by_relation(user: str, relation: Any) -> List[Dict[str, Any]]:
    urls = get_graph_loader().list_urls_by_relation(user, relation, Deadline())
    return [u.to_frontend_dict() for u in urls]


def get_liked_urls(user: str) -> List[Dict[str, Any]]:
    return get_urls_by_relation(user, Relation.LIKES)


def get_owned_urls(user: str) -> List[Dict[str, Any]]:
    return get_urls_by_relation(user, Relation.OWNS)


# ------------------------------------------------------
# 키워드 검색 + 좋아요 수 보강
# ------------------------------------------------------
def search_urls_for_user(user: str, query: str) -> Dict[str, Any]:
    deadline = Deadline()
    result = get_search_loader().search_by_query(query, deadline)
    result = add_num_likes_to_search_results(result, user, get_graph_loader(), deadline)
    return result.to_frontend_dict()


# ------------------------------------------------------
# 추천 API
# ------------------------------------------------------
def get_user_recommendation(user: str) -> Recommendation:
    """
    네트워크 기반 추천.
    status 로 "네트워크 없음" 과 "유사 문서 없음" 을 구분해서 돌려준다.
    """
    return recommend_for_user(user, deadline=Deadline())


def recommend_urls(user: str) -> Optional[Dict[str, Any]]:
    rec = get_user_recommendation(user)
    if rec.result is None:
        logger.info(f"[API] No recommendation for user={user} ({rec.status.value})")
        return None
    return rec.result.to_frontend_dict()
