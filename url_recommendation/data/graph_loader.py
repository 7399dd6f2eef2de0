from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from neo4j import Driver, GraphDatabase, Query, Record, basic_auth
from neo4j.exceptions import DriverError, Neo4jError

from ..config import NEO4J_DATABASE, NEO4J_HOST, NEO4J_PASS, NEO4J_USER, NETWORK_LIMIT
from ..deadline import Deadline, ensure_deadline
from ..errors import QueryError, QueryTimeout
from ..models.data_models import NumLikesRow, Relation, Url

logger = logging.getLogger(__name__)


# -----------------------------------------
#  Cypher 템플릿
#  (relation 이름은 Relation enum 검증 이후에만 끼워 넣음, 값은 전부 파라미터)
# -----------------------------------------
_URLS_BY_RELATION_CQL = """
MATCH (u:User {{address: $user}})-[:{relation}]->(n:Url)
RETURN DISTINCT n
"""

_URLS_BY_NETWORK_CQL = """
MATCH (u:User {address: $user})-[]-(:Url)-[]-(:User)-[]-(n:Url)
RETURN DISTINCT n
ORDER BY coalesce(n.numLikes, 0) DESC
LIMIT $limit
"""

_USER_NUM_LIKES_CQL = """
MATCH (u:User {address: $user})-[r:LIKES]->(n:Url)
WHERE n.url IN $urls
RETURN n.url AS url, r.numLikes AS numLikes
"""

_TOTAL_NUM_LIKES_CQL = """
MATCH (n:Url)
WHERE n.url IN $urls
RETURN n.url AS url, n.numLikes AS numLikes
"""


class Neo4jGraphLoader:
    """
    Neo4j 기반 User / Url 그래프 조회 클래스

    - 쿼리 1회마다 세션을 열고, 성공 / 빈 결과 / 에러 모든 경우에 세션을 닫는다.
    - 드라이버 예외는 QueryError 로 감싸서 올린다 (재시도 없음).
    """

    def __init__(self, driver: Optional[Driver] = None, database: Optional[str] = NEO4J_DATABASE):
        if driver is None:
            driver = GraphDatabase.driver(NEO4J_HOST, auth=basic_auth(NEO4J_USER, NEO4J_PASS))
        self.driver = driver
        self.database = database

    # ------------------------------------------------------
    # 기본 조회
    # ------------------------------------------------------
    def fetch_records(
        self,
        cql: str,
        params: Optional[Mapping[str, Any]] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[Record]:
        timeout = ensure_deadline(deadline).call_timeout()
        try:
            with self.driver.session(database=self.database) as session:
                result = session.run(Query(cql, timeout=timeout), dict(params or {}))
                return list(result)
        except Neo4jError as e:
            code = getattr(e, "code", None) or ""
            logger.error(f"[Graph] Query failed ({code}): {e}")
            if "TimedOut" in code:
                raise QueryTimeout(f"Neo4j query timed out: {e}") from e
            raise QueryError(f"Neo4j query failed: {e}") from e
        except DriverError as e:
            logger.error(f"[Graph] Driver error: {e}")
            raise QueryError(f"Neo4j driver error: {e}") from e

    def fetch_properties(
        self,
        cql: str,
        params: Optional[Mapping[str, Any]] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[Dict[str, Any]]:
        rows = self.fetch_records(cql, params, deadline)
        # 각 행의 첫 번째 필드(노드)의 property map
        return [dict(row[0].items()) for row in rows]

    def fetch_as_urls(
        self,
        cql: str,
        params: Optional[Mapping[str, Any]] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[Url]:
        return [Url.from_properties(p) for p in self.fetch_properties(cql, params, deadline)]

    # ------------------------------------------------------
    # USER -> URL 관계 조회
    # ------------------------------------------------------
    def list_urls_by_relation(
        self,
        user: str,
        relation: Any,
        deadline: Optional[Deadline] = None,
    ) -> List[Url]:
        relation = Relation.parse(relation)
        cql = _URLS_BY_RELATION_CQL.format(relation=relation.value)
        urls = self.fetch_as_urls(cql, {"user": user}, deadline)
        logger.info(f"[Graph] {relation.value}: user={user} -> {len(urls)} urls")
        return urls

    def list_urls_by_liker(self, user: str, deadline: Optional[Deadline] = None) -> List[Url]:
        return self.list_urls_by_relation(user, Relation.LIKES, deadline)

    def list_urls_by_owner(self, user: str, deadline: Optional[Deadline] = None) -> List[Url]:
        return self.list_urls_by_relation(user, Relation.OWNS, deadline)

    def list_urls_by_network(
        self,
        user: str,
        deadline: Optional[Deadline] = None,
        limit: int = NETWORK_LIMIT,
    ) -> List[Url]:
        """
        user - url1 - other_user - url2 (방향 / 타입 무관) 2-hop 탐색.
        numLikes 내림차순 상위 limit 개.
        """
        return self.fetch_as_urls(_URLS_BY_NETWORK_CQL, {"user": user, "limit": limit}, deadline)

    # ------------------------------------------------------
    # numLikes 카운터
    # ------------------------------------------------------
    def _fetch_counters(
        self,
        cql: str,
        params: Dict[str, Any],
        deadline: Optional[Deadline],
    ) -> Dict[str, int]:
        rows = [NumLikesRow.from_record(r) for r in self.fetch_records(cql, params, deadline)]
        return {row.url: row.num_likes for row in rows}

    def get_user_num_likes(
        self,
        urls: Iterable[str],
        user: str,
        deadline: Optional[Deadline] = None,
    ) -> Dict[str, int]:
        urls = list(urls)
        if not urls:
            return {}
        return self._fetch_counters(_USER_NUM_LIKES_CQL, {"user": user, "urls": urls}, deadline)

    def get_total_num_likes(
        self,
        urls: Iterable[str],
        deadline: Optional[Deadline] = None,
    ) -> Dict[str, int]:
        urls = list(urls)
        if not urls:
            return {}
        return self._fetch_counters(_TOTAL_NUM_LIKES_CQL, {"urls": urls}, deadline)

    def dispose(self) -> None:
        self.driver.close()
