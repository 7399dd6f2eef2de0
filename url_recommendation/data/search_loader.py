from __future__ import annotations

import base64
import hashlib
import logging
import threading
from typing import Any, Dict, Optional, Sequence

import requests

from ..config import ES_HOST, ES_INDEX, ES_PASS, ES_USER, MLT_FIELDS, SEARCH_SIZE
from ..deadline import Deadline, ensure_deadline
from ..errors import InvalidArgument, QueryError, QueryTimeout
from ..models.data_models import UrlSearch

logger = logging.getLogger(__name__)


def url_to_key(url: str) -> str:
    """Url 문자열 → ES 문서 _id (MD5 hex)"""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


class ElasticSearchLoader:
    """
    Elasticsearch url 인덱스 조회 클래스

    - 헤더(Content-Type, Basic 인증)는 생성 시 1회 구성
    - query_string 검색 / more_like_this 유사 문서 검색
    - requests.Session 은 스레드마다 1개 (enrichment 스레드풀과 공유하지 않음)
    """

    url_to_key = staticmethod(url_to_key)

    def __init__(
        self,
        host: str = ES_HOST,
        user: str = ES_USER,
        password: str = ES_PASS,
        index: str = ES_INDEX,
        session: Optional[requests.Session] = None,
    ):
        self.host = host.rstrip("/")
        self.index = index
        self._injected = session
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()
        token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
        self.headers = {
            "Authorization": f"Basic {token}",
            "Content-Type": "application/json",
        }

    @property
    def session(self) -> requests.Session:
        """주입된 세션이 있으면 그것을, 없으면 현재 스레드 전용 세션을 반환"""
        if self._injected is not None:
            return self._injected
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        if self._injected is not None:
            self._injected.close()
        # 닫힌 세션을 다시 쓰지 않도록 스레드 로컬도 비움
        self._local = threading.local()
        logger.info(f"[Search] Closed {len(sessions)} pooled session(s)")

    # ------------------------------------------------------
    # REST 호출
    # ------------------------------------------------------
    def call_api(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        deadline: Optional[Deadline] = None,
    ) -> Dict[str, Any]:
        """
        ES REST API 호출 후 JSON 응답을 dict 로 반환.
        path 예: "/url/_search"
        """
        timeout = ensure_deadline(deadline).call_timeout()
        try:
            response = self.session.request(
                method,
                self.host + path,
                headers=self.headers,
                json=body,
                timeout=timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            logger.error(f"[Search] {method} {path} timed out after {timeout:.1f}s")
            raise QueryTimeout(f"Elasticsearch request timed out: {e}") from e
        except requests.RequestException as e:
            # HTTPError 포함, JSON 파싱 실패(requests.JSONDecodeError)도 여기로
            logger.error(f"[Search] {method} {path} failed: {e}")
            raise QueryError(f"Elasticsearch request failed: {e}") from e

    def _search(self, query: Dict[str, Any], deadline: Optional[Deadline]) -> UrlSearch:
        body = {"size": SEARCH_SIZE, "query": query}
        data = self.call_api(f"/{self.index}/_search", "POST", body, deadline)
        if data.get("timed_out"):
            raise QueryTimeout("Elasticsearch search timed out")
        return UrlSearch.from_response(data)

    # ------------------------------------------------------
    # 검색
    # ------------------------------------------------------
    def search_by_query(self, query: str, deadline: Optional[Deadline] = None) -> UrlSearch:
        if not query or not query.strip():
            raise InvalidArgument("Search query must not be empty")
        result = self._search({"query_string": {"query": query}}, deadline)
        logger.info(f"[Search] query={query!r} -> {result.num_hits} hits ({result.took}ms)")
        return result

    def find_similar(
        self,
        document_keys: Sequence[str],
        deadline: Optional[Deadline] = None,
    ) -> UrlSearch:
        if not document_keys:
            raise InvalidArgument("At least one document key is required")
        query = {
            "more_like_this": {
                "fields": MLT_FIELDS,
                "like": [{"_index": self.index, "_id": key} for key in document_keys],
                "include": True,
                "min_term_freq": 1,
                "min_doc_freq": 1,
            }
        }
        result = self._search(query, deadline)
        logger.info(f"[Search] more_like_this keys={len(document_keys)} -> {result.num_hits} hits")
        return result
