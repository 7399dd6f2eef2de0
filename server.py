"""
Url 추천 서버 - FastAPI 메인 파일.

소셜 그래프(Neo4j) + 유사 문서 검색(Elasticsearch) 기반 Url 추천 API를 제공합니다.
API 문서: /doc
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel

from url_recommendation.config import LOG_LEVEL
from url_recommendation.errors import InvalidArgument, QueryError, QueryTimeout
from url_recommendation.interface.api_interface import (
    get_liked_urls,
    get_owned_urls,
    get_user_recommendation,
    search_urls_for_user,
)
from url_recommendation.service.pipeline import dispose_loaders, get_graph_loader

# 로깅 설정
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

RECOMMENDATION_STATUS_HEADER = "X-Recommendation-Status"


# --- Schemas ---


class UrlResponse(BaseModel):
    """그래프의 Url 노드"""
    url: str
    numLikes: int = 0


class UrlMetadataResponse(BaseModel):
    """검색 결과의 Url 문서 1건"""
    id: str
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    updatedAt: Optional[str] = None
    score: float
    numLikesUser: int = 0
    numLikesTotal: int = 0


class UrlSearchResponse(BaseModel):
    """검색 / 추천 응답. numHits == 0 이면 maxScore, hits 없음"""
    took: int
    numHits: int
    totalHits: int = 0
    maxScore: Optional[float] = None
    hits: Optional[List[UrlMetadataResponse]] = None


# --- Helper Functions ---


def to_http_exception(e: Exception) -> HTTPException:
    """도메인 예외 → HTTP 상태 코드"""
    if isinstance(e, InvalidArgument):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, QueryTimeout):
        return HTTPException(status_code=504, detail=f"Upstream timeout: {e}")
    if isinstance(e, QueryError):
        return HTTPException(status_code=502, detail=f"Upstream query failed: {e}")
    return HTTPException(status_code=500, detail=str(e))


# --- Lifespan ---


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작 및 종료"""
    logger.info("[Startup] Url Recommendation Server starting...")

    try:
        # Neo4j 연결 확인 (실패해도 첫 요청에서 다시 시도)
        get_graph_loader().driver.verify_connectivity()
        logger.info("[Startup] Neo4j connection ready")
    except Exception as e:
        logger.warning(f"[Startup] Neo4j warmup failed (will retry on first request): {e}")

    yield

    logger.info("[Shutdown] Closing Neo4j driver and search session...")
    dispose_loaders()


app = FastAPI(
    title="Wika Network",
    description="Wika Network API to perform offchain queries",
    version="1.0.0",
    docs_url="/doc",
    lifespan=lifespan,
)


# --- API Endpoints ---


@app.get("/")
def root():
    """루트 엔드포인트"""
    return {
        "message": "Url Recommendation Server",
        "version": "1.0.0",
        "endpoints": [
            "/ping",
            "/user/{user}/liked_urls",
            "/user/{user}/owned_urls",
            "/user/{user}/search/{query}",
            "/user/{user}/recommend",
        ],
    }


@app.get("/ping")
def ping() -> str:
    """헬스 체크"""
    return "pong"


@app.get("/user/{user}/liked_urls", response_model=List[UrlResponse])
def list_liked_urls(user: str):
    """사용자가 좋아요(LIKES)한 url 목록"""
    try:
        return get_liked_urls(user)
    except Exception as e:
        logger.error(f"[API] liked_urls error: user={user}: {e}")
        raise to_http_exception(e) from e


@app.get("/user/{user}/owned_urls", response_model=List[UrlResponse])
def list_owned_urls(user: str):
    """사용자가 소유(OWNS)한 url 목록"""
    try:
        return get_owned_urls(user)
    except Exception as e:
        logger.error(f"[API] owned_urls error: user={user}: {e}")
        raise to_http_exception(e) from e


@app.get(
    "/user/{user}/search/{query}",
    response_model=UrlSearchResponse,
    response_model_exclude_none=True,
)
def search_urls(user: str, query: str):
    """
    키워드 검색 (Elasticsearch query_string).

    "(test) OR (wika)" 같은 OR 조합도 지원. 결과에 좋아요 수를 채워서 반환합니다.
    """
    try:
        logger.info(f"[API] Search: user={user}, query={query!r}")
        return search_urls_for_user(user, query)
    except Exception as e:
        logger.error(f"[API] Search error: {e}")
        raise to_http_exception(e) from e


@app.get(
    "/user/{user}/recommend",
    response_model=Optional[UrlSearchResponse],
    response_model_exclude_none=True,
)
def recommend(user: str, response: Response) -> Optional[Dict[str, Any]]:
    """
    네트워크 기반 추천.

    1. 사용자 네트워크(2-hop)에서 인기 url 최대 100개 탐색
    2. 해당 페이지들과 유사한 문서 검색 (more_like_this)
    3. 좋아요 수 보강

    추천할 것이 없으면 null 을 반환하고, 이유는 X-Recommendation-Status 헤더로 전달.
    """
    try:
        logger.info(f"[API] Recommendation: user={user}")
        rec = get_user_recommendation(user)
    except Exception as e:
        logger.error(f"[API] Recommendation error: {e}")
        raise to_http_exception(e) from e

    response.headers[RECOMMENDATION_STATUS_HEADER] = rec.status.value
    if rec.result is None:
        return None
    logger.info(f"[API] Returned {rec.result.num_hits} recommendations")
    return rec.result.to_frontend_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server:app", host="0.0.0.0", port=3000)
