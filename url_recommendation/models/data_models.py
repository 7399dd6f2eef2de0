from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..errors import InvalidArgument, QueryError

logger = logging.getLogger(__name__)


class Relation(str, Enum):
    LIKES = "LIKES"
    OWNS = "OWNS"

    @classmethod
    def parse(cls, value: Any) -> "Relation":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgument("Relation must be LIKES or OWNS") from None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            # ES 는 "2022-01-01T00:00:00Z" 형태로 저장
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch_millis 포맷의 date 필드
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    logger.debug(f"[Model] Dropping unparseable updatedAt: {value!r}")
    return None


@dataclass
class Url:
    url: str
    num_likes: int = 0

    @classmethod
    def from_properties(cls, props: Mapping[str, Any]) -> "Url":
        url = props.get("url")
        if not isinstance(url, str):
            raise QueryError(f"Url node without 'url' property: {dict(props)}")
        return cls(url=url, num_likes=int(props.get("numLikes") or 0))

    def to_frontend_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "numLikes": self.num_likes}


@dataclass
class NumLikesRow:
    """getUserNumLikes / getTotalNumLikes 쿼리의 한 행"""
    url: str
    num_likes: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "NumLikesRow":
        url = record["url"]
        if not isinstance(url, str):
            raise QueryError(f"Counter row without url: {record}")
        return cls(url=url, num_likes=int(record["numLikes"] or 0))


@dataclass
class UrlMetadata:
    id: str
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    updated_at: Optional[datetime] = None
    score: float = 0.0
    # enrichment 단계에서만 채워짐
    num_likes_user: int = 0
    num_likes_total: int = 0

    @classmethod
    def from_hit(cls, hit: Mapping[str, Any]) -> "UrlMetadata":
        if not isinstance(hit, Mapping):
            raise QueryError(f"Malformed search hit: {hit}")
        source = hit.get("_source") or {}
        if "_id" not in hit or not isinstance(source, Mapping) or "url" not in source:
            raise QueryError(f"Malformed search hit: {hit}")
        return cls(
            id=str(hit["_id"]),
            url=source["url"],
            title=source.get("title"),
            description=source.get("description"),
            icon=source.get("icon"),
            updated_at=_parse_datetime(source.get("updatedAt")),
            score=float(hit.get("_score") or 0.0),
        )

    def to_frontend_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "score": self.score,
            "numLikesUser": self.num_likes_user,
            "numLikesTotal": self.num_likes_total,
        }


# merge_counts 가 쓸 수 있는 카운터 필드
COUNTER_FIELDS = frozenset(
    f.name for f in fields(UrlMetadata) if f.name.startswith("num_likes")
)


@dataclass
class UrlSearch:
    """
    검색 결과 1건.
    - num_hits == 0 이면 hits / max_score 는 None (빈 리스트가 아님)
    - num_hits == N 이면 len(hits) == N
    """
    took: int
    num_hits: int = 0
    max_score: Optional[float] = None
    hits: Optional[List[UrlMetadata]] = None
    total_hits: int = 0

    def __post_init__(self) -> None:
        if self.hits is not None and len(self.hits) == 0:
            self.hits = None
        if self.hits is None:
            self.num_hits = 0
            self.max_score = None
        else:
            self.num_hits = len(self.hits)

    @property
    def has_hits(self) -> bool:
        return self.hits is not None

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "UrlSearch":
        try:
            took = int(data["took"])
            hits_block = data["hits"]
            total = hits_block["total"]
            # ES 7+ 는 {"value": N, "relation": "eq"}, 그 이전은 정수
            total_hits = int(total["value"] if isinstance(total, Mapping) else total)
            raw_hits = hits_block.get("hits") or []
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise QueryError(f"Unexpected search response shape: {data}") from exc
        if not isinstance(raw_hits, list):
            raise QueryError(f"Unexpected search hits: {raw_hits}")
        if total_hits == 0 or not raw_hits:
            return cls(took=took, total_hits=total_hits)

        hits = [UrlMetadata.from_hit(h) for h in raw_hits]
        return cls(
            took=took,
            max_score=hits_block.get("max_score"),
            hits=hits,
            total_hits=total_hits,
        )

    def urls(self) -> List[str]:
        return [h.url for h in self.hits or []]

    def to_frontend_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "took": self.took,
            "numHits": self.num_hits,
            "totalHits": self.total_hits,
        }
        if self.has_hits:
            result["maxScore"] = self.max_score
            result["hits"] = [h.to_frontend_dict() for h in self.hits]
        return result


class RecommendationStatus(str, Enum):
    OK = "ok"
    NO_NETWORK = "no_network"
    NO_SIMILAR = "no_similar"


@dataclass
class Recommendation:
    status: RecommendationStatus
    result: Optional[UrlSearch] = None
    # 네트워크 탐색으로 찾은 url 수 (로그 / 디버깅용)
    network_size: int = 0
