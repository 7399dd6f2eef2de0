class InvalidArgument(ValueError):
    """원격 호출 전에 거부되는 잘못된 입력 (relation 이름, 빈 key 목록 등)."""


class QueryError(RuntimeError):
    """Neo4j / Elasticsearch 호출 실패 또는 예상과 다른 응답 형태."""


class QueryTimeout(QueryError):
    """deadline 초과, 취소, 또는 원격 타임아웃."""
