from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


# -----------------------------------------
#  환경변수 로드 (프로젝트 루트의 .env)
# -----------------------------------------
_CURRENT_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CURRENT_DIR.parent
_ENV_PATH = _PROJECT_ROOT / ".env"
load_dotenv(_ENV_PATH)

# -----------------------------------------
#  Neo4j (소셜 그래프)
# -----------------------------------------
NEO4J_HOST = os.getenv("NEO4J_HOST", "bolt://localhost:7687")
NEO4J_USER = os.getenv("NEO4J_USER", "neo4j")
NEO4J_PASS = os.getenv("NEO4J_PASS", "")
NEO4J_DATABASE = os.getenv("NEO4J_DATABASE") or None

# -----------------------------------------
#  Elasticsearch (페이지 문서 인덱스)
# -----------------------------------------
ES_HOST = os.getenv("ES_HOST", "http://localhost:9200")
ES_USER = os.getenv("ES_USER", "elastic")
ES_PASS = os.getenv("ES_PASS", "")
ES_INDEX = os.getenv("ES_INDEX", "url")

# -----------------------------------------
#  쿼리 제한 / 타임아웃
# -----------------------------------------
QUERY_TIMEOUT_SECONDS = float(os.getenv("QUERY_TIMEOUT_SECONDS", "10"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
SEARCH_SIZE = int(os.getenv("SEARCH_SIZE", "100"))
NETWORK_LIMIT = 100

# more_like_this 가 비교할 문서 필드
MLT_FIELDS = ["title", "description"]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
