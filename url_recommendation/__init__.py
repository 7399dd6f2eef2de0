# url_recommendation/__init__.py

"""
Url 추천 시스템 패키지 루트.

현재 단계:
- Neo4j 소셜 그래프(User -[LIKES|OWNS]-> Url)로 사용자 네트워크 탐색.
- Elasticsearch more_like_this 로 유사 페이지 검색.
- 그래프의 numLikes 카운터로 검색 결과 보강(enrichment).
"""
