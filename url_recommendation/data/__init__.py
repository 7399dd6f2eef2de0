from .graph_loader import Neo4jGraphLoader
from .search_loader import ElasticSearchLoader, url_to_key

__all__ = ["Neo4jGraphLoader", "ElasticSearchLoader", "url_to_key"]
