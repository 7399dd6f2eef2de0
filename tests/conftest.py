from unittest.mock import MagicMock

import pytest

from url_recommendation.data.graph_loader import Neo4jGraphLoader
from url_recommendation.data.search_loader import ElasticSearchLoader
from url_recommendation.models.data_models import UrlMetadata, UrlSearch


@pytest.fixture
def mock_driver():
    """Creates a mock Neo4j driver."""
    return MagicMock()


@pytest.fixture
def mock_session(mock_driver):
    """The session yielded by `with driver.session() as session`."""
    return mock_driver.session.return_value.__enter__.return_value


@pytest.fixture
def graph(mock_driver):
    return Neo4jGraphLoader(driver=mock_driver, database=None)


@pytest.fixture
def mock_http():
    """Creates a mock requests.Session."""
    return MagicMock()


@pytest.fixture
def search(mock_http):
    return ElasticSearchLoader(
        host="http://es.local:9200/",
        user="elastic",
        password="secret",
        index="url",
        session=mock_http,
    )


@pytest.fixture
def sample_search():
    return UrlSearch(
        took=3,
        max_score=2.5,
        hits=[
            UrlMetadata(id="0b616d66133e1e57e216fa16ab5b6847", url="https://www.wika.network/", score=2.5),
            UrlMetadata(id="5ba534e2895f5119fc0bcab447a61104", url="https://www.test.com/", score=1.2),
        ],
        total_hits=2,
    )
