from unittest.mock import Mock, patch

import pytest

from url_recommendation.interface import api_interface
from url_recommendation.models.data_models import Recommendation, RecommendationStatus, Relation, Url

TEST_USER = "aaaaaaaaaaaaaaa"
TEST_URL1 = "https://www.wika.network/"
TEST_URL2 = "https://www.test.com/"


@pytest.fixture
def mock_graph():
    graph = Mock()
    graph.list_urls_by_relation.return_value = [Url(TEST_URL1, 20), Url(TEST_URL2, 1)]
    graph.get_user_num_likes.return_value = {TEST_URL2: 2}
    graph.get_total_num_likes.return_value = {TEST_URL2: 9}
    with patch.object(api_interface, "get_graph_loader", return_value=graph):
        yield graph


@pytest.fixture
def mock_search(sample_search):
    search = Mock()
    search.search_by_query.return_value = sample_search
    with patch.object(api_interface, "get_search_loader", return_value=search):
        yield search


def test_get_liked_urls(mock_graph):
    urls = api_interface.get_liked_urls(TEST_USER)

    assert urls == [{"url": TEST_URL1, "numLikes": 20}, {"url": TEST_URL2, "numLikes": 1}]
    assert mock_graph.list_urls_by_relation.call_args[0][:2] == (TEST_USER, Relation.LIKES)


def test_get_owned_urls(mock_graph):
    api_interface.get_owned_urls(TEST_USER)

    assert mock_graph.list_urls_by_relation.call_args[0][:2] == (TEST_USER, Relation.OWNS)


def test_search_is_enriched(mock_graph, mock_search):
    result = api_interface.search_urls_for_user(TEST_USER, "test")

    mock_search.search_by_query.assert_called_once()
    assert result["numHits"] == 2
    assert [(h["numLikesUser"], h["numLikesTotal"]) for h in result["hits"]] == [(0, 0), (2, 9)]


def test_recommend_urls_returns_none_without_result():
    rec = Recommendation(status=RecommendationStatus.NO_NETWORK)
    with patch.object(api_interface, "recommend_for_user", return_value=rec):
        assert api_interface.recommend_urls(TEST_USER) is None


def test_recommend_urls_serialises_result(sample_search):
    rec = Recommendation(status=RecommendationStatus.OK, result=sample_search)
    with patch.object(api_interface, "recommend_for_user", return_value=rec):
        result = api_interface.recommend_urls(TEST_USER)

    assert result["numHits"] == 2
