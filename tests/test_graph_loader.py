import pytest
from neo4j import Query, Record
from neo4j.exceptions import ServiceUnavailable

from url_recommendation.deadline import Deadline
from url_recommendation.errors import InvalidArgument, QueryError, QueryTimeout
from url_recommendation.models.data_models import Url

TEST_USER = "aaaaaaaaaaaaaaa"
TEST_URL1 = "https://www.wika.network/"
TEST_URL2 = "https://www.test.com/"


def url_record(url, num_likes):
    return Record({"n": {"url": url, "numLikes": num_likes}})


def counter_record(url, num_likes):
    return Record({"url": url, "numLikes": num_likes})


def last_query(mock_session):
    query, params = mock_session.run.call_args[0]
    return query, params


class TestFetch:

    def test_fetch_records_collects_rows_and_releases_session(self, graph, mock_driver, mock_session):
        mock_session.run.return_value = iter([url_record(TEST_URL1, 1)] * 5)

        rows = graph.fetch_records("MATCH (n) RETURN n LIMIT 5")

        assert len(rows) == 5
        mock_driver.session.return_value.__exit__.assert_called_once()

    def test_query_carries_timeout(self, graph, mock_session):
        mock_session.run.return_value = []

        graph.fetch_records("MATCH (n) RETURN n", {"x": 1}, Deadline(timeout=30, per_call_timeout=5))

        query, params = last_query(mock_session)
        assert isinstance(query, Query)
        assert query.text == "MATCH (n) RETURN n"
        assert 0 < query.timeout <= 5
        assert params == {"x": 1}

    def test_empty_result_releases_session(self, graph, mock_driver, mock_session):
        mock_session.run.return_value = []

        assert graph.fetch_properties("MATCH (n) RETURN n") == []
        mock_driver.session.return_value.__exit__.assert_called_once()

    def test_driver_error_becomes_query_error_and_releases_session(self, graph, mock_driver, mock_session):
        mock_session.run.side_effect = ServiceUnavailable("connection refused")

        with pytest.raises(QueryError, match="connection refused"):
            graph.fetch_records("MATCH (n) RETURN n")

        mock_driver.session.return_value.__exit__.assert_called_once()

    def test_expired_deadline_issues_no_query(self, graph, mock_driver):
        with pytest.raises(QueryTimeout):
            graph.fetch_records("MATCH (n) RETURN n", deadline=Deadline(timeout=0))

        mock_driver.session.assert_not_called()

    def test_fetch_properties_takes_first_field(self, graph, mock_session):
        mock_session.run.return_value = [url_record(TEST_URL1, 20), url_record(TEST_URL2, 3)]

        props = graph.fetch_properties("MATCH (n:Url) RETURN n")

        assert props == [{"url": TEST_URL1, "numLikes": 20}, {"url": TEST_URL2, "numLikes": 3}]

    def test_fetch_as_urls(self, graph, mock_session):
        mock_session.run.return_value = [url_record(TEST_URL1, 20)]

        urls = graph.fetch_as_urls("MATCH (n:Url) RETURN n")

        assert urls == [Url(TEST_URL1, 20)]


class TestRelations:

    def test_invalid_relation_issues_no_query(self, graph, mock_driver):
        with pytest.raises(InvalidArgument, match="Relation must be LIKES or OWNS"):
            graph.list_urls_by_relation(TEST_USER, "TEST")

        mock_driver.session.assert_not_called()

    def test_list_urls_by_liker(self, graph, mock_session):
        mock_session.run.return_value = [url_record(TEST_URL1, 20), url_record(TEST_URL2, 1)]

        urls = graph.list_urls_by_liker(TEST_USER)

        query, params = last_query(mock_session)
        assert len(urls) == 2
        assert "-[:LIKES]->(n:Url)" in query.text
        assert "RETURN DISTINCT n" in query.text
        assert params == {"user": TEST_USER}

    def test_list_urls_by_owner(self, graph, mock_session):
        mock_session.run.return_value = [url_record(TEST_URL1, 20)]

        urls = graph.list_urls_by_owner(TEST_USER)

        query, _ = last_query(mock_session)
        assert [u.url for u in urls] == [TEST_URL1]
        assert "-[:OWNS]->(n:Url)" in query.text

    def test_user_address_is_bound_not_spliced(self, graph, mock_session):
        mock_session.run.return_value = []
        user = "x'}) DETACH DELETE u //"

        graph.list_urls_by_relation(user, "LIKES")

        query, params = last_query(mock_session)
        assert user not in query.text
        assert params["user"] == user


class TestNetwork:

    def test_network_query_is_distinct_ordered_and_capped(self, graph, mock_session):
        mock_session.run.return_value = []

        graph.list_urls_by_network(TEST_USER)

        query, params = last_query(mock_session)
        assert "RETURN DISTINCT n" in query.text
        # Url nodes without numLikes rank as 0, not above popular ones
        assert "ORDER BY coalesce(n.numLikes, 0) DESC" in query.text
        assert "LIMIT $limit" in query.text
        assert params == {"user": TEST_USER, "limit": 100}

    def test_network_preserves_store_order(self, graph, mock_session):
        mock_session.run.return_value = [url_record(TEST_URL1, 20), url_record(TEST_URL2, 3)]

        urls = graph.list_urls_by_network(TEST_USER)

        assert [u.num_likes for u in urls] == [20, 3]


class TestCounters:

    def test_get_user_num_likes(self, graph, mock_session):
        mock_session.run.return_value = [counter_record(TEST_URL1, 20)]

        likes = graph.get_user_num_likes([TEST_URL1, TEST_URL2], TEST_USER)

        query, params = last_query(mock_session)
        assert likes == {TEST_URL1: 20}
        assert TEST_URL2 not in likes
        assert "[r:LIKES]" in query.text
        assert params == {"user": TEST_USER, "urls": [TEST_URL1, TEST_URL2]}

    def test_get_total_num_likes(self, graph, mock_session):
        mock_session.run.return_value = [counter_record(TEST_URL1, 20), counter_record(TEST_URL2, None)]

        likes = graph.get_total_num_likes([TEST_URL1, TEST_URL2])

        assert likes == {TEST_URL1: 20, TEST_URL2: 0}

    def test_empty_url_list_issues_no_query(self, graph, mock_driver):
        assert graph.get_user_num_likes([], TEST_USER) == {}
        assert graph.get_total_num_likes([]) == {}
        mock_driver.session.assert_not_called()


def test_dispose_closes_driver(graph, mock_driver):
    graph.dispose()
    mock_driver.close.assert_called_once()
