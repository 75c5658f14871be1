"""End-to-end tests of the HTTP API over an in-memory catalog."""

import httpx
import pytest
from fastapi.testclient import TestClient

from api import create_app
from query_gateway import QueryOrchestrator
from query_gateway.auth.arborist_client import ArboristClient
from query_gateway.query.filter_builder import MAX_FILTER_DEPTH


def _arborist(resources):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"resources": resources})
    )
    return ArboristClient("http://arborist", transport=transport)


@pytest.fixture
def orchestrator(catalog, fake_executor, indices):
    return QueryOrchestrator(
        catalog=catalog,
        query_executor=fake_executor,
        indices=indices,
        arborist_client=_arborist(["/programs/a"]),
    )


@pytest.fixture
def client(orchestrator):
    with TestClient(create_app(orchestrator)) as test_client:
        yield test_client


def test_status(client):
    assert client.get("/_status").json() == {"status": "ok"}


def test_schema_is_sdl_text(client):
    response = client.get("/schema")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "type Subject {" in response.text


def test_mapping(client):
    assert client.get("/mapping/subject").json()[:3] == ["gender", "name", "age"]


def test_data(client, fake_executor, documents):
    response = client.post(
        "/data/subject",
        json={"filter": {"in": {"gender": ["female"]}}, "sort": [{"age": "desc"}], "first": 10},
    )
    assert response.status_code == 200
    assert response.json() == documents
    _, index, body = fake_executor.calls[-1]
    assert index == "subject_idx"
    assert body["query"] == {"terms": {"gender": ["female"]}}
    assert body["size"] == 10


def test_data_scoped_to_accessible_resources(client, fake_executor):
    response = client.post(
        "/data/subject",
        json={"filter": {"=": {"gender": "male"}}, "accessibility": "accessible"},
        headers={"Authorization": "bearer token-1"},
    )
    assert response.status_code == 200
    _, _, body = fake_executor.calls[-1]
    assert body["query"] == {
        "bool": {
            "must": [
                {"term": {"gender": "male"}},
                {"terms": {"auth_resource_path": ["/programs/a"]}},
            ]
        }
    }


def test_bad_filter_is_a_client_error(client, fake_executor):
    response = client.post("/data/subject", json={"filter": {"gt": {"gender": "male"}}})
    assert response.status_code == 400
    assert response.json() == {"detail": 'Invalid operation "gt" in filter argument.'}
    assert fake_executor.calls == []


def test_oversized_page_is_a_client_error(client):
    response = client.post("/data/subject", json={"offset": 5000, "first": 5001})
    assert response.status_code == 400
    assert "please use download endpoint" in response.json()["detail"]


def test_unknown_type(client):
    response = client.post("/data/visit", json={})
    assert response.status_code == 400
    assert response.json() == {"detail": "Unknown type visit"}


def test_count(client, fake_executor):
    response = client.post("/count/subject", json={"filter": {">=": {"age": 18}}})
    assert response.json() == {"count": 2}
    assert fake_executor.calls == [("count", "subject_idx", {"range": {"age": {"gte": 18}}})]


def test_download_streams_json_array(client, fake_executor, documents):
    response = client.post(
        "/download",
        json={"type": "subject", "fields": ["age"]},
        headers={"Authorization": "Bearer token-1"},
    )
    assert response.status_code == 200
    assert response.json() == documents
    name, index, query, fields, sort = fake_executor.calls[-1]
    assert (name, index, fields, sort) == ("stream", "subject_idx", ["age"], None)
    assert query == {"terms": {"auth_resource_path": ["/programs/a"]}}


def test_download_rejects_bad_sort_before_streaming(client, fake_executor):
    response = client.post(
        "/download", json={"type": "subject", "sort": {"height": "asc"}, "accessibility": "all"}
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid sort argument"}
    assert fake_executor.calls == []


def test_deeply_nested_filter_is_a_client_error(client, fake_executor):
    filter_obj = {"=": {"gender": "female"}}
    for _ in range(MAX_FILTER_DEPTH + 1):
        filter_obj = {"and": [filter_obj]}
    response = client.post("/data/subject", json={"filter": filter_obj})
    assert response.status_code == 400
    assert "nested deeper than" in response.json()["detail"]
    assert fake_executor.calls == []
