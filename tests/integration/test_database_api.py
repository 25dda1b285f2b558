"""Integration tests for the HTTP endpoint."""

import pytest


async def call(client, **body):
    response = await client.post("/", json=body)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_insert_and_find(client):
    inserted = await call(client, action="insertOne", collection="users", data={"name": "Ada", "age": 36})

    assert inserted["status"] == "success"
    document_id = inserted["data"]["_id"]

    found = await call(client, action="find", collection="users", query={"_id": document_id})
    assert found == {
        "status": "success",
        "data": [
            {
                "_id": document_id,
                "createdAt": inserted["data"]["createdAt"],
                "name": "Ada",
                "age": "36",
            }
        ],
    }


@pytest.mark.asyncio
async def test_find_with_sort_and_limit(client):
    for age in (25, 31, 40):
        await call(client, action="insertOne", collection="users", data={"age": age})

    result = await call(
        client,
        action="find",
        collection="users",
        query={"age": {"$gt": 30}},
        options={"sort": {"age": -1}, "limit": 1},
    )

    assert [doc["age"] for doc in result["data"]] == ["40"]


@pytest.mark.asyncio
async def test_find_one_returns_null_without_match(client):
    result = await call(client, action="findOne", collection="users", query={"name": "nobody"})

    assert result == {"status": "success", "data": None}


@pytest.mark.asyncio
async def test_update_and_delete(client):
    inserted = await call(client, action="insertOne", collection="tasks", data={"title": "write"})
    task_id = inserted["data"]["_id"]

    updated = await call(
        client,
        action="updateOne",
        collection="tasks",
        query={"_id": task_id},
        data={"status": "done"},
    )
    assert updated["data"] == {"modifiedCount": 1}

    deleted = await call(client, action="deleteMany", collection="tasks", query={"status": "done"})
    assert deleted["data"] == {"deletedCount": 1}


@pytest.mark.asyncio
async def test_get_schema(client):
    await call(client, action="insertOne", collection="users", data={"name": "Ada"})

    result = await call(client, action="getSchema")

    assert result["data"] == [
        {"collection": "users", "count": 1, "fields": ["_id", "createdAt", "name"]},
    ]


@pytest.mark.asyncio
async def test_missing_collection_is_an_error_envelope(client):
    result = await call(client, action="find")

    assert result == {"status": "error", "message": "Collection name is required"}


@pytest.mark.asyncio
async def test_unknown_action_is_an_error_envelope(client):
    result = await call(client, action="explode", collection="users")

    assert result == {"status": "error", "message": "Unknown action: explode"}


@pytest.mark.asyncio
async def test_bad_where_expression_is_an_error_envelope(client):
    result = await call(client, action="find", collection="users", query={"$where": "age >"})

    assert result["status"] == "error"
    assert "position" in result["message"]


@pytest.mark.asyncio
async def test_malformed_json_is_an_error_envelope(client):
    response = await client.post("/", content=b"{not json", headers={"Content-Type": "text/plain"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "error"
    assert body["message"].startswith("Malformed JSON body")


@pytest.mark.asyncio
async def test_non_object_body_is_an_error_envelope(client):
    response = await client.post("/", json=[1, 2, 3])

    assert response.json() == {"status": "error", "message": "Request body must be a JSON object"}


@pytest.mark.asyncio
async def test_invalid_field_types_are_an_error_envelope(client):
    result = await call(client, action="find", collection="users", query="age > 3")

    assert result["status"] == "error"
    assert result["message"].startswith("Invalid request: query")


@pytest.mark.asyncio
async def test_plain_text_body_is_accepted(client):
    response = await client.post(
        "/",
        content=b'{"action": "find", "collection": "users"}',
        headers={"Content-Type": "text/plain;charset=utf-8"},
    )

    assert response.json() == {"status": "success", "data": []}


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.post(
        "/",
        json={"action": "getSchema"},
        headers={"X-Correlation-ID": "cid_test"},
    )

    assert response.headers["X-Correlation-ID"] == "cid_test"


@pytest.mark.asyncio
async def test_driver_download(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/x-python")
    assert 'SERVICE_URL = "http://sheetdb.test/"' in response.text


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
