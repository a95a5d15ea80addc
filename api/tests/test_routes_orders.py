import random
import sys
import uuid
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[2]))

from config import Settings  # noqa: E402
from api.app.main import create_app  # noqa: E402
from api.app.repos_memory import InMemoryOrdersRepo  # noqa: E402
from api.app.routes_orders import get_orders_repo  # noqa: E402


def _put(client, order_id, item_id, table_id):
    return client.put(
        f"/order/{order_id}", json={"item_id": item_id, "table_id": table_id}
    )


def test_put_order_happy_path(client):
    resp = _put(client, "abc", "1", "t")
    assert resp.status_code == 200
    body = resp.json()
    assert body["order_id"] == "abc"
    assert body["item_id"] == "1"
    assert body["table_id"] == "t"
    assert 5 <= body["cooking_time"] <= 15
    assert set(body) == {"order_id", "item_id", "table_id", "cooking_time"}


def test_put_duplicate_order(client):
    assert _put(client, "abc", "1", "t").status_code == 200
    resp = _put(client, "abc", "1", "t")
    assert resp.status_code == 409
    body = resp.json()
    assert body["error_code"] == "DUPLICATE_ORDER"
    assert "abc" in body["message"]


def test_delete_nonexistent_order(client):
    resp = client.delete("/order/ghost")
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "ORDER_NOT_FOUND"


def test_delete_returns_removed_order(client):
    created = _put(client, "abc", "1", "t").json()
    resp = client.delete("/order/abc")
    assert resp.status_code == 200
    assert resp.json() == created


def test_get_orders_by_table(client):
    for item_id in ("301", "302", "303"):
        _put(client, uuid.uuid4(), item_id, "3")
    _put(client, uuid.uuid4(), "304", "4")
    resp = client.get("/orders", params={"table_id": "3"})
    assert resp.status_code == 200
    orders = resp.json()
    assert len(orders) == 3
    assert {o["item_id"] for o in orders} == {"301", "302", "303"}


def test_get_orders_by_table_and_item(client):
    _put(client, uuid.uuid4(), "401", "4")
    _put(client, uuid.uuid4(), "402", "4")
    resp = client.get("/orders?table_id=4&item_id=401")
    assert resp.status_code == 200
    orders = resp.json()
    assert [(o["item_id"], o["table_id"]) for o in orders] == [("401", "4")]
    assert 5 <= orders[0]["cooking_time"] <= 15


def test_get_orders_by_item_and_all(client):
    _put(client, "a", "burger", "1")
    _put(client, "b", "burger", "2")
    _put(client, "c", "fries", "2")
    by_item = client.get("/orders", params={"item_id": "burger"}).json()
    assert {o["order_id"] for o in by_item} == {"a", "b"}
    everything = client.get("/orders").json()
    assert {o["order_id"] for o in everything} == {"a", "b", "c"}


def test_delete_item_from_table(client):
    order_id = str(uuid.uuid4())
    assert _put(client, order_id, "201", "2").status_code == 200
    assert client.delete(f"/order/{order_id}").status_code == 200
    resp = client.get("/orders?table_id=2")
    assert resp.status_code == 200
    assert resp.json() == []


def test_get_orders_empty_store(client):
    resp = client.get("/orders")
    assert resp.status_code == 200
    assert resp.json() == []


def test_put_non_json_content_type(client):
    resp = client.put(
        "/order/123",
        content="item_id=1&table_id=2",
        headers={"Content-Type": "text/plain"},
    )
    assert resp.status_code == 404
    assert client.get("/orders").json() == []


def test_put_body_with_missing_params(client):
    resp = client.put("/order/123", json={"table_id": "2"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error_code"] == "INVALID_BODY"
    assert "item_id" in body["message"]


def test_put_empty_body(client):
    resp = client.put("/order/123", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_BODY"


def test_put_malformed_json(client):
    resp = client.put(
        "/order/123",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_BODY"


def test_put_non_string_fields(client):
    resp = client.put("/order/123", json={"item_id": 1, "table_id": 2})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_BODY"


def test_put_wrong_http_method(client):
    resp = client.post("/order/123", json={"item_id": "1", "table_id": "2"})
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "NOT_FOUND"


def test_unknown_route(client):
    resp = client.get("/tables")
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "NOT_FOUND"


def test_empty_ids_accepted_by_default(client):
    resp = _put(client, "e1", "", "")
    assert resp.status_code == 200
    assert client.get("/orders", params={"table_id": ""}).json() == [resp.json()]


def test_empty_ids_rejected_when_configured(repo):
    app = create_app(repo=repo, settings=Settings(reject_empty_ids=True))
    client = TestClient(app)
    resp = _put(client, "e1", "", "t")
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_BODY"
    assert len(repo) == 0


def test_request_id_echoed_in_header_and_error_body(client):
    resp = client.delete("/order/ghost", headers={"X-Request-ID": "req-42"})
    assert resp.headers["X-Request-ID"] == "req-42"
    assert resp.json()["request_id"] == "req-42"


def test_request_id_generated(client):
    resp = client.get("/orders")
    assert uuid.UUID(resp.headers["X-Request-ID"])


class _FailingRandom(random.Random):
    def randint(self, a, b):
        raise RuntimeError("entropy source failed")


def test_poisoned_store_reports_internal_error(settings):
    app = create_app(repo=InMemoryOrdersRepo(rng=_FailingRandom()), settings=settings)
    client = TestClient(app)

    resp = _put(client, "abc", "1", "t")
    assert resp.status_code == 500
    assert resp.json()["error_code"] == "INTERNAL"
    assert "entropy" not in resp.text

    resp = client.get("/orders")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error_code"] == "INTERNAL"
    assert body["message"] == "Internal Server Error"


class _StubRepo:
    """Records calls; stands in for any store implementing the contract."""

    def __init__(self):
        self.calls = []

    def put(self, order_id, order_input):
        raise AssertionError("not used")

    def delete(self, order_id):
        raise AssertionError("not used")

    def list(self, table_id=None, item_id=None):
        self.calls.append((table_id, item_id))
        return []


def test_store_can_be_overridden(app):
    stub = _StubRepo()
    app.dependency_overrides[get_orders_repo] = lambda: stub
    client = TestClient(app)
    resp = client.get("/orders", params={"table_id": "7", "item_id": "9"})
    app.dependency_overrides.clear()
    assert resp.status_code == 200
    assert stub.calls == [("7", "9")]


def test_concurrent_order_cycles(app, repo):
    def worker(n):
        client = TestClient(app)
        table_id = f"table{n % 3}"
        item_id = f"item{n}"
        for round_ in range(5):
            ids = [f"order{n}_{round_}_{k}" for k in range(3)]
            for order_id in ids:
                assert _put(client, order_id, item_id, table_id).status_code == 200
            resp = client.get("/orders", params={"item_id": item_id})
            assert resp.status_code == 200
            assert len(resp.json()) >= 3
            resp = client.get("/orders", params={"table_id": table_id})
            assert resp.status_code == 200
            for order_id in ids:
                assert client.delete(f"/order/{order_id}").status_code == 200

    with ThreadPoolExecutor(max_workers=8) as pool:
        for future in [pool.submit(worker, n) for n in range(8)]:
            future.result()

    assert TestClient(app).get("/orders").json() == []
    repo.check_invariants()


def test_concurrent_duplicate_puts_over_http(app, repo):
    def attempt(n):
        return _put(TestClient(app), "shared", str(n), "t").status_code

    with ThreadPoolExecutor(max_workers=8) as pool:
        statuses = list(pool.map(attempt, range(32)))

    assert statuses.count(200) == 1
    assert statuses.count(409) == 31
    assert len(repo) == 1
