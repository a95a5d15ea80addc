import os
import uuid

from locust import HttpUser, between, events, task

ORDER_PATH = "/order/[id]"
ORDERS_PATH = "/orders"
TABLES = int(os.getenv("TABLES", "3"))

P95_PUT_MS = 100
P95_LIST_MS = 150


class WaiterUser(HttpUser):
    """Place a round of orders, look them up, then clear them."""

    host = os.environ.get("HOST", "http://localhost:8000")
    wait_time = between(0.1, 0.5)

    def on_start(self) -> None:
        self.item_id = f"item-{uuid.uuid4().hex[:8]}"
        self.table_id = f"table-{uuid.uuid4().int % TABLES}"

    @task
    def order_cycle(self) -> None:
        """Create three orders, query by item and table, delete all three."""

        order_ids = [uuid.uuid4().hex for _ in range(3)]
        body = {"item_id": self.item_id, "table_id": self.table_id}
        for order_id in order_ids:
            self.client.put(f"/order/{order_id}", json=body, name=ORDER_PATH)

        with self.client.get(
            ORDERS_PATH, params={"item_id": self.item_id}, catch_response=True
        ) as resp:
            if resp.status_code == 200 and len(resp.json()) < len(order_ids):
                resp.failure("orders missing from item query")

        self.client.get(ORDERS_PATH, params={"table_id": self.table_id})

        for order_id in order_ids:
            self.client.delete(f"/order/{order_id}", name=ORDER_PATH)


@events.test_stop.add_listener
def verify_thresholds(environment, **kwargs) -> None:
    """Fail the test run when p95 targets are not met."""

    failures: list[str] = []
    put = environment.stats.get(ORDER_PATH, "PUT")
    if put and put.get_response_time_percentile(0.95) > P95_PUT_MS:
        failures.append(f"put p95>{P95_PUT_MS}ms")
    orders = environment.stats.get(ORDERS_PATH, "GET")
    if orders and orders.get_response_time_percentile(0.95) > P95_LIST_MS:
        failures.append(f"list p95>{P95_LIST_MS}ms")
    if failures:
        print("Performance thresholds not met:", ", ".join(failures))
        environment.process_exit_code = 1
