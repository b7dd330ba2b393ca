#!/usr/bin/env python3
"""
Example demonstrating filtered streams with conditional trace logging
"""

import asyncio

from filter_logging import (
    MemorySource,
    StreamLoggingConfig,
    field,
    filter_with_logs,
    get_stream_logger,
)

ORDERS = [
    {"id": "A-100", "customer": "acme", "total": 120.0, "items": 3, "status": "open"},
    {"id": "A-101", "customer": "globex", "total": 4800.0, "items": 12, "status": "open"},
    {"id": "A-102", "customer": "initech", "total": 0.0, "items": 0, "status": "cancelled"},
    {"id": "A-103", "customer": "acme", "total": 2300.0, "items": 1, "status": "shipped"},
]


def filter_open_orders():
    """Keep open orders, tracing the unusual ones along the way"""
    config = StreamLoggingConfig(formatter_type="plain")
    logger = get_stream_logger("orders", config, job="open_orders")

    stream = (
        filter_with_logs(ORDERS, lambda o: o["status"] == "open")
        .log_when(lambda o: o["total"] > 1000, "Large order {} for {}", field("id"), "customer")
        .log_when(lambda o: o["items"] == 0, "Empty order {}", "id")
        .build(logger)
    )

    open_orders = stream.collect()
    print(f"Open orders: {[o['id'] for o in open_orders]}")
    print(f"Metrics: {stream.get_metrics()['summary']}")


async def filter_order_feed():
    """Same rules over an async source"""
    logger = get_stream_logger("orders.feed", StreamLoggingConfig(formatter_type="json"))

    stream = (
        filter_with_logs(MemorySource(ORDERS, delay=0.01), lambda o: o["total"] > 0)
        .log_when(lambda o: o["status"] == "shipped", "Order {} already shipped", "id")
        .build_async(logger)
    )

    async for order in stream:
        print(f"Billing {order['id']}")


if __name__ == "__main__":
    print("\n1. Synchronous stream:")
    filter_open_orders()

    print("\n2. Async stream:")
    asyncio.run(filter_order_feed())
