"""
Dining Room Simulation Script

Simulates a busy dining room against a running server: many waiters serve
many tables concurrently. Each table moves through a random lifecycle

    empty -> ordering -> eating -> complete -> empty

Waiters take a random meal from tables that are ordering, and clear every
outstanding order of tables that are complete.

Run from project root: python scripts/simulate.py --tables 200 --waiters 50
"""

import argparse
import asyncio
import random
import sys
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import httpx


# Configuration
API_BASE_URL = "http://localhost:9000"
TABLES = 200
WAITERS = 50
ITERATIONS = 100


class TableState(str, Enum):
    EMPTY = "empty"
    ORDERING = "ordering"
    EATING = "eating"
    COMPLETE = "complete"


@dataclass
class Table:
    id: int
    state: TableState = TableState.EMPTY

    def advance(self) -> None:
        """Move the table one random step through its lifecycle."""
        if self.state == TableState.EMPTY:
            if random.random() < 0.3:
                self.state = TableState.ORDERING
        elif self.state == TableState.ORDERING:
            if random.random() >= 0.5:
                self.state = TableState.EATING
        elif self.state == TableState.EATING:
            if random.random() < 0.3:
                self.state = TableState.ORDERING
            elif random.random() >= 0.6:
                self.state = TableState.COMPLETE
        else:
            self.state = TableState.EMPTY


@dataclass
class Stats:
    orders_placed: int = 0
    orders_cleared: int = 0
    errors: Counter = field(default_factory=Counter)
    latencies: list[float] = field(default_factory=list)


async def fetch_meals(client: httpx.AsyncClient) -> list[dict[str, Any]]:
    """Load the meal catalog from the server."""
    response = await client.get(f"{API_BASE_URL}/meals")
    response.raise_for_status()
    return response.json()["meals"]


async def timed(stats: Stats, request) -> httpx.Response:
    start_time = time.time()
    response = await request
    stats.latencies.append(time.time() - start_time)
    return response


async def serve(
    table: Table,
    meals: list[dict[str, Any]],
    client: httpx.AsyncClient,
    stats: Stats,
) -> None:
    """Handle a table according to its current state."""
    if table.state == TableState.ORDERING:
        meal = random.choice(meals)
        response = await timed(
            stats,
            client.put(f"{API_BASE_URL}/table/{table.id}/meal/{meal['id']}"),
        )
        if response.status_code == 200:
            stats.orders_placed += 1
        else:
            stats.errors[f"PUT {response.status_code}"] += 1

    elif table.state == TableState.COMPLETE:
        response = await timed(
            stats,
            client.get(f"{API_BASE_URL}/table/{table.id}/orders"),
        )
        if response.status_code != 200:
            stats.errors[f"GET {response.status_code}"] += 1
            return

        orders = response.json()["orders"]
        for order in orders:
            response = await timed(
                stats,
                client.delete(f"{API_BASE_URL}/order/{order['id']}"),
            )
            if response.status_code == 204:
                stats.orders_cleared += 1
            else:
                # Another waiter may have cleared it first
                stats.errors[f"DELETE {response.status_code}"] += 1


async def waiter(
    tables: asyncio.Queue,
    meals: list[dict[str, Any]],
    client: httpx.AsyncClient,
    stats: Stats,
    iterations: int,
) -> None:
    for _ in range(iterations):
        table = await tables.get()
        table.advance()
        try:
            await serve(table, meals, client, stats)
        except httpx.HTTPError as e:
            stats.errors[type(e).__name__] += 1
        finally:
            tables.put_nowait(table)


async def run_simulation(
    num_tables: int = TABLES,
    num_waiters: int = WAITERS,
    iterations: int = ITERATIONS,
) -> Stats:
    """
    Run the dining room simulation.

    Args:
        num_tables: Number of tables in the room
        num_waiters: Number of concurrent waiters
        iterations: Tables each waiter serves
    """
    print("=" * 70)
    print("🍽️  DINING ROOM SIMULATION")
    print("=" * 70)
    print(f"📋 Tables: {num_tables}, Waiters: {num_waiters}, Iterations: {iterations}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    stats = Stats()
    tables: asyncio.Queue = asyncio.Queue()
    for table_id in range(num_tables):
        tables.put_nowait(Table(table_id))

    start_time = time.time()
    limits = httpx.Limits(max_connections=num_waiters)
    async with httpx.AsyncClient(limits=limits, timeout=30.0) as client:
        meals = await fetch_meals(client)
        print(f"\n📖 Menu: {', '.join(meal['name'] for meal in meals)}\n")

        await asyncio.gather(*[
            waiter(tables, meals, client, stats, iterations)
            for _ in range(num_waiters)
        ])

    total_time = round(time.time() - start_time, 2)

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Orders placed: {stats.orders_placed}")
    print(f"🧹 Orders cleared: {stats.orders_cleared}")
    print(f"⏱️  Total Time: {total_time}s")

    if stats.latencies:
        avg_time = round(sum(stats.latencies) / len(stats.latencies), 4)
        print(f"\n📈 Performance Metrics:")
        print(f"   Requests: {len(stats.latencies)}")
        print(f"   Average Response: {avg_time}s")
        print(f"   Slowest: {round(max(stats.latencies), 4)}s")

    if stats.errors:
        print(f"\n⚠️  Errors:")
        for error, count in stats.errors.most_common():
            print(f"   {error}: {count}")

    print("=" * 70)
    return stats


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Dining Room Simulation Script")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--tables", type=int, default=TABLES, help="Number of tables")
    parser.add_argument("--waiters", type=int, default=WAITERS, help="Number of waiters")
    parser.add_argument("--iterations", type=int, default=ITERATIONS, help="Tables served per waiter")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    stats = asyncio.run(run_simulation(args.tables, args.waiters, args.iterations))
    sys.exit(1 if stats.orders_placed == 0 else 0)
