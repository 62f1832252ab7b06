#!/usr/bin/env python3
# =============================================================================
# Load Testing Script
# =============================================================================
"""
Load test for the Import API.

Fires bulk imports at a target rate without waiting for earlier requests
to finish, so slow imports overlap the way they do in production:
- Configurable RPM and duration
- Accept formats rotated across JSON, CBOR, MessagePack and octet-stream
- Optional bearer token for the upstream authentication layer

Usage:
    python load_test.py --url http://localhost:8000 --rpm 600 --duration 60 --token TOKEN

Requirements:
    pip install httpx
"""

import argparse
import asyncio
import random
import string
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx


# =============================================================================
# Configuration
# =============================================================================

ACCEPT_FORMATS = [
    "application/json",
    "application/cbor",
    "application/pack",
    "application/octet-stream",
]

STATEMENT_TEMPLATES = [
    "CREATE person SET name = '{name}', age = {age};",
    "UPDATE person SET visits += 1 WHERE name = '{name}';",
    "INSERT INTO order {{ ref: '{ref}', total: {amount} }};",
    "DELETE session WHERE expires < time::now() - {age}d;",
]


@dataclass
class ImportResult:
    """Result of a single import request."""
    success: bool
    status_code: int
    latency_ms: float
    accept: str
    statements: int
    error: Optional[str] = None


# =============================================================================
# Test Data Generation
# =============================================================================

def generate_statement() -> str:
    """Generate one random import statement."""
    template = random.choice(STATEMENT_TEMPLATES)
    return template.format(
        name="".join(random.choices(string.ascii_lowercase, k=8)),
        age=random.randint(18, 90),
        ref="".join(random.choices(string.ascii_uppercase + string.digits, k=10)),
        amount=random.randint(10, 10000),
    )


def generate_payload(max_statements: int) -> List[str]:
    """Generate a batch of statements for one import."""
    return [generate_statement() for _ in range(random.randint(1, max_statements))]


# =============================================================================
# Load Test Runner
# =============================================================================

async def send_import(
    client: httpx.AsyncClient,
    url: str,
    accept: str,
    max_statements: int,
) -> ImportResult:
    """Send a single import to the API."""
    statements = generate_payload(max_statements)
    start = time.perf_counter()

    try:
        response = await client.post(
            f"{url}/import",
            content="\n".join(statements).encode("utf-8"),
            headers={"Accept": accept},
        )
    except httpx.HTTPError as e:
        return ImportResult(
            success=False,
            status_code=0,
            latency_ms=0,
            accept=accept,
            statements=len(statements),
            error=type(e).__name__,
        )

    latency = (time.perf_counter() - start) * 1000
    error = None
    if response.status_code != 200:
        try:
            error = response.json().get("error", str(response.status_code))
        except ValueError:
            error = str(response.status_code)

    return ImportResult(
        success=response.status_code == 200,
        status_code=response.status_code,
        latency_ms=latency,
        accept=accept,
        statements=len(statements),
        error=error,
    )


async def run_load_test(
    url: str,
    rpm: int,
    duration_seconds: int,
    max_statements: int,
    token: Optional[str],
) -> List[ImportResult]:
    """Run the load test."""
    interval = 60.0 / rpm  # Seconds between requests
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    print(f"\n{'='*60}")
    print("Import API Load Test")
    print(f"{'='*60}")
    print(f"Target URL: {url}")
    print(f"Target RPM: {rpm}")
    print(f"Duration: {duration_seconds} seconds")
    print(f"Request interval: {interval*1000:.1f}ms")
    print(f"{'='*60}\n")

    async with httpx.AsyncClient(timeout=None, headers=headers) as client:
        tasks: List[asyncio.Task] = []
        start_time = time.perf_counter()

        while (time.perf_counter() - start_time) < duration_seconds:
            accept = ACCEPT_FORMATS[len(tasks) % len(ACCEPT_FORMATS)]
            tasks.append(asyncio.create_task(send_import(client, url, accept, max_statements)))

            if len(tasks) % 100 == 0:
                elapsed = time.perf_counter() - start_time
                in_flight = sum(1 for t in tasks if not t.done())
                print(f"  Sent {len(tasks)} imports | "
                      f"Actual RPM: {len(tasks) / elapsed * 60:.0f} | "
                      f"In flight: {in_flight}")

            await asyncio.sleep(interval)

        return list(await asyncio.gather(*tasks))


def percentile(sorted_values: List[float], fraction: float) -> float:
    if not sorted_values:
        return 0
    return sorted_values[min(int(len(sorted_values) * fraction), len(sorted_values) - 1)]


def print_results(results: List[ImportResult]) -> None:
    """Print test results summary."""
    total = len(results)
    if not total:
        print("No requests sent.")
        return

    successful = sum(1 for r in results if r.success)
    failed = total - successful

    latencies = sorted(r.latency_ms for r in results if r.success)
    avg_latency = sum(latencies) / len(latencies) if latencies else 0

    accept_counts: Dict[str, int] = {}
    for r in results:
        accept_counts[r.accept] = accept_counts.get(r.accept, 0) + 1

    statements = sum(r.statements for r in results if r.success)

    print(f"\n{'='*60}")
    print("RESULTS SUMMARY")
    print(f"{'='*60}")
    print(f"\nTotal Imports:      {total}")
    print(f"Successful (200):   {successful} ({successful/total*100:.1f}%)")
    print(f"Failed:             {failed} ({failed/total*100:.1f}%)")
    print(f"Statements applied: {statements}")
    print("\nLatency (ms):")
    print(f"  Average:          {avg_latency:.1f}")
    print(f"  p50:              {percentile(latencies, 0.50):.1f}")
    print(f"  p95:              {percentile(latencies, 0.95):.1f}")
    print(f"  p99:              {percentile(latencies, 0.99):.1f}")
    print(f"  Max:              {latencies[-1] if latencies else 0:.1f}")
    print("\nAccept Distribution:")
    for accept, count in sorted(accept_counts.items()):
        print(f"  {accept}: {count} ({count/total*100:.1f}%)")

    errors: Dict[str, int] = {}
    for r in results:
        if r.error:
            errors[r.error] = errors.get(r.error, 0) + 1
    if errors:
        print(f"\nErrors ({failed}):")
        for error, count in sorted(errors.items()):
            print(f"  {error}: {count}")

    print(f"\n{'='*60}")
    if successful / total >= 0.99:
        print("PASS: >99% success rate")
    else:
        print("FAIL: <99% success rate")
    print(f"{'='*60}\n")


# =============================================================================
# Main
# =============================================================================

def main():
    parser = argparse.ArgumentParser(description="Load test for the Import API")
    parser.add_argument("--url", required=True, help="Base URL of the Import API")
    parser.add_argument("--rpm", type=int, default=600, help="Imports per minute")
    parser.add_argument("--duration", type=int, default=60, help="Test duration in seconds")
    parser.add_argument("--max-statements", type=int, default=50, help="Largest batch per import")
    parser.add_argument("--token", default=None, help="Bearer token for the authentication layer")

    args = parser.parse_args()

    # Remove trailing slash
    url = args.url.rstrip("/")

    results = asyncio.run(
        run_load_test(url, args.rpm, args.duration, args.max_statements, args.token)
    )

    print_results(results)


if __name__ == "__main__":
    main()
