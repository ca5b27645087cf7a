"""Request every archived briefing page so the page cache is warm.

Usage: python scripts/warmup_history.py --base-url https://example.com
"""

import argparse
import asyncio
import time
from collections.abc import Iterator

import httpx

CONCURRENCY = 5
USER_AGENT = "BriefingHub-Warmup/1.0"

GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"
RESET = "\x1b[0m"


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Warm the page cache for all archived dates.")
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="Public base URL of the site",
    )
    parser.add_argument(
        "--api-prefix",
        default="/api/v1",
        help="API prefix used to look up available dates",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=CONCURRENCY,
        help="Pages requested at the same time",
    )
    return parser.parse_args()


def chunked(items: list[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _color(elapsed_ms: float) -> str:
    if elapsed_ms < 1000:
        return GREEN
    if elapsed_ms < 3000:
        return YELLOW
    return RED


async def fetch_available_dates(client: httpx.AsyncClient, api_prefix: str) -> list[str]:
    url = f"{api_prefix}/meta/available-dates"
    print(f"Fetching date list from {client.base_url}{url}...")
    response = await client.get(url)
    response.raise_for_status()
    dates = response.json()
    print(f"Found {len(dates)} historical dates.")
    return dates


async def warm_date(client: httpx.AsyncClient, date: str, index: int, total: int) -> int | None:
    """GET one date page. Returns the status code, or None on a transport error."""
    start = time.perf_counter()
    try:
        response = await client.get(f"/date/{date}")
    except httpx.HTTPError as e:
        print(f"Error warming {date}: {e}")
        return None

    elapsed_ms = (time.perf_counter() - start) * 1000
    print(
        f"[{index + 1}/{total}] {date}: "
        f"{_color(elapsed_ms)}{elapsed_ms:.0f}ms{RESET} [{response.status_code}]"
    )
    return response.status_code


async def run(base_url: str, api_prefix: str, concurrency: int) -> int:
    async with httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        headers={"User-Agent": USER_AGENT},
        timeout=60.0,
    ) as client:
        try:
            dates = await fetch_available_dates(client, api_prefix)
        except httpx.HTTPError as e:
            print(f"Fatal error: {e}")
            return 1

        offset = 0
        for chunk in chunked(dates, concurrency):
            await asyncio.gather(
                *(warm_date(client, date, offset + i, len(dates)) for i, date in enumerate(chunk))
            )
            offset += len(chunk)

    print("\nAll dates processed.")
    return 0


def main() -> int:
    args = parse_args()
    return asyncio.run(run(args.base_url, args.api_prefix, args.concurrency))


if __name__ == "__main__":
    raise SystemExit(main())
