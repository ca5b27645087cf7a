"""Pull or push a prompt stored in the ``app_config`` table.

Usage:
    python scripts/prompt_sync.py pull [--file PROMPT.MD]
    python scripts/prompt_sync.py push [--file PROMPT.MD]
"""

import argparse
import asyncio
from pathlib import Path

from app.config import get_settings
from app.db.postgres import Database
from app.services.briefing_service import BriefingRepository

DEFAULT_KEY = "gemini_briefing_prompt"


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Sync a prompt with app_config.")
    parser.add_argument("direction", choices=["pull", "push"])
    parser.add_argument("--key", default=DEFAULT_KEY, help="app_config key")
    parser.add_argument("--file", type=Path, default=Path("PROMPT.MD"), help="Local prompt file")
    return parser.parse_args()


async def pull(repository: BriefingRepository, key: str, path: Path) -> int:
    value = await repository.get_config(key)
    if value is None:
        print(f"Prompt not found in app_config (key: {key}).")
        return 1

    path.write_text(value, encoding="utf-8")
    print(f"Pulled prompt to {path}")
    return 0


async def push(repository: BriefingRepository, key: str, path: Path) -> int:
    if not path.exists():
        print(f"{path} not found. Run 'pull' first.")
        return 1

    await repository.set_config(key, path.read_text(encoding="utf-8"))
    print(f"Pushed {path} to app_config (key: {key}).")
    return 0


async def run(direction: str, key: str, path: Path) -> int:
    settings = get_settings()
    if not settings.database_configured:
        print("DATABASE_URL is not set.")
        return 1

    database = Database(settings)
    try:
        async with database.sessionmaker() as session:
            repository = BriefingRepository(session)
            if direction == "pull":
                return await pull(repository, key, path)
            return await push(repository, key, path)
    finally:
        await database.dispose()


def main() -> int:
    args = parse_args()
    return asyncio.run(run(args.direction, args.key, args.file))


if __name__ == "__main__":
    raise SystemExit(main())
