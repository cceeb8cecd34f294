from __future__ import annotations

import argparse
import asyncio
from datetime import date
import logging
import random
from typing import Optional

from app.config import Settings, settings as default_settings
from app.database.mongo import create_client, get_database
from app.logging import configure_logging
from app.services.events.seed import default_anchor, reset_with_synthetic_data

logger = logging.getLogger(__name__)


async def run_seed(settings: Settings, seed: Optional[int], anchor: Optional[date], client=None) -> dict[str, int]:
    if not settings.test_data_enabled:
        raise SystemExit("Refusing to reset events: set ALLOW_TEST_DATA=true outside production")
    owns_client = client is None
    client = client or create_client(settings)
    try:
        db = get_database(client, settings)
        rng = random.Random(seed)
        return await reset_with_synthetic_data(db, rng=rng, anchor=anchor or default_anchor())
    finally:
        if owns_client:
            client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Replace all events with synthetic development data.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for coordinate jitter")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="First event day (YYYY-MM-DD), defaults to tomorrow")
    args = parser.parse_args()

    configure_logging(default_settings.LOG_LEVEL)
    stats = asyncio.run(run_seed(default_settings, args.seed, args.start))
    print(f"Deleted: {stats['deleted']}, Created: {stats['created']}")


if __name__ == "__main__":
    main()
