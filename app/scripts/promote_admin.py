from __future__ import annotations

import argparse
import asyncio

from app.config import Settings, settings as default_settings
from app.database.mongo import create_client, get_database
from app.logging import configure_logging
from app.services.users import promote_to_admin


async def run_promote(settings: Settings, email: str, client=None) -> str:
    owns_client = client is None
    client = client or create_client(settings)
    try:
        user = await promote_to_admin(get_database(client, settings), email)
        return str(user["_id"])
    finally:
        if owns_client:
            client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Grant the admin role to a registered user.")
    parser.add_argument("email", help="Email the user registered with")
    args = parser.parse_args()

    configure_logging(default_settings.LOG_LEVEL)
    user_id = asyncio.run(run_promote(default_settings, args.email))
    print(f"Promoted {args.email} (id={user_id}) to admin")


if __name__ == "__main__":
    main()
