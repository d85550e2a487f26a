"""
sync_fitbit_steps.py

LifeOps — Fitbit daily steps -> Pixela graph.

One run:
    1. refresh the Fitbit token pair (refresh tokens are single-use)
    2. persist the new refresh token (.env locally, CircleCI env var in CI)
    3. fetch the last FITBIT_STEPS_PERIOD of daily steps
    4. PUT each day to the Pixela graph

Any failure aborts the run. Re-run from the start; there is no resume.

Requirements:
    pip install requests python-dotenv

See sync_config.py for the expected .env.
"""

from __future__ import annotations

import sys

from fitbit_auth import refresh_fitbit_token
from pixela import publish_steps
from pull_fitbit_steps import fetch_steps
from sync_config import SyncConfig, load_config
from token_store import select_store


def run(config: SyncConfig) -> int:
    """
    Returns the number of days published.
    """
    store = select_store(config)

    creds = refresh_fitbit_token(config.fitbit_basic_token, config.fitbit_refresh_token)
    print("Refreshed Fitbit tokens.")

    store.save(creds.refresh_token)
    print(f"Stored the new refresh token: {store.describe()}")

    records = fetch_steps(creds.access_token, config.steps_period)
    print(f"Fetched {len(records)} days from Fitbit API.")

    published = publish_steps(records, config.pixela_graph_url, config.pixela_token)
    print(f"Put {published} days to Pixela: {config.pixela_graph_url}")

    return published


def main() -> None:
    config = load_config()

    print(f"LifeOps: syncing Fitbit steps ({config.steps_period}) -> Pixela...")
    print(f"Refresh token target: {'local .env' if config.is_local else 'CircleCI'}")

    run(config)
    print("Done.")


def cli() -> None:
    try:
        main()
    except Exception as e:
        print("\nERROR:", str(e))
        sys.exit(1)


if __name__ == "__main__":
    cli()
