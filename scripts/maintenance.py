#!/usr/bin/env python3
"""
CLI for managing maintenance mode without the web UI.

Usage:
    python scripts/maintenance.py status
    python scripts/maintenance.py enable
    python scripts/maintenance.py disable
    python scripts/maintenance.py install
    python scripts/maintenance.py uninstall
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pausegate.database import engine, init_db
from pausegate.services.settings_service import SettingsStore


async def run(command: str) -> bool:
    """Run a single maintenance command against the settings store."""
    store = SettingsStore()

    if command == "status":
        current = await store.read()
        print(json.dumps(current.to_stored(), indent=2))
    elif command == "enable":
        await store.write({"is_enabled": True})
        print("Maintenance mode enabled.")
    elif command == "disable":
        if await store.disable():
            print("Maintenance mode disabled.")
        else:
            print("Maintenance mode was already off.")
    elif command == "install":
        # Creates missing tables for deployments that do not run Alembic
        await init_db()
        await store.install()
        print("Maintenance settings installed.")
    elif command == "uninstall":
        if await store.uninstall():
            print("Maintenance settings removed.")
        else:
            print("No maintenance settings to remove.")
    return True


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Manage PauseGate maintenance mode")
    parser.add_argument(
        "command",
        choices=["status", "enable", "disable", "install", "uninstall"],
        help="Action to perform",
    )
    args = parser.parse_args()

    try:
        success = await run(args.command)
        sys.exit(0 if success else 1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
