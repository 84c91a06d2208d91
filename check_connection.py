#!/usr/bin/env python3
"""Checks that the configured MongoDB database is reachable.

Usage: python check_connection.py
"""

import asyncio
import sys

from rich.console import Console

from services.errors import StorageError
from services.expense_store import ExpenseStore
from settings import Settings

console = Console()


async def check(settings: Settings) -> bool:
    if not settings.mongodb_uri:
        console.print("[red]✗ MONGODB_URI is not set.[/red]")
        return False
    store = ExpenseStore.connect(settings.mongodb_uri, settings.db_name, settings.collection_name)
    try:
        await store.ping()
        console.print(f"[green]✓ Connected to database: {store.database_name}[/green]")
        return True
    except StorageError as e:
        console.print(f"[red]✗ Connection failed: {e}[/red]")
        return False
    finally:
        store.close()


if __name__ == "__main__":
    ok = asyncio.run(check(Settings.from_env()))
    sys.exit(0 if ok else 1)
