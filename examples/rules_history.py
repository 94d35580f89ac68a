"""
Rules History Example - Edit a Rules File and Browse Its Versions
===================================================================

This example runs ConfKeeper against the in-memory backend: it creates an
alert rules file, edits it a few times, lists the archived versions, reads
one back, and finally deletes the file with its whole history.

The structural rules check still runs; the promtool step is replaced with a
MockValidator so no binaries are required.

Usage:
    python examples/rules_history.py
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from confkeeper import ConfKeeper
from confkeeper.core.config import ConfKeeperConfig
from confkeeper.validation import ChainValidator, MockValidator, PrometheusRulesValidator

RULES_V1 = """\
groups:
  - name: disk
    rules:
      - alert: DiskAlmostFull
        expr: node_filesystem_avail_bytes / node_filesystem_size_bytes < 0.10
"""

RULES_V2 = RULES_V1.replace("0.10", "0.05")
RULES_V3 = RULES_V2 + "        for: 10m\n"


async def main() -> None:
    """Create, edit, inspect and delete a rules file."""
    moment = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def clock() -> datetime:
        return moment

    keeper = ConfKeeper(
        ConfKeeperConfig(),
        validators={
            "alertrules": ChainValidator([PrometheusRulesValidator(), MockValidator()]),
        },
        clock=clock,
    )

    async with keeper:
        rules = keeper.store("alertrules")

        for body in (RULES_V1, RULES_V2, RULES_V3, RULES_V3):
            outcome = await rules.put("disk.rules", body)
            print(f"put disk.rules        -> {outcome.value}")
            moment += timedelta(hours=1)

        versions = await rules.list_versions("disk.rules")
        print()
        print("Archived versions (newest first)")
        print("-" * 40)
        for version in versions:
            print(f"  {version}")

        oldest = await rules.get_version("disk.rules", versions[-1])
        print()
        print(f"Content of {versions[-1]}:")
        print(oldest)

        outcome = await rules.delete("disk.rules")
        print(f"delete disk.rules     -> {outcome.value}")
        print(f"remaining versions    -> {await rules.list_versions('disk.rules')}")


if __name__ == "__main__":
    asyncio.run(main())
