"""
Queue Observer: polls the store on a fixed interval and logs the derived state.

Each cycle rebuilds the snapshot from scratch. If the store is down the
cycle is logged and skipped; the last good snapshot stays current until
a later poll succeeds.

Usage:
    python observer.py
"""

from __future__ import annotations

import asyncio
import logging

import config
from features.errors import StoreError
from features.queue import Snapshot, load_snapshot
from features.store import Store, open_store

log = logging.getLogger(__name__)


class Observer:
    """Polling client that keeps the latest successfully loaded snapshot."""

    def __init__(self, store: Store, interval: float | None = None):
        self.store = store
        self.interval = config.POLL_INTERVAL_SEC if interval is None else interval
        self.snapshot: Snapshot | None = None
        self.last_error: str | None = None

    def poll_once(self) -> Snapshot | None:
        """Reload from the store. Returns the snapshot now considered current."""
        try:
            self.snapshot = load_snapshot(self.store)
            self.last_error = None
        except StoreError as e:
            self.last_error = str(e)
            log.warning("Poll failed, keeping last snapshot: %s", e)
        return self.snapshot

    async def run(self, cycles: int | None = None) -> None:
        """Poll forever (or ``cycles`` times). A slow poll delays, never overlaps, the next."""
        loop = asyncio.get_running_loop()
        done = 0
        while cycles is None or done < cycles:
            snapshot = await loop.run_in_executor(None, self.poll_once)
            if snapshot is not None and self.last_error is None:
                log.info("%s", summarize(snapshot))
            done += 1
            if cycles is None or done < cycles:
                await asyncio.sleep(self.interval)


def summarize(snapshot: Snapshot) -> str:
    counts = snapshot.queue.counts
    line = (
        f"[{snapshot.status.value.upper()}] "
        f"{counts.completed}/{counts.total} done ({snapshot.queue.progress_percent}%), "
        f"{counts.pending} pending, {counts.failed} failed, {counts.skipped} skipped"
    )
    building = snapshot.queue.building
    if len(building) > 1:
        line += f" | WARNING {len(building)} features in progress: " + ", ".join(f.name for f in building)
    elif building:
        line += f" | building: {building[0].name}"
    next_up = snapshot.queue.next_pending
    if next_up:
        line += f" | next: {next_up.name}"
    return line


async def main():
    store = open_store(config.DATABASE_URL)
    observer = Observer(store)
    log.info("Observer polling %s store every %.0fs", store.name, observer.interval)
    await observer.run()


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    asyncio.run(main())
