"""Parse the bundled snapshot, store it, and write its dashboard to disk.

Run with:
    python examples/render_snapshot.py
"""

from __future__ import annotations

import time
from pathlib import Path

from promdash import InMemoryBackend, SnapshotStore, parse_metrics, render_dashboard

HERE = Path(__file__).parent


def main() -> None:
    text = (HERE / "cloudflared.prom").read_text(encoding="utf-8")
    store = SnapshotStore(InMemoryBackend())
    timestamp = int(time.time() * 1000)
    store.save(timestamp, text)

    snapshot = store.load(timestamp)
    assert snapshot is not None
    metrics = parse_metrics(snapshot.text)

    output = HERE / "dashboard.html"
    output.write_text(render_dashboard(metrics, snapshot.timestamp), encoding="utf-8")
    print(f"{len(metrics.gauges)} gauges, {len(metrics.counters)} counters -> {output}")


if __name__ == "__main__":
    main()
