# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "orbitview"]
#
# [tool.uv.sources]
# orbitview = { path = ".." }
# ///
"""Track a satellite catalog in real time and report links and conjunctions.

Downloads element sets (mirror fallback with a local cache), hands them to
the background worker, and runs a fixed-rate frame loop.  Each frame
computes Earth-fixed positions for the whole catalog; the selected object's
neighbors within the link radius and, optionally, the pairs closer than the
conjunction threshold are printed as they change.

Usage:
    uv run examples/track_catalog.py [OPTIONS]

Examples:
    # Ten seconds of frames for the whole catalog
    uv run examples/track_catalog.py --seconds 10

    # Follow the ISS with a 1,000 km link radius and conjunction screening
    uv run examples/track_catalog.py --focus 25544 --link-radius 1000 --conjunctions

    # Offline run from a saved three-line file
    uv run examples/track_catalog.py --tle-file stations.txt --limit 200
"""

import logging
import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Annotated

import numpy as np
import typer

from orbitview import (
    CatalogClient,
    FrameScheduler,
    PipelineConfig,
    parse_tle_text,
    valid_mask,
)
from orbitview.pipeline import WorkerError
from orbitview.constants import KM2M


def main(
    tle_file: Annotated[
        Path | None, typer.Option(help="Read element sets from a file instead of downloading")
    ] = None,
    limit: Annotated[int | None, typer.Option(help="Process only the first N objects")] = None,
    focus: Annotated[
        str | None, typer.Option(help="Catalog number of the object to follow")
    ] = None,
    link_radius: Annotated[float, typer.Option(help="Link radius in km")] = 2500.0,
    conjunctions: Annotated[
        bool, typer.Option(help="Screen every frame for close pairs")
    ] = False,
    threshold: Annotated[float, typer.Option(help="Conjunction threshold in km")] = 10.0,
    fps: Annotated[float, typer.Option(help="Frame requests per second")] = 30.0,
    seconds: Annotated[float, typer.Option(help="Wall-clock duration of the run")] = 5.0,
    speedup: Annotated[float, typer.Option(help="Simulated seconds per wall-clock second")] = 1.0,
    verbose: Annotated[bool, typer.Option(help="Log worker activity")] = False,
) -> None:
    """Run the real-time position pipeline against a live catalog."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    # ── Stage 1: Element sets ────────────────────────────────────────────
    t0 = time.perf_counter()
    if tle_file is not None:
        element_sets = parse_tle_text(tle_file.read_text(encoding="utf-8"))
        print(f"Read {len(element_sets)} element sets from {tle_file}")
    else:
        element_sets = CatalogClient().fetch()
        print(f"Fetched {len(element_sets)} element sets in {time.perf_counter() - t0:.1f}s")

    if limit is not None:
        element_sets = element_sets[:limit]
    if not element_sets:
        print("ERROR: no element sets to track.")
        sys.exit(1)

    names = {es.identifier: es.name or es.identifier for es in element_sets}
    config = PipelineConfig(
        link_radius=link_radius * KM2M,
        cell_size=link_radius * KM2M,
        conjunction_threshold=threshold * KM2M,
    )

    with FrameScheduler() as scheduler:
        # ── Stage 2: Worker initialization ──────────────────────────────
        t0 = time.perf_counter()
        info = scheduler.load_catalog(element_sets, config=config).result()
        if isinstance(info, WorkerError):
            print(f"ERROR: {info.message}")
            sys.exit(1)
        if info.dropped:
            print(f"  Dropped {len(info.dropped)} malformed element sets")
        print(f"Prepared {info.record_count} records in {time.perf_counter() - t0:.2f}s")

        scheduler.select(focus)
        scheduler.set_conjunctions(conjunctions)

        # ── Stage 3: Frame loop ──────────────────────────────────────────
        start = datetime.now(timezone.utc)
        period = 1.0 / fps
        requested = skipped = accepted = 0
        compute_times: list[float] = []
        last_neighbors: tuple[int, ...] | None = None
        last_pairs: tuple[tuple[int, int], ...] = ()
        posted_at = 0.0

        while (elapsed := (datetime.now(timezone.utc) - start).total_seconds()) < seconds:
            frame_start = time.perf_counter()
            instant = start + timedelta(seconds=elapsed * speedup)

            if scheduler.request_frame(instant):
                requested += 1
                posted_at = frame_start
            else:
                skipped += 1

            frame = scheduler.poll()
            if frame is not None:
                accepted += 1
                compute_times.append(time.perf_counter() - posted_at)

                if frame.focal_index is not None and frame.neighbors != last_neighbors:
                    last_neighbors = frame.neighbors
                    linked = ", ".join(names[info.identifiers[i]] for i in frame.neighbors[:8])
                    more = f" (+{len(frame.neighbors) - 8})" if len(frame.neighbors) > 8 else ""
                    print(f"  {instant:%H:%M:%S} {len(frame.neighbors)} links: {linked}{more}")

                pairs = tuple((c.first, c.second) for c in frame.conjunctions)
                if pairs != last_pairs:
                    last_pairs = pairs
                    for c in frame.conjunctions:
                        print(
                            f"  {instant:%H:%M:%S} close pair "
                            f"{names[info.identifiers[c.first]]:<25} "
                            f"{names[info.identifiers[c.second]]:<25} "
                            f"{c.distance / KM2M:8.2f} km"
                        )

            time.sleep(max(0.0, period - (time.perf_counter() - frame_start)))

        frame = scheduler.wait() or scheduler.latest

    # ── Summary ──────────────────────────────────────────────────────────
    print("\n── Summary ──")
    print(f"  Frames requested: {requested}, skipped while busy: {skipped}, accepted: {accepted}")
    if compute_times:
        print(f"  Median frame latency: {1e3 * float(np.median(compute_times)):.1f} ms")
    if frame is not None:
        print(f"  Valid positions: {int(valid_mask(frame.positions).sum())}/{frame.record_count}")
        if frame.grid_stats is not None:
            stats = frame.grid_stats
            print(
                f"  Grid: {stats.bucket_count} cells, "
                f"{stats.average_occupancy:.1f} avg / {stats.max_occupancy} max per cell"
            )


if __name__ == "__main__":
    typer.run(main)
