# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "tlejax"]
#
# [tool.uv.sources]
# tlejax = { path = ".." }
# ///
"""Sweep TLEs from a file over a range of offsets around epoch with SGP4.

Reads consecutive line-1 / line-2 pairs (an optional name line before each
pair is skipped), initializes every satellite, and propagates each near-Earth
record over ``[start, stop]`` minutes from its epoch in a single vectorized
call. Deep-space and failed records are reported and skipped; offsets at
which an orbit has decayed are reported with their error code.

Requires tlejax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/propagate_tle.py TLE_FILE [OPTIONS]

Examples:
    # Verification-style sweep: one day either side of epoch every 6 hours
    uv run examples/propagate_tle.py stations.txt

    # Print every state at a 10 minute step for the first 90 minutes
    uv run examples/propagate_tle.py stations.txt --start 0 --stop 90 --step 10 --verbose
"""

import logging
from pathlib import Path
from typing import Annotated

import jax.numpy as jnp
import numpy as np
import typer

from tlejax.sgp4 import (
    ErrorKind,
    InvalidElementsError,
    RecordStatus,
    parse_tle,
    sgp4_init,
    sgp4_propagate_batch,
)


def _read_pairs(path: Path) -> list[tuple[str, str]]:
    """Return (line1, line2) pairs, skipping name lines and blanks."""
    lines = [ln.rstrip() for ln in path.read_text().splitlines() if ln.strip()]
    pairs = []
    for idx, line in enumerate(lines[:-1]):
        if line.startswith("1 ") and lines[idx + 1].startswith("2 "):
            pairs.append((line, lines[idx + 1]))
    return pairs


def main(
    tle_file: Annotated[Path, typer.Argument(help="File of two-line element sets", exists=True)],
    start: Annotated[float, typer.Option(help="Start offset in minutes from epoch")] = -1440.0,
    stop: Annotated[float, typer.Option(help="Stop offset in minutes from epoch")] = 1440.0,
    step: Annotated[float, typer.Option(help="Step in minutes")] = 360.0,
    gravity: Annotated[str, typer.Option(help="Gravity model (wgs72, wgs84, wgs72old)")] = "wgs72",
    opsmode: Annotated[str, typer.Option(help="Sidereal time mode: 'i' or 'a'")] = "i",
    verbose: Annotated[bool, typer.Option(help="Print every state vector")] = False,
) -> None:
    """Propagate every TLE in a file over a range of offsets."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    pairs = _read_pairs(tle_file)
    print(f"Read {len(pairs)} TLEs from {tle_file}")

    times = jnp.arange(start, stop + 0.5 * step, step)
    counts = {status: 0 for status in RecordStatus}

    for line1, line2 in pairs:
        try:
            elements = parse_tle(line1, line2)
        except InvalidElementsError as exc:
            print(f"  skipped malformed TLE: {exc}")
            continue

        record = sgp4_init(elements, gravity, opsmode)
        counts[record.status] += 1
        if not record.initialized:
            print(f"  {elements.satnum_str}: {record.status.value} {record.error_message}")
            continue

        batch = sgp4_propagate_batch(record, times)
        errors = np.asarray(batch.error)
        for t, code in zip(np.asarray(times), errors):
            if code:
                print(f"  {elements.satnum_str} t={t:10.2f} min: {ErrorKind(int(code)).name}")

        if verbose:
            for t, r, v in zip(np.asarray(times), np.asarray(batch.r), np.asarray(batch.v)):
                print(
                    f"  {elements.satnum_str} {t:10.2f} "
                    f"{r[0]:16.8f} {r[1]:16.8f} {r[2]:16.8f} "
                    f"{v[0]:13.9f} {v[1]:13.9f} {v[2]:13.9f}"
                )

    print(
        "Initialized: {}, failed: {}, deep-space (skipped): {}".format(
            counts[RecordStatus.INITIALIZED],
            counts[RecordStatus.FAILED],
            counts[RecordStatus.DEEP_SPACE_UNSUPPORTED],
        )
    )


if __name__ == "__main__":
    typer.run(main)
