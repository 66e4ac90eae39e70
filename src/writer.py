import csv
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Iterable, TextIO

from models import Snapshot

HEADER = ("client", "available", "held", "total", "locked")


def format_decimal(value: Decimal, precision: int = 4) -> str:
    """Format decimal with up to `precision` decimal places, removing trailing zeros."""
    with localcontext() as ctx:
        # quantize() needs room for every integer digit plus `precision` places
        ctx.prec = max(ctx.prec, value.adjusted() + precision + 2)
        quantized = value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_EVEN)
        normalized = quantized.normalize()
    if normalized == 0:
        # normalize() keeps the sign of -0
        return "0"
    return f"{normalized:f}"


def snapshot_row(snapshot: Snapshot, precision: int = 4) -> tuple:
    return (
        snapshot.client_id,
        format_decimal(snapshot.available, precision),
        format_decimal(snapshot.held, precision),
        format_decimal(snapshot.total, precision),
        str(snapshot.locked).lower(),
    )


def write_snapshots(snapshots: Iterable[Snapshot], stream: TextIO, precision: int = 4) -> int:
    """Write the header and one row per snapshot. Returns the number of rows written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    count = 0
    for snapshot in snapshots:
        writer.writerow(snapshot_row(snapshot, precision))
        count += 1
    return count
