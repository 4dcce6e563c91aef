#!/usr/bin/env python3
"""
Comparison Cost Analysis for the Record Store

Tests:
1. Point lookups on a store built from sequential ids (degenerate tree)
2. Point lookups on a store built from shuffled ids
3. Id range scans
4. Last name prefix scans
5. Lookups after overwriting and deleting part of the data

Metrics:
- Key comparisons per operation (min, mean, median, p95, max)
- Index heights
"""

import random
import statistics
import string
import time

from recordstore import RecordStore
from recordstore.models import Record


class CostAnalysis:
    def __init__(self, record_count: int, seed: int = 42):
        self.record_count = record_count
        self.rng = random.Random(seed)
        self.store: RecordStore | None = None

    def setup(self, shuffled: bool) -> float:
        """Build a fresh store; returns the build time in seconds."""
        ids = list(range(self.record_count))
        if shuffled:
            self.rng.shuffle(ids)

        self.store = RecordStore()
        start_time = time.perf_counter()
        for record_id in ids:
            self.store.insert_record(
                Record(id=record_id, last=self.generate_last_name(), first=f"first{record_id}")
            )
        return time.perf_counter() - start_time

    def generate_last_name(self, length: int = 6) -> str:
        return "".join(self.rng.choices(string.ascii_letters, k=length))

    @staticmethod
    def calculate_stats(counts: list[int]) -> dict:
        if not counts:
            return {}

        sorted_counts = sorted(counts)
        return {
            "min": min(counts),
            "max": max(counts),
            "mean": statistics.mean(counts),
            "median": statistics.median(counts),
            "p95": sorted_counts[int(len(sorted_counts) * 0.95)],
        }

    def test_point_lookups(self, queries: int, description: str) -> dict:
        counts = []
        hits = 0
        for _ in range(queries):
            # Ask for a few absent ids as well
            result = self.store.find_by_id(self.rng.randrange(int(self.record_count * 1.1)))
            counts.append(result.comparisons)
            hits += result.found

        return {"test": description, "queries": queries, "hits": hits, **self.calculate_stats(counts)}

    def test_range_scans(self, queries: int, width: int) -> dict:
        counts = []
        returned = []
        for _ in range(queries):
            lo = self.rng.randrange(self.record_count)
            result = self.store.range_by_id(lo, lo + width - 1)
            counts.append(result.comparisons)
            returned.append(len(result.records))

        return {
            "test": f"Range Scan (width {width})",
            "queries": queries,
            "mean_records": statistics.mean(returned),
            **self.calculate_stats(counts),
        }

    def test_prefix_scans(self, queries: int, prefix_length: int) -> dict:
        counts = []
        returned = []
        for _ in range(queries):
            prefix = "".join(self.rng.choices(string.ascii_letters, k=prefix_length))
            result = self.store.prefix_by_secondary(prefix)
            counts.append(result.comparisons)
            returned.append(len(result.records))

        return {
            "test": f"Prefix Scan (length {prefix_length})",
            "queries": queries,
            "mean_records": statistics.mean(returned),
            **self.calculate_stats(counts),
        }

    def churn(self, fraction: float) -> None:
        """Overwrite half and delete half of a random fraction of the ids."""
        victims = self.rng.sample(range(self.record_count), int(self.record_count * fraction))
        for i, record_id in enumerate(victims):
            if i % 2:
                self.store.delete_by_id(record_id)
            else:
                self.store.insert_record(Record(id=record_id, last=self.generate_last_name()))

    @staticmethod
    def print_results(results: dict):
        print(f"\n  {results['test']}")
        for key, value in results.items():
            if key == "test":
                continue
            if isinstance(value, float):
                print(f"    {key:>14}: {value:,.2f}")
            else:
                print(f"    {key:>14}: {value:,}")

    def print_shape(self):
        stats = self.store.stats()
        print(f"\n  heap slots: {stats.heap_slots:,}  live: {stats.live_records:,}  "
              f"deleted: {stats.deleted_slots:,}")
        print(f"  unique index height: {stats.unique_index_height:,}  "
              f"secondary index height: {stats.secondary_index_height:,}")


def run(record_count: int, queries: int):
    analysis = CostAnalysis(record_count)

    for shuffled in (False, True):
        order = "Shuffled" if shuffled else "Sequential"
        print(f"\n{'='*60}")
        print(f"{order} Build: {record_count:,} records")
        print(f"{'='*60}")

        elapsed = analysis.setup(shuffled)
        print(f"  built in {elapsed:.3f}s")
        analysis.print_shape()

        analysis.print_results(analysis.test_point_lookups(queries, f"{order} Point Lookup"))
        analysis.print_results(analysis.test_range_scans(queries, width=50))
        analysis.print_results(analysis.test_prefix_scans(queries, prefix_length=2))

        analysis.churn(fraction=0.2)
        print("\n  after churn (20% overwritten or deleted):")
        analysis.print_shape()
        analysis.print_results(analysis.test_point_lookups(queries, f"{order} Point Lookup (churned)"))


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "quick":
        run(record_count=500, queries=200)
    else:
        run(record_count=5000, queries=1000)
