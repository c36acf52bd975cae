"""Benchmark: rule compilation and record validation throughput.

Measures how many rule texts can be compiled, and how many records
validated, per second using the public ruletag APIs.
"""
from __future__ import annotations

import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ruletag import ValidatorEngine, rules

_ITERATIONS: int = 5_000
_VALIDATE_ITERATIONS: int = 50_000

_SAMPLE_RULES = "irange(1, 2, 3, LIMIT), min(1), max(LIMIT)"


@dataclass
class Sample:
    code: str = rules("not_empty(), len(4), regex('^[A-Z]{2}[0-9]{2}$')")
    level: int = rules("irange(1, 2, 3), max(LIMIT)")


def _timed(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_compile_throughput() -> dict[str, object]:
    """Benchmark compiling a rule text into a field validator."""
    engine = ValidatorEngine()
    engine.register_constant_int("LIMIT", 100)
    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        engine.compile_rules(_SAMPLE_RULES, int)
    return _timed("compile_rules", _ITERATIONS, time.perf_counter() - start)


def bench_validate_throughput() -> dict[str, object]:
    """Benchmark validating a registered record."""
    engine = ValidatorEngine()
    engine.register_constant_int("LIMIT", 100)
    engine.register_record(Sample)
    record = Sample(code="AB12", level=2)
    start = time.perf_counter()
    for _ in range(_VALIDATE_ITERATIONS):
        engine.validate_record(record)
    return _timed("validate_record", _VALIDATE_ITERATIONS, time.perf_counter() - start)


def run_benchmark() -> dict[str, object]:
    """Run all throughput benchmarks and return their results."""
    return {
        "compile": bench_compile_throughput(),
        "validate": bench_validate_throughput(),
    }


if __name__ == "__main__":
    results = run_benchmark()
    output_path = Path(__file__).parent / "results" / "baseline.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(results, indent=2))
    print(f"\nResults saved to {output_path}")
