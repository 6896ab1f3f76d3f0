"""Benchmark: Polar lex, parse and format throughput.

Measures how many parse and format passes over a sample policy can
complete per second using the public polar_lang API.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import polar_lang

_ITERATIONS: int = 2_000
_FORMAT_ITERATIONS: int = 2_000

_SAMPLE_POLAR = """
# Roles and permissions for a small code-hosting service.
actor User {}

resource Organization {
  roles = ["owner", "member"];
  permissions = ["read", "add_member"];

  "read" if "member";
  "add_member" if "owner";
  "member" if "owner";
}

resource Repository {
  roles = ["reader", "maintainer"];
  permissions = ["read", "push", "delete"];
  relations = {parent: Organization};

  "read" if "reader";
  "push" if "maintainer";
  "reader" if "member" on "parent";
  "maintainer" if "owner" on "parent";
}

has_relation(org: Organization, "parent", repo: Repository) if
  org = repo.organization;

has_role(user: User, name: String, org: Organization) if
  role in user.roles and
  role.name = name and
  role.org_id = org.id;

allow(actor, action, resource) if
  has_permission(actor, action, resource);

allow(_actor: User{admin: true}, _action, _resource);

?= allow(new User(name: "alice", admin: false), "read", new Repository(id: 1));
"""


def bench_parse_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark Polar policy parsing throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(iterations):
        polar_lang.parse_lines(_SAMPLE_POLAR)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "polar_parse_throughput",
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


def bench_format_throughput(iterations: int = _FORMAT_ITERATIONS) -> dict[str, object]:
    """Benchmark rendering a parsed policy back to Polar text.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    lines = polar_lang.parse_lines(_SAMPLE_POLAR)

    start = time.perf_counter()
    for _ in range(iterations):
        polar_lang.format(lines)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "polar_format_throughput",
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


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_parse_throughput, "parse_throughput_baseline.json"),
        (bench_format_throughput, "format_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
