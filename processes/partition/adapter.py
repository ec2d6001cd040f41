from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pipeline.io.affinity import AffinityLoadError, entities_of, load_affinity_matrix
from pipeline.io.files import write_json
from pipeline.io.validate import SCHEMAS_ROOT, load_schema, schema_version, validate_obj

from .config import load_config, to_partition_config, unknown_keys
from .service import run_validation
from .types import AffinityMatrix, DebugOptions, PartitionError

RESULT_SCHEMA = "partition_result"


def build_report(
    entities: Sequence[str],
    matrix: AffinityMatrix,
    max_groups: int,
    debug_options: DebugOptions | None = None,
    schemas_root: Path | None = None,
) -> dict[str, Any]:
    """Optimize, validate by enumeration and return a schema-checked report."""
    result = run_validation(entities, matrix, max_groups, debug_options)
    report: dict[str, Any] = {
        "schema_version": schema_version(RESULT_SCHEMA, schemas_root),
        "entities": list(entities),
        "max_groups": max_groups,
        **result.to_dict(),
    }
    schema = load_schema((schemas_root or SCHEMAS_ROOT) / f"{RESULT_SCHEMA}.schema.yaml")
    validate_obj(schema, report)
    return report


def _resolve_entities(
    matrix: Mapping[str, Any], configured: Sequence[str] | None
) -> list[str]:
    if configured is not None:
        return list(configured)
    return entities_of(dict(matrix))


def run_adapter(
    *,
    matrix_path: Path,
    config_path: Path | None = None,
    config_kv: Sequence[str] | None = None,
    max_groups: int | None = None,
    entities: Sequence[str] | None = None,
    out_path: Path | None = None,
    schemas_root: Path | None = None,
) -> dict[str, Any]:
    cfg = load_config(config_path, config_kv)
    if max_groups is not None:
        cfg["max_groups"] = max_groups
    if entities is not None:
        cfg["entities"] = list(entities)
    config = to_partition_config(cfg)

    matrix = load_affinity_matrix(matrix_path)
    names = _resolve_entities(matrix, config.entities)

    report = build_report(
        names, matrix, config.max_groups, config.debug_options(), schemas_root
    )

    # Report is schema-checked before anything touches disk
    if out_path is not None:
        write_json(report, out_path)
    return report


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="python -m processes.partition")
    p.add_argument("--matrix", type=Path, required=True, help="Affinity matrix CSV")
    p.add_argument("--config", type=Path)
    p.add_argument("--config-kv", nargs="*", help="Inline overrides key=value")
    p.add_argument("--max-groups", type=int)
    p.add_argument("--entities", type=str, help="Comma-separated entity subset/order")
    p.add_argument("--out", type=Path, help="Also write the JSON report here")
    p.add_argument(
        "--schemas-root",
        type=Path,
        help="Override schemas root (defaults to repo-relative pipeline/schemas)",
    )
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    entities = (
        [e.strip() for e in args.entities.split(",") if e.strip()]
        if args.entities
        else None
    )
    if args.verbose:
        unknown = unknown_keys(load_config(args.config, args.config_kv))
        if unknown:
            print(
                f"[partition] Warning: unknown config keys ignored: {', '.join(unknown)}",
                file=sys.stderr,
            )
    try:
        report = run_adapter(
            matrix_path=args.matrix,
            config_path=args.config,
            config_kv=args.config_kv,
            max_groups=args.max_groups,
            entities=entities,
            out_path=args.out,
            schemas_root=args.schemas_root,
        )
    except (PartitionError, AffinityLoadError) as e:
        print(f"[partition] error: {e}", file=sys.stderr)
        return 2

    if args.verbose:
        print(f"[partition] matrix: {args.matrix}", file=sys.stderr)
        print(
            f"[partition] score: {report['total_score']} optimal: {report['is_optimal']}",
            file=sys.stderr,
        )
        print(
            f"[partition] partitions checked: {report['validation']['total_partitions']}",
            file=sys.stderr,
        )
        if args.out:
            print(f"[partition] report: {args.out}", file=sys.stderr)

    sys.stdout.write(json.dumps(report, indent=2) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
