# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""streamprobe CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..catalog.json_store import JsonCatalogStore
from ..config import ProbeSettings, load_probe_settings
from ..errors import ErrorCategory, StreamProbeError, error_category_to_reason
from ..log import setup_logging
from ..models.report import BatchReport
from ..models.target import ProbeResult, ProbeTarget
from ..runtime import StreamProbe

_CATEGORY_VALUES = {category.value for category in ErrorCategory}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check which live stream URLs currently serve playable content")
    parser.add_argument("catalog", nargs="?", help="JSON catalog file; working flags are written back to it")
    parser.add_argument(
        "--url",
        dest="urls",
        action="append",
        default=[],
        metavar="URL",
        help="Probe an ad-hoc URL instead of a catalog (repeatable, nothing is persisted)",
    )
    parser.add_argument("--workers", type=int, help="Number of concurrent probes (default 10)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default 8)")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly summary")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (many IPTV hosts use self-signed certificates)",
    )
    parser.add_argument(
        "--prune-broken",
        action="store_true",
        help="After probing, remove catalog entries that are not working",
    )
    parser.add_argument("--log-level", help="Logging level (default from STREAMPROBE_LOG_LEVEL or WARNING)")
    return parser


def _describe(result: ProbeResult) -> str:
    if result.detail in _CATEGORY_VALUES:
        return f"{result.label} ({error_category_to_reason(ErrorCategory(result.detail))})"
    return result.label


class ConsoleSink:
    """Prints one line per finished target."""

    def on_result(self, result: ProbeResult) -> None:
        mark = "✅" if result.works else "❌"
        print(f"{mark} {result.url} — {_describe(result)}", flush=True)

    def on_complete(self, report: BatchReport) -> None:
        return None


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True, ensure_ascii=False)
    sys.stdout.write("\n")


def _pretty_print(report: BatchReport, *, pruned: int | None = None) -> None:
    print(f"\nDone in {report.elapsed:.0f}s!")
    print(f"Results: ✅ {report.working} working | ❌ {report.broken} broken")
    reasons = report.reason_counts()
    if reasons:
        print("Failures: " + ", ".join(f"{reason}={count}" for reason, count in reasons.items()))
    if report.persist_failures:
        print(f"Catalog updates failed: {report.persist_failures}")
    if pruned is not None:
        print(f"Pruned {pruned} broken entries")


def _settings_from_args(args: argparse.Namespace) -> ProbeSettings:
    settings = load_probe_settings()
    if args.workers is not None:
        settings.workers = args.workers
    if args.timeout is not None:
        settings.timeout = args.timeout
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    return settings


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if bool(args.catalog) == bool(args.urls):
        parser.error("give either a catalog file or one or more --url options")
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")
    if args.prune_broken and not args.catalog:
        parser.error("--prune-broken needs a catalog file")

    settings = _settings_from_args(args)
    sink = None if args.json else ConsoleSink()
    pruned: int | None = None

    try:
        catalog = JsonCatalogStore(args.catalog) if args.catalog else None
        with StreamProbe(settings, catalog=catalog, sink=sink) as prober:
            if catalog is not None:
                if not args.json:
                    print(f"Validating {len(catalog.list_targets())} channels "
                          f"(workers: {settings.workers}, timeout: {settings.timeout:g}s)\n")
                report = prober.run_catalog()
                if args.prune_broken:
                    pruned = prober.prune_broken()
            else:
                targets = [ProbeTarget(id=index, url=url) for index, url in enumerate(args.urls, start=1)]
                report = prober.run(targets)
    except StreamProbeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        payload = report.to_dict()
        if pruned is not None:
            payload["pruned"] = pruned
        _print_json(payload)
    else:
        _pretty_print(report, pruned=pruned)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
