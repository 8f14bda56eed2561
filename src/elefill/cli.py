"""Command-line interface for filling electron records from event inputs."""

from __future__ import annotations

import argparse
import logging

from .config import load_config_json
from .io import load_events_json, write_electrons_table, write_super_clusters_table, write_trigger_table
from .processor import EventProcessor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="electron-filler",
        description="Select electrons, correct isolation, match photons and trigger objects, and write ranked records.",
    )
    parser.add_argument("--events", required=True, help="Input JSON with key 'events'.")
    parser.add_argument(
        "--config",
        required=True,
        help="Run configuration JSON with an 'electrons' block (effective-area tables, cuts, trigger filters).",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output table file for electrons (.parquet, .csv, .pkl).",
    )
    parser.add_argument("--clusters-out", default=None, help="Optional output table for cluster records.")
    parser.add_argument(
        "--trigger-table",
        default=None,
        help="Optional output table listing trigger categories and their filter labels.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint: load configuration and events, run the fillers, write tables."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    config = load_config_json(args.config)
    processor = EventProcessor.from_config(config)
    events = load_events_json(args.events)
    outputs = list(processor.process_events(events))

    # Persisted schema depends on the sample type; mixed inputs keep the MC-only columns.
    is_real_data = bool(events) and all(e.is_real_data for e in events)
    excluded = processor.excluded_fields(is_real_data)[config.electrons.name]
    write_electrons_table(args.out, outputs, excluded=excluded)
    n_electrons = sum(len(o.electrons) for o in outputs)
    logger.info("Wrote %d electrons from %d events to %s", n_electrons, len(outputs), args.out)

    if args.clusters_out:
        write_super_clusters_table(args.clusters_out, outputs)
    if args.trigger_table:
        if not config.electrons.use_trigger:
            logger.warning("Trigger usage is disabled; not writing %s", args.trigger_table)
        else:
            write_trigger_table(args.trigger_table, config.electrons.hlt_filters)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
