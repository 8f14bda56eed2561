"""Multi-event API example: fill electrons for the bundled sample events.

Run from repository root without installation:
    PYTHONPATH=src python examples/fill_events_api.py
"""

from __future__ import annotations

from pathlib import Path

from elefill import EventProcessor, load_config_json
from elefill.io import load_events_json, write_electrons_table


def main() -> int:
    """Load config and events, fill electrons, and write a parquet table."""
    config = load_config_json("examples/data/config.json")
    processor = EventProcessor.from_config(config)
    events = load_events_json("examples/data/events.json")
    outputs = list(processor.process_events(events))
    for out in outputs:
        for ele in out.electrons:
            print(f"{out.event_id}: pt={ele.pt:.1f} combined_iso={ele.combined_iso:.3f} match_hlt={ele.match_hlt}")
    out_path = Path("examples/electrons_output.parquet")
    excluded = processor.excluded_fields(is_real_data=False)[config.electrons.name]
    write_electrons_table(out_path, outputs, excluded=excluded)
    print(f"Wrote {sum(len(o.electrons) for o in outputs)} electrons to {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
