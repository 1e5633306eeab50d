from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from treeline_core import (
    ChartSession,
    ChartStore,
    FeedClient,
    IngestionTask,
    TreelineConfig,
    Zoomed,
    initial_state,
    load_config,
)
from treeline_plot.chart import format_value
from treeline_plot.scales import ZoomTransform
from treeline_plot.series import DisplayMode, series_total


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="treeline")
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [treeline] table.")
    parser.add_argument("--feed-url", default=None)
    parser.add_argument("--feed-file", type=Path, default=None, help="Read the feed from a local JSON file.")
    parser.add_argument("--timezone", default=None, help="IANA zone used for day boundaries. Default: UTC.")
    parser.add_argument("--timeout", type=float, default=None, help="Feed request timeout in seconds.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("summary", help="Fetch the feed and print the daily series and total.")

    probe = sub.add_parser("probe", help="Load the series, apply a viewport and zoom, and hit-test a pointer.")
    probe.add_argument("--width", type=float, default=1000.0)
    probe.add_argument("--height", type=float, default=300.0)
    probe.add_argument("--zoom-k", type=float, default=1.0)
    probe.add_argument("--zoom-x", type=float, default=0.0)
    probe.add_argument("--mode", choices=[m.value for m in DisplayMode], default=DisplayMode.CUMULATIVE.value)
    probe.add_argument("--pointer-x", type=float, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    feed_url = args.feed_file.resolve().as_uri() if args.feed_file is not None else args.feed_url
    try:
        config = load_config(
            args.config,
            overrides={"feed_url": feed_url, "timezone": args.timezone, "request_timeout_s": args.timeout},
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    store = ChartStore(
        initial_state(
            width=config.initial_width,
            height=config.initial_height,
            axis_height=config.axis_height,
        )
    )
    if not _ingest(config, store):
        return 1

    if args.command == "summary":
        _print_summary(store)
        return 0

    if args.command == "probe":
        session = ChartSession(store, tz=config.tzinfo())
        session.resize(args.width, args.height)
        store.apply(Zoomed(transform=ZoomTransform(x=args.zoom_x, y=0.0, k=args.zoom_k)))
        session.select_mode(DisplayMode(args.mode))
        if args.pointer_x is not None:
            session.pointer_moved(args.pointer_x)
        _print_probe(session)
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _ingest(config: TreelineConfig, store: ChartStore) -> bool:
    task = IngestionTask(
        FeedClient(config.feed_url, timeout_s=config.request_timeout_s),
        deliver=store.dispatch,
        tz=config.tzinfo(),
    )
    task.start()
    task.wait()
    store.process_pending()
    state = store.state
    if state.ingestion == "failed":
        print(f"error: ingestion failed: {state.ingestion_error}", file=sys.stderr)
        return False
    return True


def _print_summary(store: ChartStore) -> None:
    state = store.state
    for point in state.trees:
        print(f"{point.date.date().isoformat()}  total={format_value(point.total)}  cumulative={format_value(point.cumulative)}")
    print(f"trees planted: {format_value(series_total(state.trees))}")


def _print_probe(session: ChartSession) -> None:
    frame = session.frame()
    state = session.store.state
    print(f"transform: x={state.transform.x:g} y={state.transform.y:g} k={state.transform.k:g}")
    print(f"viewport: {state.dimensions.width:g}x{state.dimensions.height:g} mode={frame.display_mode.value}")
    if frame.is_empty:
        print("nothing to render")
        return
    print("days: " + " ".join(f"{t.label}@{t.pixel}" for t in frame.day_ticks))
    print("months: " + " ".join(f"{t.label}@{t.pixel}" for t in frame.month_ticks))
    if frame.hovered is None or frame.marker is None:
        print("hover: none")
        return
    print(f"hover: {frame.hovered.date.date().isoformat()} value={frame.marker.label} at ({frame.marker.x:.1f}, {frame.marker.y:.1f})")


if __name__ == "__main__":
    raise SystemExit(main())
