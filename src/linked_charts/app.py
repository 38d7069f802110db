from __future__ import annotations

import argparse
import sys

from linked_charts.core.state import ViewSettings
from linked_charts.data.loaders import DEFAULT_ID_COLUMN, DatasetLoadError
from linked_charts.utils.log import log_exception


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Linked scatterplot and bar chart")
    parser.add_argument("--data", default="", help="CSV file to load (defaults to the bundled mtcars table)")
    parser.add_argument("--id-column", default=DEFAULT_ID_COLUMN)
    parser.add_argument("--x-attr", default="mpg")
    parser.add_argument("--y-attr", default="hp")
    parser.add_argument("--bar-attr", default="mpg")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", dest="debug", action="store_true", default=False)
    parser.add_argument("--no-debug", dest="debug", action="store_false")
    return parser


def settings_from_args(ns: argparse.Namespace) -> ViewSettings:
    return ViewSettings(
        data_path=ns.data,
        id_column=ns.id_column,
        x_attribute=ns.x_attr,
        y_attribute=ns.y_attr,
        bar_attribute=ns.bar_attr,
    )


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    ns = build_parser().parse_args(args)

    from linked_charts.ui.dash_app import main as dash_main

    try:
        dash_main(
            settings=settings_from_args(ns),
            host=ns.host,
            port=ns.port,
            debug=ns.debug,
            use_reloader=False,
        )
    except DatasetLoadError as exc:
        log_exception("load dataset")
        print(f"Could not load dataset: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
