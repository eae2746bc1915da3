#!/usr/bin/env python3
"""
Sales Engine CLI — summary printout, Excel report, and API server.

USAGE:
  python -m sales_engine.cli summary                       # KPIs + top lists
  python -m sales_engine.cli summary --top 5 --data-dir ./data
  python -m sales_engine.cli report                        # Excel summary report
  python -m sales_engine.cli report --output ./out/summary.xlsx
  python -m sales_engine.cli serve --port 8000             # Start API server
"""
from __future__ import annotations

import argparse
import logging
import os
from datetime import datetime
from pathlib import Path

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.config import DATA_FOLDER, REPORTS_FOLDER, TOP_N_DEFAULT
from sales_engine.data.store import SalesEngine
from sales_engine.reports import summary_report


def _load(args) -> SalesAnalyst:
    folder = Path(args.data_dir)
    print(f"  Loading CSVs from {folder}...")
    engine = SalesEngine.from_folder(folder)
    for name, count in engine.row_counts().items():
        print(f"    {name:<15}{count:>10,}")
    return SalesAnalyst(engine)


def _fmt(value) -> str:
    return "n/a" if value is None else f"{value:,}"


def cmd_summary(args):
    """Print dataset KPIs and the headline rankings."""
    print("\n" + "=" * 60)
    print("  SALES ENGINE — SUMMARY")
    print("=" * 60)
    analyst = _load(args)
    summary = summary_report.build_summary(analyst, args.top)
    kpis = summary["kpis"]

    print("\n  KPIs")
    print(f"    Avg items / merchant     {_fmt(kpis['average_items_per_merchant'])}"
          f"  (std dev {_fmt(kpis['items_per_merchant_std_dev'])})")
    print(f"    Avg invoices / merchant  {_fmt(kpis['average_invoices_per_merchant'])}"
          f"  (std dev {_fmt(kpis['invoices_per_merchant_std_dev'])})")
    print(f"    Avg item price           ${_fmt(kpis['average_item_price'])}")
    print(f"    One-time buyers          {_fmt(kpis['one_time_buyers'])}")
    for status, share in summary["status_share"].items():
        print(f"    {status.title():<25}{_fmt(share)}%")

    print(f"\n  TOP {args.top} BUYERS")
    for row in summary["top_buyers"]:
        print(f"    {row['rank']:<4}{row['name'][:36]:<38}${row['paid_total']:>12,.2f}")

    print(f"\n  TOP {args.top} MERCHANTS BY REVENUE")
    for row in summary["top_revenue_earners"]:
        print(f"    {row['rank']:<4}{row['name'][:36]:<38}${row['revenue']:>12,.2f}")

    top_days = [row["day"] for row in summary["weekdays"] if row["top_day"]]
    print(f"\n  Golden items: {len(summary['golden_items'])}")
    print(f"  Top invoice days: {', '.join(top_days) or 'none'}")
    print("=" * 60 + "\n")


def cmd_report(args):
    """Write the Excel summary report."""
    analyst = _load(args)
    out_path = Path(args.output) if args.output else REPORTS_FOLDER / f"Sales_Summary_{datetime.now():%Y%m%d}.xlsx"
    summary_report.generate_excel(analyst, out_path, args.top)
    print(f"\n  Report saved to: {out_path}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    from sales_engine.main import create_app

    print(f"\nStarting Sales Engine API on port {args.port}...")
    if args.reload:
        # The reloader re-imports the app in a child process; hand the folder over via env
        os.environ["SALES_ENGINE_DATA_DIR"] = str(Path(args.data_dir).resolve())
        uvicorn.run("sales_engine.main:app", host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(Path(args.data_dir)), host=args.host, port=args.port)


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Sales Engine — merchant, customer and item analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-dir", default=str(DATA_FOLDER), help="Folder holding the CSV exports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log loading details")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    summary_parser = subparsers.add_parser("summary", help="Print KPIs and rankings")
    summary_parser.add_argument("--top", type=int, default=TOP_N_DEFAULT, help="Rows per ranking")
    summary_parser.set_defaults(func=cmd_summary)

    report_parser = subparsers.add_parser("report", help="Generate the Excel summary report")
    report_parser.add_argument("--top", type=int, default=TOP_N_DEFAULT, help="Rows per ranking")
    report_parser.add_argument("--output", help="Output .xlsx path")
    report_parser.set_defaults(func=cmd_report)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
