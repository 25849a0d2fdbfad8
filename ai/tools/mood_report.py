#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Mood entries -> trend report (JSON)
Usage:
  python tools/mood_report.py --input data/raw/entries.json
  python tools/mood_report.py --input data/raw/entries.jsonl --days 30 --tz Asia/Tokyo
  python tools/mood_report.py --input data/raw/entries.json --now-ms 1760000000000 --out report.json
"""
import os, sys, json, argparse, logging

# Make mood_engine importable when run from a source checkout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(os.path.join(ROOT, "services"))

from mood_engine import aggregate, generate_insights, insights_to_dicts, load_entries
from mood_engine import config


def build_report(path, days=None, now_ms=None, tz_name=None):
    entries = load_entries(path)
    tz = config.resolve_tz(tz_name)
    result = aggregate(entries, days, now_ms=now_ms, tz=tz)
    insights = generate_insights(entries, result)
    return {
        "aggregate": result.to_dict(),
        "insights": insights_to_dicts(insights),
    }


def main(argv=None):
    ap = argparse.ArgumentParser(description="Aggregate mood entries and print trends + insights as JSON.")
    ap.add_argument("--input", required=True)
    ap.add_argument("--days", type=int, default=None, help="rolling window in days (default: MOOD_ENGINE_DEFAULT_WINDOW_DAYS)")
    ap.add_argument("--now-ms", type=int, default=None, help="fixed 'now' in epoch ms (default: current time)")
    ap.add_argument("--tz", default=None, help="IANA timezone (default: MOOD_ENGINE_TZ)")
    ap.add_argument("--out", default=None)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        report = build_report(args.input, days=args.days, now_ms=args.now_ms, tz_name=args.tz)
    except (FileNotFoundError, ValueError) as e:
        raise SystemExit(f"error: {e}")

    text = json.dumps(report, ensure_ascii=False, indent=2)
    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as w:
            w.write(text + "\n")
        print(f"[done] entries={report['aggregate']['entryCount']}, out={args.out}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    main()
