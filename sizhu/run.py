"""
CLI wrapper for build_chart().

Usage:
    sizhu --birth-date YYYY-MM-DD --birth-time HH:MM --city CITY \
        [--no-solar-time] [--interpret] [--categories wealth,career]
    sizhu --birth-date YYYY-MM-DD --birth-time HH:MM \
        --longitude LON --latitude LAT [--utc-offset HOURS]
    sizhu --list-cities
"""

import argparse
import json
import logging
import os
import sys

from sizhu.chart import build_chart
from sizhu.errors import BaziError, InvalidInputError
from sizhu.interpret import CATEGORIES
from sizhu.locations import CITIES, Location, location_from_coordinates

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SIZHU_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_categories(value):
    categories = [c.strip().lower() for c in value.split(",") if c.strip()]
    if not categories:
        raise argparse.ArgumentTypeError("no categories given")
    unknown = [c for c in categories if c not in CATEGORIES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown categories {', '.join(unknown)}; choose from {', '.join(CATEGORIES)}"
        )
    return categories


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sizhu",
        description="Compute a Four Pillars (BaZi) chart with true solar time correction.",
    )
    parser.add_argument("--birth-date", dest="birth_date", help="YYYY-MM-DD")
    parser.add_argument("--birth-time", dest="birth_time", help="HH:MM, 24h local clock time")
    parser.add_argument("--city", help="gazetteer city, Chinese or pinyin name")
    parser.add_argument("--longitude", type=float, default=None)
    parser.add_argument("--latitude", type=float, default=None)
    parser.add_argument("--utc-offset", dest="utc_offset", type=float, default=None,
                        help="UTC offset in hours; timezone is detected when omitted")
    parser.add_argument("--no-solar-time", dest="solar_time", action="store_false",
                        help="use the clock time as given")
    parser.add_argument("--interpret", action="store_true",
                        help="include templated commentary")
    parser.add_argument("--categories", type=_parse_categories, default=None,
                        help=f"comma-separated subset of {','.join(CATEGORIES)}")
    parser.add_argument("--list-cities", dest="list_cities", action="store_true",
                        help="print the gazetteer and exit")
    parser.add_argument("--log-level", dest="log_level", type=str.upper, choices=LOG_LEVELS,
                        default=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
    return parser


def _location_from_args(args):
    if args.city:
        return args.city
    if args.longitude is None and args.latitude is None:
        return None
    if args.longitude is None or args.latitude is None:
        raise InvalidInputError("--longitude and --latitude must be given together")
    if args.utc_offset is not None:
        return Location(
            name=f"{args.latitude:.4f},{args.longitude:.4f}",
            longitude=args.longitude,
            latitude=args.latitude,
            utc_offset_minutes=round(args.utc_offset * 60),
        )
    return location_from_coordinates(args.latitude, args.longitude)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # An unrecognised SIZHU_LOG_LEVEL falls back to WARNING
    level = args.log_level if args.log_level in LOG_LEVELS else "WARNING"
    logging.basicConfig(level=getattr(logging, level),
                        format="%(levelname)s %(name)s: %(message)s")

    if args.list_cities:
        print(json.dumps([c.to_dict() for c in CITIES], ensure_ascii=False, indent=2))
        return

    if not args.birth_date or not args.birth_time:
        parser.error("--birth-date and --birth-time are required")

    try:
        result = build_chart(
            birth_date=args.birth_date,
            birth_time=args.birth_time,
            location=_location_from_args(args),
            use_true_solar_time=args.solar_time,
            interpret=args.interpret or args.categories is not None,
            categories=args.categories,
        )
    except BaziError as exc:
        logger.debug("Chart failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)

    print(json.dumps(result, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
