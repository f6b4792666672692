"""Command line front end: ``python -m app.client list|show|add|delete|stats``."""
import argparse
import sys
from pathlib import Path

from app.client.api import ApiError, LocationsClient
from app.client.display import render_entry, type_icon
from app.client.forms import LocationForm
from app.logger import setup_logger
from app.schemas.location import CATEGORIES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.client", description="Rate and browse toilet spots")
    parser.add_argument("--api-url", default=None, help="API root, e.g. http://localhost:8000/api")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list all spots, newest first")

    show = sub.add_parser("show", help="show one spot")
    show.add_argument("id")

    add = sub.add_parser("add", help="add a spot")
    add.add_argument("--location", required=True)
    add.add_argument("--type", required=True, help="one of: " + ", ".join(CATEGORIES))
    add.add_argument("--danger", type=int, required=True, help="danger rating 1-5")
    add.add_argument("--rating", type=int, required=True, help="location rating 1-5")
    add.add_argument("--description", required=True)
    add.add_argument("--lat", type=float)
    add.add_argument("--lng", type=float)
    add.add_argument("--image", type=Path)
    add.add_argument("--gps-from-photo", action="store_true", help="use the photo's EXIF position")

    delete = sub.add_parser("delete", help="delete a spot")
    delete.add_argument("id")

    sub.add_parser("stats", help="counts and averages per type")
    return parser


def run(args: argparse.Namespace, client: LocationsClient) -> int:
    if args.command == "list":
        entries = client.list_locations()
        if not entries:
            print("No spots yet.")
        for entry in entries:
            print(render_entry(entry))
            print()
        return 0

    if args.command == "show":
        entry = client.get_location(args.id)
        if entry is None:
            print(f"Spot {args.id} not found", file=sys.stderr)
            return 1
        print(render_entry(entry))
        return 0

    if args.command == "add":
        categories = client.categories()
        if args.type not in categories:
            print(f"Unknown type {args.type!r}, expected one of: {', '.join(categories)}", file=sys.stderr)
            return 1
        form = LocationForm(
            location=args.location,
            type=args.type,
            danger_rating=args.danger,
            description=args.description,
            location_rating=args.rating,
            latitude=args.lat,
            longitude=args.lng,
            image_path=args.image,
        )
        if args.gps_from_photo and not form.fill_coordinates_from_photo():
            print("No GPS position found in the photo", file=sys.stderr)
        entry = client.create_location(form)
        print(render_entry(entry))
        return 0

    if args.command == "delete":
        if not client.delete_location(args.id):
            print(f"Spot {args.id} not found", file=sys.stderr)
            return 1
        print(f"Deleted {args.id}")
        return 0

    if args.command == "stats":
        summary = client.summary()
        print(f"Total spots: {summary['totalLocations']}")
        for stat in summary["typeStats"]:
            print(
                f"{type_icon(stat['_id'])} {stat['_id']}: {stat['count']} "
                f"(avg rating {stat['avgRating']:.1f}, avg danger {stat['avgDanger']:.1f})"
            )
        return 0

    return 2


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger("app.client", log_level=args.log_level)
    client = LocationsClient(base_url=args.api_url, logger=logger)
    try:
        return run(args, client)
    except ApiError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        for violation in e.errors:
            print(f"  - {violation}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
