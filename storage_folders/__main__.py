"""Command line entry point for folder listings."""
import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from .catalog import CatalogUnavailableError
from .controller import NotConnectedError, StorageController
from .formatting import load_package_info
from .listing import BucketNotFoundError, InvalidPrefixError
from .profiles import ConnectionProfile, ProfileStorage
from .settings import SettingsStorage


def build_parser() -> argparse.ArgumentParser:
    info = load_package_info()
    parser = argparse.ArgumentParser(prog="storage-folders", description=info.summary)
    parser.add_argument("--version", action="version", version=f"%(prog)s {info.version or 'dev'}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--settings", help="Settings file path.")
    parser.add_argument("--profiles", help="Connection profiles file path.")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list-folders", help="List folders in a storage bucket.")
    list_cmd.add_argument("bucket", help="Bucket name.")
    list_cmd.add_argument("--prefix", default="", help="Filter folders by prefix path.")
    list_cmd.add_argument(
        "--shallow",
        action="store_true",
        help="Only include the prefix folder and its immediate subfolders.",
    )
    list_cmd.add_argument("--profile", help="Saved connection profile to use.")
    list_cmd.add_argument("--endpoint-url", help="S3-compatible endpoint URL.")
    list_cmd.add_argument("--access-key", help="Access key id.")
    list_cmd.add_argument("--secret-key", help="Secret access key.")
    list_cmd.add_argument("--region", default="", help="Region name.")

    profile_cmd = commands.add_parser("profile", help="Manage connection profiles.")
    profile_actions = profile_cmd.add_subparsers(dest="action", required=True)
    add_cmd = profile_actions.add_parser("add", help="Add or replace a profile.")
    add_cmd.add_argument("name")
    add_cmd.add_argument("--endpoint-url", required=True)
    add_cmd.add_argument("--access-key", required=True)
    add_cmd.add_argument("--secret-key", default="")
    add_cmd.add_argument("--region", default="")
    profile_actions.add_parser("list", help="List saved profiles.")
    remove_cmd = profile_actions.add_parser("remove", help="Remove a profile.")
    remove_cmd.add_argument("name")
    return parser


def _run_list_folders(controller: StorageController, args: argparse.Namespace) -> int:
    if args.profile:
        controller.connect_with_profile(args.profile)
    elif args.endpoint_url or args.access_key:
        controller.connect(
            endpoint_url=args.endpoint_url or "",
            access_key=args.access_key or "",
            secret_key=args.secret_key or "",
            region=args.region,
        )
    elif controller.settings.last_connection:
        controller.connect_with_profile(controller.settings.last_connection)
    listing = controller.list_folders(
        bucket_name=args.bucket,
        prefix=args.prefix,
        include_subfolders=not args.shallow,
    )
    print(json.dumps(listing.to_dict(), indent=2))
    return 0


def _run_profile(controller: StorageController, args: argparse.Namespace) -> int:
    if args.action == "add":
        controller.save_profile(
            ConnectionProfile(
                name=args.name,
                endpoint_url=args.endpoint_url,
                access_key=args.access_key,
                secret_key=args.secret_key,
                region=args.region,
            )
        )
    elif args.action == "remove":
        controller.delete_profile(args.name)
    else:
        for profile in controller.list_profiles():
            print(f"{profile.name}\t{profile.endpoint_url}\t{profile.region or '-'}")
    return 0


def main(argv: Optional[Sequence[str]] = None, controller: StorageController | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if controller is None:
        controller = StorageController(
            storage=ProfileStorage(args.profiles),
            settings_storage=SettingsStorage(args.settings),
        )
    try:
        if args.command == "list-folders":
            return _run_list_folders(controller, args)
        return _run_profile(controller, args)
    except BucketNotFoundError as exc:
        print(f"ERROR {exc}", file=sys.stderr)
        return 3
    except (CatalogUnavailableError, NotConnectedError, InvalidPrefixError, ValueError) as exc:
        print(f"ERROR {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("ERROR interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
