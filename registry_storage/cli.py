"""Command-line interface for inspecting and maintaining registry storage."""

import argparse
import logging
import sys

from registry_storage.config import StorageConfig
from registry_storage.storage import RegistryStorageError, S3Storage, UploadOptions
from registry_storage.utils import format_size


def get_storage(config: StorageConfig) -> S3Storage:
    """Get storage adapter for the given configuration."""
    config.validate()
    return S3Storage(config)


def cmd_put(args, storage: S3Storage):
    """Upload a file."""
    if args.buffer:
        with open(args.file, "rb") as f:
            content = f.read()
        result = storage.upload_buffer(content, UploadOptions(key=args.key, size=len(content)))
    else:
        result = storage.upload(args.file, UploadOptions(key=args.key))
    print(f"Uploaded {args.file} as {result.key} ({storage.get_path(result.key)})")


def cmd_get(args, storage: S3Storage):
    """Download an object."""
    storage.download(args.key, args.dest)
    print(f"Downloaded {args.key} to {args.dest}")


def cmd_rm(args, storage: S3Storage):
    """Remove an object."""
    storage.remove(args.key)
    print(f"Removed {args.key}")


def cmd_ls(args, storage: S3Storage):
    """List objects."""
    params = {}
    if args.prefix:
        params["prefix"] = args.prefix
    if args.max_keys:
        params["max_keys"] = args.max_keys

    if args.all:
        keys = storage.list_all(params)
        for key in sorted(keys):
            print(key)
        print(f"\n{len(keys)} object(s)")
        return

    page = storage.list(params)
    print("=" * 100)
    print(f"{'Key':<60} | {'Size':>8} | {'Last Modified':<24}")
    print("=" * 100)
    for entry in page["Contents"]:
        print(
            f"{entry['Key']:<60} | {format_size(entry.get('Size', 0)):>8} | "
            f"{entry.get('LastModified') or '-':<24}"
        )
    print("=" * 100)
    if page["IsTruncated"]:
        print("More results available; use --all to list every key")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Manage package tarballs stored in an S3-compatible bucket"
    )
    parser.add_argument(
        "--config", "-c", default="storage.toml", help="Path to config file (default: storage.toml)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    put_parser = subparsers.add_parser("put", help="Upload a file")
    put_parser.add_argument("file", help="Local file to upload")
    put_parser.add_argument("key", help="Storage key")
    put_parser.add_argument(
        "--buffer", action="store_true", help="Upload from memory as a gzip tarball"
    )

    get_parser = subparsers.add_parser("get", help="Download an object")
    get_parser.add_argument("key", help="Storage key")
    get_parser.add_argument("dest", help="Local destination path")

    rm_parser = subparsers.add_parser("rm", help="Remove an object")
    rm_parser.add_argument("key", help="Storage key")

    ls_parser = subparsers.add_parser("ls", help="List objects")
    ls_parser.add_argument("--prefix", "-p", help="Only list keys with this prefix")
    ls_parser.add_argument("--max-keys", "-m", type=int, help="Page size")
    ls_parser.add_argument(
        "--all", "-a", action="store_true", help="Follow pagination and list every key"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load configuration
    try:
        config = StorageConfig.from_file(args.config)
        storage = get_storage(config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    commands = {
        "put": cmd_put,
        "get": cmd_get,
        "rm": cmd_rm,
        "ls": cmd_ls,
    }

    # Execute command
    try:
        commands[args.command](args, storage)
    except (RegistryStorageError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
