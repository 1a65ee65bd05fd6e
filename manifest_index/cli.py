import argparse
import json
import sys
import xml.etree.ElementTree as ET

from manifest_index import log, setup_logger
from manifest_index.config_loader import ConfigError, load_settings
from manifest_index.index import COMPONENT_TAGS, ManifestError, ManifestIndex


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manifest-index",
        description="Answer questions about an AndroidManifest.xml.",
    )
    parser.add_argument("--config", help="Path to settings.yaml (defaults to config/settings.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("manifest", help="Path to the manifest file")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("launcher", help="Fully-qualified launcher activity")
    components = sub.add_parser("components", help="Protected and unprotected components of one kind")
    components.add_argument("tag", choices=COMPONENT_TAGS, help="Component kind")
    sub.add_parser("permissions", help="Requested permissions in document order")
    sub.add_parser("sdk", help="Effective target SDK version")
    sub.add_parser("application", help="Fully-qualified application class")
    save = sub.add_parser("save", help="Write the manifest to another path")
    save.add_argument("destination")
    return parser


def run(index: ManifestIndex, args: argparse.Namespace):
    if args.command == "launcher":
        return index.find_launcher()
    if args.command == "components":
        protected, unprotected = index.find_components(args.tag)
        return {"protected": protected, "unprotected": unprotected}
    if args.command == "permissions":
        return index.permissions()
    if args.command == "sdk":
        return index.sdk_version()
    if args.command == "application":
        return index.application_class_name()
    return index.save(args.destination)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    setup_logger(verbose=args.verbose or settings.logging.verbose)

    try:
        index = ManifestIndex(args.manifest, settings)
    except (ManifestError, OSError) as e:
        log.error(f"Cannot load manifest: {e}")
        return 1
    except ET.ParseError as e:
        log.error(f"Cannot parse manifest: {e}")
        return 1

    try:
        result = run(index, args)
    except OSError as e:
        log.error(f"Command '{args.command}' failed: {e}")
        return 1

    if args.command == "save":
        sys.stdout.write(result)
    else:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
