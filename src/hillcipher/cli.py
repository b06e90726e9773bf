import argparse
import os
import sys

from hillcipher import CONFIG_ENV_VAR


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="hillcipher",
        description="Hill cipher text service and command line cipher",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to the TOML configuration file (default: config.toml)",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the HTTP service")

    for command in ("encrypt", "decrypt"):
        sub = subparsers.add_parser(command, help=f"{command.capitalize()} TEXT")
        sub.add_argument("--key", required=True, help="Key spec, e.g. '5,8,3,7'")
        sub.add_argument("text", type=str, help="Text to transform")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.config:
        os.environ[CONFIG_ENV_VAR] = args.config

    # Config is read at import time, so these imports wait for --config
    if args.command == "serve":
        from hillcipher.main import serve

        serve()
        return 0

    from hillcipher.core import HillCipherEngine, HillCipherError
    from hillcipher.shared import load_config

    engine = HillCipherEngine(filler=load_config().cipher.filler)
    try:
        print(engine.transform(args.text, args.key, args.command))
    except HillCipherError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
