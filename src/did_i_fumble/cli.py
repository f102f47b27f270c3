"""Command-line interface for did-i-fumble."""

import argparse
import sys

from dotenv import load_dotenv

from did_i_fumble import __version__, analyze
from did_i_fumble.exceptions import FumbleError


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="did-i-fumble",
        description="Find out whether you fumbled a chat, from its screenshot",
    )
    parser.add_argument("image", help="Path to chat screenshot (PNG, JPEG or WEBP)")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--provider",
        help="Model provider: openai or gemini (default: FUMBLE_PROVIDER env var, then openai)",
    )
    parser.add_argument(
        "--api-key",
        help="Provider API key (default: OPENAI_API_KEY or GEMINI_API_KEY env var)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"did-i-fumble {__version__}",
    )

    args = parser.parse_args(argv)
    load_dotenv()

    try:
        result = analyze(args.image, api_key=args.api_key, provider=args.provider)
    except FumbleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        _print_formatted(result)

    return 0


def _print_formatted(result) -> None:
    """Print verdict in human-readable format."""
    print()
    print("  did-i-fumble")
    print()

    fields = [
        ("Outcome", result.outcome),
        ("Roast", result.roast),
        ("Tip", result.tip),
    ]

    for label, value in fields:
        display = value if value else "-"
        print(f"  {label + ':':<9} {display}")

    print()


if __name__ == "__main__":
    sys.exit(main())
