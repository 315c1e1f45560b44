"""
Wordplay CLI - Command-line interface for the engine.

Usage:
    wordplay serve [--host H] [--port P]   Run the API server
    wordplay layout                        Print the premium-square layout
    wordplay check WORD [WORD ...]         Check words against the word list
"""

import argparse
import logging
import sys

from .config import Settings


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Wordplay - Tile-placement word game engine",
        prog="wordplay",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default from WORDPLAY_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default from WORDPLAY_PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Layout command
    subparsers.add_parser("layout", help="Print the premium-square layout")

    # Check command
    check_parser = subparsers.add_parser("check", help="Check words against the word list")
    check_parser.add_argument("words", nargs="+", help="Words to check")
    check_parser.add_argument("--wordlist", help="Word list file (one word per line)")

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args, settings)
    elif args.command == "layout":
        cmd_layout(args)
    elif args.command == "check":
        sys.exit(cmd_check(args, settings))
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args, settings):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "wordplay.api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def cmd_layout(args):
    """Print the board with premium squares."""
    from .engine_core.constants import BOARD_LAYOUT

    print("    " + " ".join(f"{c:>2}" for c in range(len(BOARD_LAYOUT))))
    for r, row in enumerate(BOARD_LAYOUT):
        cells = " ".join(f"{(sq or '.'):>2}" for sq in row)
        print(f"{r:>2}  {cells}")


def cmd_check(args, settings) -> int:
    """Check words; exit status 1 if any is invalid."""
    from .dictionary import WordList

    words = WordList.from_file(args.wordlist) if args.wordlist else settings.load_dictionary()
    all_valid = True
    for word in args.words:
        valid = words.is_valid_word(word)
        all_valid = all_valid and valid
        print(f"{word.upper()}: {'valid' if valid else 'invalid'}")
    return 0 if all_valid else 1


if __name__ == "__main__":
    main()
