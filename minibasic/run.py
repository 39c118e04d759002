"""
Command line entry point: interpret a BASIC file or start the web IDE.
"""
import argparse
import logging
import sys

from .config import ConfigError, Settings
from .errors import BasicError
from .interpreter import interpret

def build_parser(settings):
    parser = argparse.ArgumentParser(prog="minibasic", description="Run a MiniBASIC program")
    parser.add_argument("file", nargs="?", help="BASIC source file to run")
    parser.add_argument("--serve", action="store_true", help="start the web IDE instead")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--max-steps", type=int, default=None,
                        help="abort after this many executed statements")
    parser.add_argument("--strict-labels", action="store_true", default=settings.strict_labels,
                        help="treat jumps to unknown labels as errors")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser

def serve(settings, host, port):
    import uvicorn
    print(f"Starting MiniBASIC IDE on http://{host}:{port}")
    try:
        uvicorn.run("minibasic.main:app", host=host, port=port, reload=settings.reload)
    except KeyboardInterrupt:
        print("\nServer stopped.")
    return 0

def main(argv=None):
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        return serve(settings, args.host, args.port)

    if not args.file:
        print("Usage: minibasic <file>", file=sys.stderr)
        print("\tWhere <file> is the BASIC file to run", file=sys.stderr)
        return 2

    try:
        with open(args.file, encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        print(f"error: {args.file}: {e.strerror}", file=sys.stderr)
        return 2

    try:
        interpret(source, max_steps=args.max_steps, strict_labels=args.strict_labels)
    except BasicError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
