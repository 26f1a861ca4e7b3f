"""Lineview CLI entry point.

Allows running via `python -m lineview` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string
from .settings import ViewerSettings, get_settings_store


def configure_logging(settings: ViewerSettings) -> None:
    """Send log records to the configured file, or nowhere.

    The terminal is in raw mode while the viewer runs, so records must
    never reach stdout or stderr.
    """
    if settings.log_file:
        logging.basicConfig(
            filename=settings.log_file,
            level=getattr(logging, settings.log_level, logging.WARNING),
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )
    else:
        logging.getLogger("lineview").addHandler(logging.NullHandler())


def run_keyboard_test() -> int:
    """Print one decoded event per key press. Quit with ESC."""
    from .keyboard import KeyDecoder, KeyType, describe
    from .terminal import TerminalInterface, TerminalError

    print("Keyboard test mode - press keys to see decoded events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    try:
        with term.raw_mode():
            decoder = KeyDecoder(term)
            while True:
                ev = decoder.read_key()
                # OPOST is off, so lines need an explicit carriage return
                term.write(f"{describe(ev)} raw={ev.raw!r}\r\n".encode())
                if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                    break
    except TerminalError as e:
        print(f"lineview: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing: version, keyboard test mode and an optional filename
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0

    settings = get_settings_store().load()
    configure_logging(settings)

    if args and args[0] in ('--keytest', '--keyboard-test'):
        return run_keyboard_test()

    # Lazy import to avoid importing terminal deps for --version
    from .viewer import Viewer
    from .terminal import TerminalError

    viewer = Viewer(settings=settings)
    if args:
        try:
            viewer.load_file(args[0])
        except OSError as e:
            print(f"lineview: {args[0]}: {e.strerror or e}", file=sys.stderr)
            return 1
    try:
        viewer.run()
    except TerminalError as e:
        print(f"lineview: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
