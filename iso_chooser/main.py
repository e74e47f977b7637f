from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .choices import build_choices
from .chooser_config import load_chooser_config
from .lib.catalog import CatalogError
from .lib.image import ImageRecord
from .lib.media_vars import OutputWriteError, write_media_vars
from .lib.simplestreams import SelectionNotFound
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .menu import MenuPresenter
from .terminal import TerminalInitError, terminal_session

logger = logging.getLogger(__name__)

FATAL_ERRORS = (CatalogError, SelectionNotFound, TerminalInitError, OutputWriteError)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Usage errors share exit status 1 with every other failure.
        self.print_usage(sys.stderr)
        raise SystemExit(f"{self.prog}: error: {message}")


def run(
    *,
    output_path: str,
    input_paths: List[str],
    config_path: Optional[str] = None,
    arch: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ImageRecord:
    """Resolve the catalogs, let the operator choose, and write the choice."""

    cfg = load_chooser_config(config_path).with_overrides(arch=arch, base_url=base_url)
    target_arch = cfg.target_arch
    logger.info("Target architecture: %s", target_arch)

    # Everything that can fail on the catalogs fails here, before the UI.
    choices = build_choices(
        input_paths,
        target_arch,
        image_ftype=cfg.image_ftype,
        base_url=cfg.base_url,
    )

    theme = cfg.theme
    with terminal_session(theme) as session:
        presenter = MenuPresenter(session.stdscr, choices, theme=theme, palette=session.palette)
        selected = presenter.run()

    write_media_vars(output_path, selected)
    return selected


def main(argv: Optional[list[str]] = None) -> int:
    p = _ArgumentParser(
        prog="iso-chooser-menu",
        description="Choose an installer ISO to chain-boot from SimpleStreams catalogs.",
    )
    p.add_argument("output", help="Path to write the MEDIA_* shell variables to")
    p.add_argument("inputs", nargs="+", metavar="input", help="SimpleStreams product catalog (json|yaml)")
    p.add_argument("--arch", default=None, help="Target architecture (default: this host, e.g. amd64)")
    p.add_argument("--base-url", default=None, help="Mirror URL that relative item paths resolve against")
    p.add_argument("--config", default=None, help="Optional YAML config (arch, base_url, title, theme)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--debug", action="store_true", help="Log at debug level")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.debug else logging.INFO)

    try:
        run(
            output_path=args.output,
            input_paths=args.inputs,
            config_path=args.config,
            arch=args.arch,
            base_url=args.base_url,
        )
    except FATAL_ERRORS as e:
        logger.error("%s", e)
        return 1
    except (OSError, ValueError) as e:
        # config file missing or invalid
        logger.error("Invalid configuration: %s", e)
        return 1
    except Exception:
        logger.exception("iso-chooser-menu failed")
        raise
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
