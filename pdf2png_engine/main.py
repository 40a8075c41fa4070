import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .engine import run_conversion

# --- Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)


class _UsageParser(argparse.ArgumentParser):
    """Prints the usage line and exits with status 1 on bad arguments."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog="pdf2png",
        description="Render each page of a PDF at 2x and save its top and bottom halves as PNG files."
    )
    parser.add_argument("name", help="Stack name; output goes to ./<name with '/' replaced by '_'>/Archive/Groups/<name>/.")
    parser.add_argument("pdf_file", type=Path, help="Path to the PDF file to convert.")
    parser.add_argument("--config", type=Path, help="Optional YAML configuration file.")
    parser.add_argument("--output-root", type=Path, help="Directory the output package is created in (defaults to '.').")
    parser.add_argument("--manifest", action="store_true", help="Write a Data.csv manifest next to the images.")
    parser.add_argument("--archive", action="store_true", help="Zip the output package into <name>.studyarch.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the page progress bar.")
    return parser


def main(argv: Optional[List[str]] = None):
    """
    The main entry point for the PDF to half-page PNG converter.
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        if args.output_root is not None:
            config["output_root"] = args.output_root
        if args.manifest:
            config["manifest"] = True
        if args.archive:
            config["archive"] = True
        if args.no_progress:
            config["progress"] = False
        logging.getLogger().setLevel(config["log_level"])

        logging.info("=========================================")
        logging.info("=== Starting PDF to PNG Page Splitter ===")
        logging.info("=========================================")

        result = run_conversion(args.name, args.pdf_file, config)

        logging.info("==========================================")
        logging.info(f"=== Converted {result.page_count} pages successfully ===")
        logging.info("==========================================")

    except Exception as e:
        logging.error(f"\n[FATAL ERROR] An unexpected error occurred: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
