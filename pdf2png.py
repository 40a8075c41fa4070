#!/usr/bin/env python3
"""
Entry point for the PDF to half-page PNG converter.

Runs `pdf2png_engine.main.main` so the converter can be used straight from
the repository root:

    python pdf2png.py <name> <pdf_file>
"""

from pdf2png_engine.main import main

if __name__ == "__main__":
    # main() parses sys.argv itself.
    main()
