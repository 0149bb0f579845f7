"""Entry point for running bmp_dither as a module."""

from __future__ import annotations

from bmp_dither.cli import main

if __name__ == "__main__":
    main()
