"""Interactive viewer for the circuit puzzle."""

from __future__ import annotations

import sys

from circuit_game.ui.main import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
