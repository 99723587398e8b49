import sys

from octave_poet.interface.cli_interface import main

if __name__ == "__main__":
    sys.exit(main())
