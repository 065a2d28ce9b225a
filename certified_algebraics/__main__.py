import sys

from .smoke import main

if __name__ == "__main__":
    sys.exit(main())
