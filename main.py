import sys

from am_executor.cli import main


if __name__ == '__main__':
    sys.exit(main())
