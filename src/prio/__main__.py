"""Entry point for running as a module: python -m prio"""

from prio.cli import main

if __name__ == "__main__":
    main()
