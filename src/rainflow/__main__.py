import sys

from src.rainflow.cli import main

sys.exit(main())
