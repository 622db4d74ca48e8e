import sys

from vector_race_simulator.cli import main

sys.exit(main())
