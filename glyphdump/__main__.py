import sys

from glyphdump.cli import main

sys.exit(main())
