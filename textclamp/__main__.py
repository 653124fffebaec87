import sys

from textclamp.cli import main

sys.exit(main())
