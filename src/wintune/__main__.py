import sys

from wintune.cli import main

sys.exit(main())
