import sys

from gh_contrib.cli import main

sys.exit(main())
