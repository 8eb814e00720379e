import sys

from synthtype.cli import main

sys.exit(main())
