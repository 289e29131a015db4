import sys

from anglosaxon.cli import main

sys.exit(main())
