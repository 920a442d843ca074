import sys

from fixwatch.cli import main

sys.exit(main())
