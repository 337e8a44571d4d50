import sys

from cwa_gateway.cli import main

sys.exit(main())
