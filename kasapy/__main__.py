import sys

from kasapy.cli import main

sys.exit(main())
