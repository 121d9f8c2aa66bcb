import sys

from distserve.server import main

sys.exit(main())
