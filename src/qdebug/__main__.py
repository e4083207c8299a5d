import sys

from qdebug.cli import main

sys.exit(main())
