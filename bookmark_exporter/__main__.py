import sys

from bookmark_exporter.cli import main

sys.exit(main())
