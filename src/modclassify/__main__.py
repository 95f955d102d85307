import sys

from modclassify.cli import main

sys.exit(main())
