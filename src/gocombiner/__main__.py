import sys

from gocombiner.main import main

sys.exit(main())
