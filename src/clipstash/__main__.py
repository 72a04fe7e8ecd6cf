import sys

from clipstash.main import main

sys.exit(main())
