import sys

from rotmath.main import main

sys.exit(main())
