import sys

from iconsync.main import main

sys.exit(main())
