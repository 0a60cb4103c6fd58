import sys

from bbr.cmd.main import main

sys.exit(main())
