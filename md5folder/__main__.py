import sys

from md5folder.cli.main import main

sys.exit(main())
