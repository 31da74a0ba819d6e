import sys

from twitchlist.cli import main

sys.exit(main())
