import sys

from demo_server.main import main

sys.exit(main())
