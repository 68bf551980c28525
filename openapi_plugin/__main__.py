import sys

from openapi_plugin.cli import main

sys.exit(main())
