import sys

from jokes_mcp.cli import main

sys.exit(main())  # type: ignore[call-arg]
