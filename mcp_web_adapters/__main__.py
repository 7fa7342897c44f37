"""Allow running a server with ``python -m mcp_web_adapters {brave,jina}``."""

import sys

from .servers import SERVER_BUILDERS, main

if __name__ == "__main__":
    if len(sys.argv) < 2 or sys.argv[1] not in SERVER_BUILDERS:
        print(
            f"Usage: python -m mcp_web_adapters {{{','.join(SERVER_BUILDERS)}}} [options]",
            file=sys.stderr,
        )
        sys.exit(2)
    sys.exit(main(sys.argv[1], sys.argv[2:]))
