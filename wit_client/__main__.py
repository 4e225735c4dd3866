"""Package entry point for ``python -m wit_client``.

Delegates to the CLI's main() function.
"""

from wit_client.cli import main

if __name__ == "__main__":
    main()
