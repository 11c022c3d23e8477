"""Allow ``python -m texthound``."""

from texthound.api.cli.main import main

if __name__ == "__main__":
    main()
