#!/usr/bin/env python3
from fsblog.cli import main

if __name__ == "__main__":
    main()
