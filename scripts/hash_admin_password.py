#!/usr/bin/env python
"""Print an ADMIN_PASSWORD_HASH value for the given password."""
from __future__ import annotations

import argparse
import getpass

from antiques_trail.core.security import get_password_hash


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--password", help="read interactively when omitted")
    args = parser.parse_args()
    password = args.password or getpass.getpass("Admin password: ")
    print(f"ADMIN_PASSWORD_HASH='{get_password_hash(password)}'")
