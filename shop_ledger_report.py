#!/usr/bin/env python3
"""Shop ledger dashboard report.

Entry point script wrapping the package CLI for running from a checkout.

Usage:
    python shop_ledger_report.py --snapshot data/sample_snapshot.yaml

For full documentation and options:
    python shop_ledger_report.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from shop_ledger.cli import main

if __name__ == "__main__":
    sys.exit(main())
