#!/usr/bin/env python3
"""
deeptrace - Launch Script
Usage:
    python run.py state.yaml --set a.b=2     # Trace a document and mutate it
    python run.py state.yaml --summary       # Print the event table at the end
"""

import sys
from pathlib import Path

# Ensure the project root is in the Python path
sys.path.insert(0, str(Path(__file__).parent))

from deeptrace.main import main

if __name__ == "__main__":
    sys.exit(main())
