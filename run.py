#!/usr/bin/env python3
"""
Run the gemini-client CLI from a source checkout without installing it.
"""
import os
import sys
from dotenv import load_dotenv

# Load environment variables (GEMINI_API_KEY, ...) from .env file
load_dotenv()

# Add project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from gemini_client.cli import main

if __name__ == "__main__":
    sys.exit(main())
