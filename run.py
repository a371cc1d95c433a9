#!/usr/bin/env python3
"""
Client Banking Entry Point

Starts the FastAPI server with the client banking system.
"""

import sys

from client_banking.api import run_server
from client_banking.config import get_config
from client_banking.logging_config import setup_logging


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)

    print("Starting Client Banking API...")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server()
    except KeyboardInterrupt:
        print("\nShutting down Client Banking API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
