#!/usr/bin/env python3
"""
Lumera Backend Runner
=====================

Run the Lumera wishlist API.

Usage:
    python run_app.py                    # Development mode with auto-reload
    python run_app.py --mode prod        # Production mode
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import os
import sys

def check_environment():
    """Check if environment is properly set up"""
    print("\n🔍 Checking environment...")

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, using environment variables")

    if not os.environ.get("SECRET_KEY") and not os.path.exists(".env"):
        print("❌ SECRET_KEY is not set")
        return False

    return True

def run_main_app(host="0.0.0.0", port=8000, reload=True):
    """Run the FastAPI application"""
    print(f"\n🚀 Starting Lumera API on {host}:{port}")
    print(f"📖 API Docs: http://{host}:{port}/api/docs")
    print("\n" + "=" * 50)

    import uvicorn
    try:
        uvicorn.run(
            "lumera.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")

def main():
    parser = argparse.ArgumentParser(
        description="Lumera Backend Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )

    args = parser.parse_args()

    if not check_environment():
        return 1

    reload = not args.no_reload and args.mode != "prod"
    run_main_app(args.host, args.port, reload)
    return 0

if __name__ == "__main__":
    sys.exit(main())
