#!/usr/bin/env python3
"""
Advocate AI Startup Script

This script provides an easy way to start the Advocate AI application with proper configuration.
"""

import os
import sys
import argparse
import importlib.util
import uvicorn

REQUIRED_MODULES = ["fastapi", "anthropic", "sqlalchemy", "pydantic_settings", "jose", "passlib"]

def check_requirements():
    """Check if all required dependencies are installed."""
    missing = [name for name in REQUIRED_MODULES if importlib.util.find_spec(name) is None]
    if missing:
        print(f"❌ Missing dependencies: {', '.join(missing)}")
        print("Please run: pip install -e .")
        return False

    print("✅ All required dependencies are installed")
    return True

def check_environment():
    """Check if environment variables are set."""
    required_vars = [
        "ANTHROPIC_API_KEY",
        "SECRET_KEY"
    ]

    missing_vars = [var for var in required_vars if not os.getenv(var)]

    if missing_vars:
        print(f"❌ Missing environment variables: {', '.join(missing_vars)}")
        print("Please create a .env file or set these environment variables")
        return False

    print("✅ Environment variables are configured")
    return True

def main():
    """Main startup function."""
    parser = argparse.ArgumentParser(description="Advocate AI")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--log-level", default="info", help="Log level")
    parser.add_argument("--check-only", action="store_true", help="Only check requirements and exit")

    args = parser.parse_args()

    print("⚖️  Advocate AI Startup")
    print("=" * 40)

    if not check_requirements():
        sys.exit(1)

    if not check_environment():
        sys.exit(1)

    if args.check_only:
        print("✅ All checks passed! System is ready to start.")
        sys.exit(0)

    print("\n🚀 Starting Advocate AI...")
    print(f"📡 Server will be available at: http://{args.host}:{args.port}")
    print(f"📚 API Documentation: http://{args.host}:{args.port}/docs")
    print(f"❤️  Health Check: http://{args.host}:{args.port}/health")
    print("\n" + "=" * 40)

    try:
        uvicorn.run(
            "advocate_ai.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=args.workers if not args.reload else 1,
            log_level=args.log_level,
            access_log=True
        )
    except KeyboardInterrupt:
        print("\n👋 Shutting down Advocate AI...")
    except Exception as e:
        print(f"❌ Failed to start server: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
