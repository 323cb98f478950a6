#!/usr/bin/env python3
"""
TV Merch Store Backend Runner
=============================

Run the store API in development or production mode.

Usage:
    python run_app.py                    # Development mode with auto-reload (default)
    python run_app.py --mode prod        # Production mode, multiple workers
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
    python run_app.py --init-db          # Create tables and exit
"""

import argparse
import asyncio
import os
import sys

from tvmerch.core.config import settings

def print_banner():
    """Print application banner"""
    banner = f"""
╔═══════════════════════════════════════════════════════╗
║                {settings.APP_NAME:^39}║
║              Backend Runner Script                    ║
╚═══════════════════════════════════════════════════════╝
    """
    print(banner)

def check_environment():
    """Report on .env and database configuration"""
    print("\n🔍 Checking environment...")

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, using defaults")

    print(f"🗄️  Database: {settings.DATABASE_URL}")

    if settings.email_configured:
        print("✅ SMTP credentials set")
    else:
        print("⚠️  SMTP credentials not set, emails will be skipped")

def init_database():
    """Create all tables"""
    from tvmerch.core.database import close_db, init_db

    async def _run():
        await init_db()
        await close_db()

    asyncio.run(_run())
    print("✅ Database tables created")

def run_app(host, port, reload, workers):
    """Run the FastAPI application"""
    print(f"\n🚀 Starting {settings.APP_NAME} on {host}:{port}")
    print(f"📖 API Docs: http://localhost:{port}/api/docs")
    print("\n" + "=" * 50)

    import uvicorn
    uvicorn.run(
        "tvmerch.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else workers,
        log_level=settings.LOG_LEVEL.lower()
    )

def main():
    parser = argparse.ArgumentParser(
        description="TV Merch Store Backend Runner",
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
        default=settings.HOST,
        help=f"Host to bind to (default: {settings.HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port to bind to (default: {settings.PORT})"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create database tables and exit"
    )

    args = parser.parse_args()

    print_banner()
    check_environment()

    if args.init_db:
        init_database()
        return 0

    reload = not args.no_reload and args.mode != "prod"
    run_app(args.host, args.port, reload, settings.WORKERS)
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")
        sys.exit(0)
