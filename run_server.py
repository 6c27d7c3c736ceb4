#!/usr/bin/env python3
"""Campaign Sequences API server.

Launch: python3 run_server.py
Serves at http://0.0.0.0:8000 (or PORT env var)
"""

import uvicorn

from campaign_api.config import HOST, LOG_LEVEL, PORT, SUPABASE_SERVICE_KEY, SUPABASE_URL


def main():
    print("=" * 60)
    print("  Campaign Sequences API")
    print("=" * 60)

    if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
        print("\n  WARNING: Supabase is not configured. Set environment variables:")
        print("    SUPABASE_URL, SUPABASE_SERVICE_KEY")
        print("  Continuing anyway for local development...\n")

    print(f"Starting server on {HOST}:{PORT}")
    print(f"\n  API: http://{HOST}:{PORT}/campaigns/{{id}}/sequences")
    print("  Press Ctrl+C to stop\n")

    from campaign_api.app import create_app
    app = create_app()
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL)


if __name__ == "__main__":
    main()
