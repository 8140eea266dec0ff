from kindkart import create_app
import os

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 3000))
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=port,
        debug=False,
        use_reloader=False,
        threaded=True,
    )

# --- LOCAL DEV ---

# Bring up PostgreSQL, then apply migrations:
# alembic upgrade head

# Seed a demo user with one direct and one cart donation:
# python scripts/seed.py

# Start the API:
# PORT=3000 python run.py

# Smoke test against the running server:
# python scripts/test_api.py --base http://127.0.0.1:3000
