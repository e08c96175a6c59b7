# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use .env (local, gitignored) to override any of these.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "STAYBOARD_APP_NAME": "App display name (default: stayboard).",
    "STAYBOARD_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "STAYBOARD_DATA_DIR": "Local data directory (default: .local/stayboard).",
    "STAYBOARD_STORAGE_PATH": "Local storage JSON file (default: <data_dir>/local_storage.json).",
    # Simulated latency, seconds
    "STAYBOARD_LOAD_DELAY": "Initial task/property load delay (default: 0.5).",
    "STAYBOARD_MUTATION_DELAY": "Create/update/delete delay (default: 0.3).",
    "STAYBOARD_BOOKING_LOAD_DELAY": "Initial booking load delay (default: 0.3).",
    "STAYBOARD_LOGIN_DELAY": "Login/registration delay (default: 1.0).",
    # Demo data
    "STAYBOARD_SEED_DEMO_DATA": "Seed demo tasks/properties on first load (true/false, default: true).",
    "STAYBOARD_DEMO_PASSWORD": "Password shared by the demo accounts (default: 123456).",
}
