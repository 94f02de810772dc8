# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PUNCH_APP_NAME": "App display name (default: punch-list).",
    "PUNCH_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "PUNCH_DATA_DIR": "Local data + log directory (default: .local/punch_list).",
    "PUNCH_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/database.sqlite3).",
    # Server
    "PUNCH_HOST": "Bind host for `punch-list serve` (default: 127.0.0.1).",
    "PUNCH_PORT": "Bind port (default: 3000).",
    "PUNCH_GREETING": "Text returned by GET / (default: Hello, Tasks.).",
    "PUNCH_CORS_ORIGINS": "Comma/space separated allowed origins (default: *).",
    # Client
    "PUNCH_BASE_URL": "API base URL used by the console client (default: http://<host>:<port>).",
    "VITE_BASE_URL": "Fallback for PUNCH_BASE_URL, shared with the web build.",
    "PUNCH_HTTP_TIMEOUT_SECONDS": "Client request timeout in seconds (default: 10).",
}
