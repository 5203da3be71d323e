# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name, used as the console prompt (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKFLOW_DATA_DIR": "Local directory for taskflow.log (default: .local/taskflow).",
    # Backend
    "TASKFLOW_API_BASE_URL": "Todo REST API base URL (default: http://127.0.0.1:8000/api).",
    "TASKFLOW_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout in seconds (default: 5).",
    "TASKFLOW_READ_TIMEOUT_SECONDS": "HTTP read timeout in seconds (default: 15).",
    # Console
    "TASKFLOW_OPEN_BROWSER": "Open attachments in the web browser on /open (true/false, default: true).",
}
