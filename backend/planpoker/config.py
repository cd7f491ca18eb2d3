import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Transport
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Built client (optional)
    FRONTEND_DIR = os.environ.get("FRONTEND_DIR", "")

    # Identity
    ROOM_CODE_BYTES = int(os.environ.get("ROOM_CODE_BYTES", "3"))
    PLAYER_ID_BYTES = int(os.environ.get("PLAYER_ID_BYTES", "8"))

    # Input bounds
    MAX_NAME_LEN = int(os.environ.get("MAX_NAME_LEN", "30"))
    MAX_TASK_KEY_LEN = int(os.environ.get("MAX_TASK_KEY_LEN", "50"))
    MAX_TASK_SUMMARY_LEN = int(os.environ.get("MAX_TASK_SUMMARY_LEN", "300"))
    MAX_VOTE_LEN = int(os.environ.get("MAX_VOTE_LEN", "10"))
    MAX_TASKS = int(os.environ.get("MAX_TASKS", "200"))
