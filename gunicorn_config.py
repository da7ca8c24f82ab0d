import os

# Server Socket
bind = os.environ.get("GUNICORN_BIND", "127.0.0.1:8000")  # NGINX proxies requests

# Worker Settings
workers = int(os.environ.get("GUNICORN_WORKERS", 3))
threads = 4  # Page requests mostly wait on the REST API
worker_class = "gthread"

# API calls time out well before this
timeout = 60
graceful_timeout = 30
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = os.environ.get("GUNICORN_ACCESS_LOG", "-")
errorlog = os.environ.get("GUNICORN_ERROR_LOG", "-")
loglevel = "info"

# Process Name
proc_name = "music_school_gunicorn"
