import os

# Limiter storage is in-memory, so limits are per worker
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Bind
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Timeout
timeout = 60
