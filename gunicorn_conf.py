import os

# Basic config
host = os.getenv("HOST", "0.0.0.0")
port = os.getenv("PORT", "5010")
bind = f"{host}:{port}"

workers = int(os.getenv("WEB_CONCURRENCY", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
keepalive = 30
timeout = int(os.getenv("TIMEOUT", "60"))

# Logging
loglevel = os.getenv("LOG_LEVEL", "info")
errorlog = "-"  # stderr
accesslog = "-"  # stdout
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'
