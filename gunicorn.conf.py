"""
Gunicorn configuration for the Trace Green API.

Run with:  gunicorn -c gunicorn.conf.py tracegreen.main:app

Env vars that override defaults:
  PORT      — TCP port to bind (default: 8000)
  WORKERS   — number of worker processes (default: 2)
  LOG_LEVEL — gunicorn log level (default: info)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn ASGI loop inside each gunicorn worker process.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Dashboard reads are several aggregate queries; 60 s is ample.
timeout = 60
graceful_timeout = 30

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'
