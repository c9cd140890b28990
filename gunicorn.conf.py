import os

# Binding
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Workers (sync: cada request del dashboard abre sus propios hilos de lectura)
workers = int(os.getenv("WEB_CONCURRENCY", "3"))
max_requests = 1000
max_requests_jitter = 50

# Timeout: por encima del timeout de 15 s hacia los backends
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logging
errorlog = "-"
accesslog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Security
forwarded_allow_ips = "*"

# Process naming
proc_name = "adminlegal"

# Server mechanics
daemon = False
worker_class = "sync"
