"""Gunicorn configuration for the CTX operations API."""
import os

from config import Config

wsgi_app = "app:app"
bind = os.getenv("GUNICORN_BIND", f"0.0.0.0:{Config.PORT}")

# Every worker runs create_app(), which seeds warehouses and the admin
# account; the seeding tolerates concurrent workers.
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))

accesslog = os.getenv("GUNICORN_ACCESS_LOGFILE", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOGFILE", "-")
# Same request id the application stamps on its own log lines.
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(M)sms req=%({x-request-id}o)s'

forwarded_allow_ips = os.getenv("GUNICORN_FORWARDED_ALLOW_IPS", "127.0.0.1")
