import multiprocessing

from barakaflow.config import settings

# gunicorn -c gunicorn_conf.py barakaflow.main:app

bind = "0.0.0.0:8000"

# (2 x num_cores) + 1. Assistant caches and chat histories live per worker.
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "uvicorn.workers.UvicornWorker"

# LLM calls can take a while
timeout = int(settings.OPENAI_TIMEOUT_SECONDS) + 30
keepalive = 5

accesslog = "-"
errorlog = "-"
loglevel = settings.LOG_LEVEL.lower()

proc_name = "barakaflow_api"
reload = False
