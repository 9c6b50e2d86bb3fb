"""
Service context for log lines.

Every line carries `SERVICE_NAME@DEPLOY_ENV:instance` so that output from several
booking workers can be told apart once aggregated.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'trip-booking')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a meaningful hostname, local runs fall back to the pid
    if deploy_env == 'local_dev':
        instance = str(os.getpid())
    else:
        instance = socket.gethostname()[:12]

    return f'{service_name}@{deploy_env}:{instance}'
