"""
Background jobs for the Plant Care storage service.
Celery tasks are discovered from the tasks package by celery_config.
"""
