# 📄 File: celery_config.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration file for our background task system (Celery) that runs the scheduled
# maintenance jobs, like sweeping away old photos nobody uses anymore.
#
# 🧪 Purpose (Technical Summary):
# Celery configuration for the storage maintenance queue, beat scheduling of the orphan sweep,
# and worker logging, with Redis as message broker and result backend.
#
# 🔗 Dependencies:
# - celery Python package, kombu queues
# - Redis server (message broker)
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app/background_jobs/tasks/storage_cleanup.py
# - Docker Compose services (celery worker, celery beat)

import os
from datetime import timedelta

from celery import Celery
from celery.signals import worker_process_init
from kombu import Queue

from app.shared.config.settings import get_settings
from app.shared.utils.logging import get_logger, setup_logging

settings = get_settings()
logger = get_logger(__name__)

SWEEP_ALL_TASK = "app.background_jobs.tasks.storage_cleanup.sweep_all_orphaned_assets"

# =============================================================================
# CELERY CONFIGURATION CLASS
# =============================================================================


class CeleryConfig:
    """
    Celery configuration class for Plant Care Application.

    Defines all settings for task execution, routing, scheduling,
    and performance optimization.
    """

    # =========================================================================
    # BROKER AND BACKEND SETTINGS
    # =========================================================================

    broker_url = settings.CELERY_BROKER_URL
    result_backend = settings.CELERY_RESULT_BACKEND

    # Broker connection settings
    broker_connection_retry_on_startup = True
    broker_connection_retry = True
    broker_connection_max_retries = 10
    broker_heartbeat = 30
    broker_pool_limit = 10

    result_expires = timedelta(hours=24)  # Results expire after 24 hours

    # =========================================================================
    # TASK SETTINGS
    # =========================================================================

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]
    timezone = "UTC"
    enable_utc = True

    task_default_queue = "default"
    task_default_exchange = "default"
    task_default_exchange_type = "direct"
    task_default_routing_key = "default"

    # A sweep lists every bucket for one user; allow for slow storage
    task_time_limit = 900  # 15 minutes hard limit
    task_soft_time_limit = 840
    task_acks_late = True
    worker_prefetch_multiplier = 1

    task_reject_on_worker_lost = True
    task_ignore_result = False

    # =========================================================================
    # QUEUE DEFINITIONS
    # =========================================================================

    task_routes = {
        "app.background_jobs.tasks.storage_cleanup.*": {
            "queue": "maintenance"
        },
    }

    task_queues = (
        Queue("maintenance", routing_key="maintenance", priority=1),
        Queue("default", routing_key="default", priority=3),
    )

    # =========================================================================
    # WORKER SETTINGS
    # =========================================================================

    worker_max_tasks_per_child = 1000
    worker_concurrency = int(os.getenv("CELERY_WORKER_CONCURRENCY", 4))
    worker_hijack_root_logger = False

    # =========================================================================
    # BEAT SCHEDULER SETTINGS
    # =========================================================================

    beat_schedule = {
        "sweep-orphaned-assets": {
            "task": SWEEP_ALL_TASK,
            "schedule": timedelta(hours=settings.ORPHAN_SWEEP_INTERVAL_HOURS),
            "options": {"queue": "maintenance"}
        },
    }

    beat_scheduler = "celery.beat:PersistentScheduler"
    beat_schedule_filename = "celerybeat-schedule"

    # =========================================================================
    # MONITORING
    # =========================================================================

    task_send_sent_event = True
    task_track_started = True
    worker_send_task_events = True
    event_serializer = "json"


class DevelopmentCeleryConfig(CeleryConfig):
    """Development-specific Celery configuration."""

    worker_log_level = "DEBUG"


class ProductionCeleryConfig(CeleryConfig):
    """Production-specific Celery configuration."""

    worker_log_level = "INFO"
    worker_max_tasks_per_child = 5000

    broker_use_ssl = True
    redis_backend_use_ssl = True


# =============================================================================
# CONFIG FACTORY
# =============================================================================

def get_celery_config() -> CeleryConfig:
    """
    Factory function to get appropriate Celery configuration based on environment.

    Returns:
        CeleryConfig: Configuration instance for current environment
    """
    config_map = {
        "development": DevelopmentCeleryConfig,
        "staging": ProductionCeleryConfig,
        "production": ProductionCeleryConfig,
    }

    config_class = config_map.get(settings.ENVIRONMENT, DevelopmentCeleryConfig)
    return config_class()


# =============================================================================
# CELERY APPLICATION INSTANCE
# =============================================================================

app = Celery("plant_care_backend")
app.config_from_object(get_celery_config())
app.autodiscover_tasks(["app.background_jobs.tasks"], related_name="storage_cleanup")


@worker_process_init.connect
def init_worker_logging(**kwargs):
    """Configure structured logging in each worker process."""
    setup_logging()
    logger.info("Celery worker process initialized")


if __name__ == "__main__":
    app.start()
