"""
Celery configuration for the release validation worker.

Loaded by `celery_app.config_from_object("celeryconfig")` in
release_validator/tasks/__init__.py.  Broker/result-backend URLs come
from the application settings (environment variables).
"""

from release_validator.core.config import settings

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = settings.CELERY_BROKER_URL
result_backend = settings.CELERY_RESULT_BACKEND

# ═══════════════════════════════════════════════════════════
#  Serialization: JSON only
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ═══════════════════════════════════════════════════════════
#  Timezone
# ═══════════════════════════════════════════════════════════

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

# A validation run posts comments; a redelivered task would post them twice.
task_acks_late = False

worker_prefetch_multiplier = 1

# Preview wait (2 min) + task execution (5 min) + plan generation, with headroom
task_soft_time_limit = 900    # 15 min: raises SoftTimeLimitExceeded
task_time_limit = 960         # 16 min: hard kill

# No automatic retries: a failed run is reported, not repeated
task_max_retries = 0

# ═══════════════════════════════════════════════════════════
#  Result Expiry: auto-clean after 24h
# ═══════════════════════════════════════════════════════════

result_expires = 86400

# ═══════════════════════════════════════════════════════════
#  Worker Settings
# ═══════════════════════════════════════════════════════════

worker_max_tasks_per_child = 50
worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
#   celery -A release_validator.tasks worker -Q pipeline

task_routes = {
    "release_validator.tasks.pipeline_tasks.*": {"queue": "pipeline"},
}

task_default_queue = "default"
