import os
import logging
import dotenv
from celery import Celery
from pathlib import Path

logger = logging.getLogger(__name__)

# Load environment variables from .env file before setting up Celery
BASE_DIR = Path(__file__).resolve().parent.parent
dotenv_path = os.path.join(BASE_DIR, '.env')
if os.path.exists(dotenv_path):
    dotenv.load_dotenv(dotenv_path)
    logger.debug(f"Celery: loaded .env file from {dotenv_path}")

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'syncdrop_project.settings')

app = Celery('syncdrop_project')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()
