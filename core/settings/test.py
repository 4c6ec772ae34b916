import os

os.environ.setdefault("KEY_SECRET", "test-secret-key-not-for-production")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test")
os.environ.setdefault("CLOUDINARY_API_KEY", "test")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test")

from .base import *

SECRET_KEY = os.environ["KEY_SECRET"]

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

# cloudinary storage is replaced below, keep its app out of the registry
INSTALLED_APPS.remove("cloudinary_storage")

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'reviews-tests',
    }
}

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.InMemoryStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}
MEDIA_URL = "/media/"

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_THROTTLE_RATES': {
        **REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'],
        'ip': '1000/minute',
        'anon': '1000/minute',
        'user': '1000/minute',
    },
}

LOGGING['loggers']['rest_framework']['level'] = 'WARNING'
