"""
Django settings for the College Portal project.

Environment variables override the defaults below; marksheet rendering
settings are prefixed with ``MARKSHEET_``.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-change-me')

DEBUG = os.environ.get('DJANGO_DEBUG', 'False').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'core',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'collegeportal.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'collegeportal.wsgi.application'

# Database
DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': os.environ.get('DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        'USER': os.environ.get('DB_USER', ''),
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),
        'HOST': os.environ.get('DB_HOST', ''),
        'PORT': os.environ.get('DB_PORT', ''),
    }
}

AUTH_USER_MODEL = 'core.User'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'Asia/Kolkata')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static']

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Marksheet PDF rendering
# Backend: 'reportlab' (canvas layout), 'playwright' (headless Chromium) or 'weasyprint'
MARKSHEET_PDF_BACKEND = os.environ.get('MARKSHEET_PDF_BACKEND', 'reportlab')
MARKSHEET_PDF_CACHE_MAX_ENTRIES = int(os.environ.get('MARKSHEET_PDF_CACHE_MAX_ENTRIES', 50))
MARKSHEET_PDF_CACHE_TTL = int(os.environ.get('MARKSHEET_PDF_CACHE_TTL', 5 * 60))
MARKSHEET_PDF_CONTENT_TIMEOUT_MS = int(os.environ.get('MARKSHEET_PDF_CONTENT_TIMEOUT_MS', 30000))
MARKSHEET_BROWSER_EXECUTABLE_PATH = os.environ.get('CHROMIUM_EXECUTABLE_PATH') or None
MARKSHEET_SYSTEM_BROWSER_PATH = os.environ.get('CHROME_BIN') or None
MARKSHEET_PRINCIPAL_SIGNATURE_URL = os.environ.get('PRINCIPAL_SIGNATURE_URL') or None
MARKSHEET_SIGNATURE_FETCH_TIMEOUT = float(os.environ.get('MARKSHEET_SIGNATURE_FETCH_TIMEOUT', 10.0))
MARKSHEET_LOGO_PATH = os.environ.get(
    'MARKSHEET_LOGO_PATH',
    str(BASE_DIR / 'static' / 'images' / 'college_logo.png'),
)
# Overrides for core.printing.config.MarksheetLayout fields
MARKSHEET_LAYOUT = {}

# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'core': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
