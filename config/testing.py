import os

from .config import db_config_from_env

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_EXPIRES_DAYS = 30

DB_CONFIG = db_config_from_env(default_password="12345")

DEMO_MODE = True
RAZORPAY_KEY_ID = ""
RAZORPAY_KEY_SECRET = ""
PAYMENT_CURRENCY = "INR"

CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174"]

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False
AUTO_SEED_DB = False
