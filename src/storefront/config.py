"""Configuration module for the storefront tools."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Local data (storage file, local catalog and sales)
    DATA_DIR = os.getenv('STOREFRONT_DATA_DIR', 'data')

    # Sales/Catalog backend: 'local' (JSON files) or 'http' (remote API)
    SALES_BACKEND = os.getenv('SALES_BACKEND', 'local').lower()
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:4000')
    HTTP_TIMEOUT = float(os.getenv('HTTP_TIMEOUT', '10'))

    # Cart and favorites lifetime
    CART_TTL_HOURS = int(os.getenv('CART_TTL_HOURS', '24'))
    FAVORITES_TTL_DAYS = int(os.getenv('FAVORITES_TTL_DAYS', '30'))
    # Apply the 1..99 clamp when adding an existing product as well
    CART_CLAMP_ON_ADD = os.getenv('CART_CLAMP_ON_ADD', 'false').lower() == 'true'

    # Shipping (whole pesos)
    FREE_SHIPPING_THRESHOLD = int(os.getenv('FREE_SHIPPING_THRESHOLD', '50000'))
    SHIPPING_FEE = int(os.getenv('SHIPPING_FEE', '5000'))

    # Payment simulation
    PAYMENT_SIMULATION_DELAY = float(os.getenv('PAYMENT_SIMULATION_DELAY', '2.0'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING').upper()
