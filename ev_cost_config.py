# ev_cost_config.py
# Environment-driven settings and logging setup for the EV vs Petrol calculator.

import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
APP_TITLE = os.environ.get("APP_TITLE", "EV vs Petrol Cost Calculator")
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₹")
DEFAULT_VEHICLE_CLASS = os.environ.get("DEFAULT_VEHICLE_CLASS", "4wheeler")
# kg of CO2 one tree absorbs per year, used for the "trees planted" comparison
TREE_CO2_KG_PER_YEAR = float(os.environ.get("TREE_CO2_KG_PER_YEAR", "20"))


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Configure application logging once per process.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
