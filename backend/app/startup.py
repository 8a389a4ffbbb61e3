"""
Application startup validation and initialization.

Configures logging, creates missing tables and reports configuration
problems before the application starts serving requests.
"""

import logging
import sys
from typing import List, Tuple

import sqlalchemy as sa
from sqlalchemy import text

from core.config import get_settings, validate_production_config
from core.database import engine, init_db

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "businesses",
    "reviews",
    "daily_aggregates",
    "aggregate_applications",
]


def configure_logging(level: str = None):
    """Configure root logging from settings"""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self, bind=None, settings=None):
        self.bind = bind or engine
        self.settings = settings or get_settings()
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        issues = validate_production_config(self.settings)
        self.errors.extend(issues)

        # Production SQLite is already an error
        if self.settings.database_url.startswith("sqlite") and not (
            self.settings.is_development or self.settings.is_production
        ):
            self.warnings.append(
                f"SQLite database in {self.settings.environment} environment; "
                "concurrent review submissions will contend for the database lock"
            )
        return not issues

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with self.bind.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_required_tables(self) -> bool:
        """Create missing tables, then confirm they all exist"""
        try:
            init_db(self.bind)
            existing_tables = sa.inspect(self.bind).get_table_names()
        except Exception as e:
            self.errors.append(f"Could not create database tables: {str(e)}")
            return False

        missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
        if missing_tables:
            self.errors.append(f"Missing database tables: {', '.join(missing_tables)}")
            return False
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
        ]

        all_passed = True

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False

        return all_passed, self.errors, self.warnings


def run_startup_checks(bind=None, settings=None):
    """Run all startup validation checks"""
    settings = settings or get_settings()
    logger.info(f"Starting review backend (environment: {settings.environment})")

    validator = StartupValidator(bind, settings)
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings
