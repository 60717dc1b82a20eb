# Setup module for the Schedulr API
import logging
import utils
import database

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ["users", "calendars", "schedules"]


def check_db_is_setup():
    """Check if the schedulr database exists and contains all required tables."""
    db_cursor = database.get_cursor()
    db_cursor.execute("SHOW DATABASES")
    databases = [db[0] for db in db_cursor.fetchall()]

    if database.MYSQL_DATABASE not in databases:
        return False

    db_cursor.execute(f"USE {database.MYSQL_DATABASE}")
    db_cursor.execute("SHOW TABLES")
    tables = [table[0] for table in db_cursor.fetchall()]

    database.get_connection().commit()

    return all(table in tables for table in REQUIRED_TABLES)


def create_db_and_scheme():
    """Create the schedulr database and all necessary tables."""
    db_cursor = database.get_cursor()

    db_cursor.execute(f"CREATE DATABASE IF NOT EXISTS {database.MYSQL_DATABASE}")
    db_cursor.execute(f"USE {database.MYSQL_DATABASE}")

    # Users
    db_cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id                   CHAR(8)      PRIMARY KEY,
            api_key_hash         CHAR(64)     NOT NULL UNIQUE,
            role                 ENUM('user','admin') NOT NULL DEFAULT 'user',
            deleted_at           DATETIME     NULL,
            created_at           DATETIME     NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at           DATETIME     NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
        )
        """
    )
    # Calendars, one owner each
    db_cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS calendars (
            id                   INT          AUTO_INCREMENT PRIMARY KEY,
            user_id              CHAR(8)      NOT NULL,
            name                 VARCHAR(255) NOT NULL,
            description          TEXT         NULL,
            created_at           DATETIME     NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at           DATETIME     NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
        """
    )
    # Schedules, DATETIME(6) keeps the end-of-day microseconds
    db_cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS schedules (
            id                   INT          AUTO_INCREMENT PRIMARY KEY,
            calendar_id          INT          NOT NULL,
            user_id              CHAR(8)      NOT NULL,
            title                VARCHAR(255) NOT NULL,
            description          TEXT         NULL,
            start_time           DATETIME(6)  NOT NULL,
            end_time             DATETIME(6)  NOT NULL,
            location             VARCHAR(255) NULL,
            created_at           DATETIME     NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at           DATETIME     NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            FOREIGN KEY (calendar_id) REFERENCES calendars(id) ON DELETE CASCADE,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
            INDEX idx_schedules_range (calendar_id, start_time, end_time)
        )
        """
    )

    database.get_connection().commit()


def create_admin_user():
    """Create the initial admin user and log credentials."""
    db_cursor = database.get_cursor()

    admin_id = utils.generate_user_id()
    admin_api_key = utils.generate_api_key()
    api_key_hash = utils.hash_api_key(admin_api_key)

    db_cursor.execute(f"USE {database.MYSQL_DATABASE}")
    db_cursor.execute(
        "INSERT INTO users (id, api_key_hash, role) VALUES (%s, %s, 'admin')",
        (admin_id, api_key_hash)
    )

    database.get_connection().commit()

    # Log credentials (will appear in Docker logs)
    logger.info("=" * 60)
    logger.info("SCHEDULR-API ADMIN USER CREATED")
    logger.info(f"Admin User ID: {admin_id}")
    logger.info(f"Admin API Key: {admin_api_key}")
    logger.info("SAVE THESE CREDENTIALS - THEY WILL NOT BE SHOWN AGAIN!")
    logger.info("Log in with the API key at /api/users/login to manage users.")
    logger.info("=" * 60)

    return admin_id, admin_api_key


def setup_database():
    """Ensure the database is configured, create schema and admin user if needed."""
    logger.info("Checking if the database is set up...")
    if not check_db_is_setup():
        logger.info("Database not found or incomplete. Setting up...")
        create_db_and_scheme()
        logger.info("Database and tables created successfully.")
        create_admin_user()
        logger.info("Admin user created successfully.")
        return True

    logger.info("Database is already set up.")
    return False
