"""Store schema and catalog seeding"""
import logging
import psycopg
from active_break.db.connection import Database
from active_break.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id SERIAL PRIMARY KEY,
        username VARCHAR(50) NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        email VARCHAR(100) NOT NULL UNIQUE,
        phone VARCHAR(20),
        gender VARCHAR(10),
        avatar_url TEXT,
        birthday DATE,
        last_login_time TIMESTAMPTZ,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS check_ins (
        checkin_id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        checkin_date DATE NOT NULL,
        checkin_time TIMESTAMPTZ NOT NULL,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS idx_check_ins_user_date
        ON check_ins (user_id, checkin_date) WHERE deleted = FALSE
    """,
    """
    CREATE TABLE IF NOT EXISTS checkin_streaks (
        user_id INTEGER PRIMARY KEY REFERENCES users(user_id),
        current_streak INTEGER NOT NULL DEFAULT 0,
        longest_streak INTEGER NOT NULL DEFAULT 0,
        total_checkin INTEGER NOT NULL DEFAULT 0,
        last_checkin_date DATE NOT NULL,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS physical_activities (
        activity_type_id SERIAL PRIMARY KEY,
        name VARCHAR(100) NOT NULL UNIQUE,
        description TEXT NOT NULL,
        calories_per_minute INTEGER NOT NULL,
        default_duration INTEGER NOT NULL,
        icon_url VARCHAR(255),
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS activity_records (
        record_id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        activity_type_id INTEGER NOT NULL REFERENCES physical_activities(activity_type_id),
        duration_minutes INTEGER NOT NULL,
        calories_burned INTEGER NOT NULL,
        begin_time TIMESTAMPTZ NOT NULL,
        end_time TIMESTAMPTZ NOT NULL,
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_activity_records_user_begin
        ON activity_records (user_id, begin_time DESC)
    """,
    """
    CREATE TABLE IF NOT EXISTS achievements (
        achievement_id INTEGER PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        description TEXT NOT NULL,
        icon VARCHAR(50) NOT NULL DEFAULT '',
        metric_type VARCHAR(50) NOT NULL,
        target_value INTEGER NOT NULL CHECK (target_value > 0),
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_achievements (
        user_achievement_id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        achievement_id INTEGER NOT NULL REFERENCES achievements(achievement_id),
        current_progress INTEGER NOT NULL DEFAULT 0,
        is_achieved BOOLEAN NOT NULL DEFAULT FALSE,
        achieved_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        deleted BOOLEAN NOT NULL DEFAULT FALSE,
        UNIQUE (user_id, achievement_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reminder_settings (
        reminder_id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        activity_type_id INTEGER NOT NULL REFERENCES physical_activities(activity_type_id),
        enabled BOOLEAN NOT NULL DEFAULT TRUE,
        interval_minutes INTEGER NOT NULL,
        repeat_every_days INTEGER NOT NULL DEFAULT 1,
        start_time TIME NOT NULL,
        end_time TIME NOT NULL,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        deleted BOOLEAN NOT NULL DEFAULT FALSE,
        UNIQUE (user_id, activity_type_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reminder_logs (
        log_id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        activity_type_id INTEGER NOT NULL,
        triggered_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_reminder_logs_lookup
        ON reminder_logs (user_id, activity_type_id, triggered_at DESC)
    """,
    """
    CREATE TABLE IF NOT EXISTS user_tips (
        tip_id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        tip_date DATE NOT NULL,
        content TEXT NOT NULL,
        deleted BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_user_tips_user_date
        ON user_tips (user_id, tip_date)
    """,
    """
    CREATE TABLE IF NOT EXISTS tip_favorites (
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        tip_id INTEGER NOT NULL REFERENCES user_tips(tip_id),
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (user_id, tip_id)
    )
    """,
]


DEFAULT_ACTIVITIES: list[dict] = [
    {"name": "Stretching", "description": "Improves flexibility and relieves muscle tension",
     "calories_per_minute": 3, "default_duration": 15, "icon_url": "58718"},
    {"name": "Jogging", "description": "Aerobic exercise for heart and lungs, burns calories",
     "calories_per_minute": 10, "default_duration": 30, "icon_url": "58724"},
    {"name": "Jump Rope", "description": "Full-body cardio, improves coordination",
     "calories_per_minute": 12, "default_duration": 20, "icon_url": "59469"},
    {"name": "Walking", "description": "Low intensity exercise suitable for all ages",
     "calories_per_minute": 4, "default_duration": 45, "icon_url": "58723"},
    {"name": "Cycling", "description": "Builds leg muscles and cardiovascular fitness",
     "calories_per_minute": 8, "default_duration": 40, "icon_url": "58721"},
    {"name": "Elliptical", "description": "Low impact full-body cardio that protects joints",
     "calories_per_minute": 9, "default_duration": 35, "icon_url": "57735"},
]


# (achievement_id, name, description, icon, metric_type, target_value)
DEFAULT_ACHIEVEMENTS: list[tuple] = [
    (1, "First Check-in", "Check in for the first time", "🎯", "checkin_count", 1),
    (2, "Regular", "Check in 30 times", "📅", "checkin_count", 30),
    (3, "Three in a Row", "Check in 3 days in a row", "🔥", "checkin_streak", 3),
    (4, "Week Warrior", "Check in 7 days in a row", "⚡", "checkin_streak", 7),
    (5, "Monthly Habit", "Check in 30 days in a row", "🏆", "checkin_streak", 30),
    (6, "First Workout", "Log your first exercise", "💪", "exercise_count", 1),
    (7, "Fifty Sessions", "Log 50 exercises", "🏋️", "exercise_count", 50),
    (8, "Active Week", "Exercise 7 days in a row", "🏃", "exercise_streak", 7),
    (9, "Calorie Burner", "Burn 1000 calories in total", "🔥", "calories_burned", 1000),
    (10, "Inferno", "Burn 10000 calories in total", "☄️", "calories_burned", 10000),
    (11, "Ten Hours", "Exercise for 600 minutes in total", "⏱️", "exercise_duration", 600),
]


async def init_schema(db: Database) -> None:
    """Create tables if missing and seed the activity and achievement catalogs"""
    logger.info("Applying database schema")
    try:
        async with db.connection() as conn:
            async with conn.cursor() as cur:
                for statement in SCHEMA_STATEMENTS:
                    await cur.execute(statement)

                for activity in DEFAULT_ACTIVITIES:
                    await cur.execute(
                        """
                        INSERT INTO physical_activities (name, description, calories_per_minute, default_duration, icon_url)
                        VALUES (%(name)s, %(description)s, %(calories_per_minute)s, %(default_duration)s, %(icon_url)s)
                        ON CONFLICT (name) DO NOTHING
                        """,
                        activity
                    )

                await cur.executemany(
                    """
                    INSERT INTO achievements (achievement_id, name, description, icon, metric_type, target_value)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    ON CONFLICT (achievement_id) DO NOTHING
                    """,
                    DEFAULT_ACHIEVEMENTS
                )
            await conn.commit()
    except psycopg.Error as e:
        raise wrap_external_exception(e, operation="init_schema") from e

    logger.info(
        f"Schema ready: {len(DEFAULT_ACTIVITIES)} activity types, "
        f"{len(DEFAULT_ACHIEVEMENTS)} achievements in catalog"
    )
