from app.database.handler import Database

from app.config import DATABASE_URL

# Declarative base shared by every model
Base = Database.declarative_base()

# Init database
engine, SessionLocal, db_handler = Database.init_db(DATABASE_URL)
