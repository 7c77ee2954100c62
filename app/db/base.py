from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Company, JobPosting and UsageEvent import Base from here; init_db() imports
# app.db.models so every table is registered before create_all
