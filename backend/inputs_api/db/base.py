from sqlalchemy.orm import declarative_base

Base = declarative_base() # every table model in inputs_api.db.models inherits from this
