"""
Parts Request Tracker — model package.

Holds the shared Flask-SQLAlchemy handle. Domain models live in the
sibling modules and import ``db`` from here.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
