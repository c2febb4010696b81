from .models import (
    db, User, Plant, Greenhouse, SensorReading, Issue, ControlCommand,
    ROLES, READING_FIELDS, seed_plants,
)
