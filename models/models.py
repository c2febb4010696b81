# models/models.py
from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin

db = SQLAlchemy()

ROLES = ("farmer", "technician")


class User(UserMixin, db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)  # hashed
    role = db.Column(db.String(20), nullable=False)       # "farmer" or "technician"

    greenhouses = db.relationship("Greenhouse", backref="owner", lazy=True)


class Plant(db.Model):
    __tablename__ = "plants"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    temp_min = db.Column(db.Float)
    temp_max = db.Column(db.Float)
    humidity_min = db.Column(db.Float)
    humidity_max = db.Column(db.Float)
    co2_min = db.Column(db.Float)
    co2_max = db.Column(db.Float)
    soil_moisture_min = db.Column(db.Float)
    soil_moisture_max = db.Column(db.Float)
    ph_min = db.Column(db.Float)
    ph_max = db.Column(db.Float)
    nitrogen_min = db.Column(db.Float)
    nitrogen_max = db.Column(db.Float)
    phosphorus_min = db.Column(db.Float)
    phosphorus_max = db.Column(db.Float)
    potassium_min = db.Column(db.Float)
    potassium_max = db.Column(db.Float)
    light_min = db.Column(db.Float)
    light_max = db.Column(db.Float)


class Greenhouse(db.Model):
    __tablename__ = "greenhouses"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100))
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    plant_id = db.Column(db.Integer, db.ForeignKey("plants.id"))

    plant = db.relationship("Plant", lazy="joined")

    @property
    def plant_name(self):
        return self.plant.name if self.plant else None


class SensorReading(db.Model):
    __tablename__ = "sensor_data"
    id = db.Column(db.Integer, primary_key=True)
    greenhouse_id = db.Column(db.Integer, db.ForeignKey("greenhouses.id"), nullable=False)
    timestamp = db.Column(db.DateTime, default=db.func.current_timestamp())
    soil_moisture = db.Column(db.Float)
    water_level = db.Column(db.Float)
    ph_level = db.Column(db.Float)
    co2_level = db.Column(db.Float)
    nitrogen = db.Column(db.Float)
    phosphorus = db.Column(db.Float)
    potassium = db.Column(db.Float)
    light_intensity = db.Column(db.Float)


# Measurement columns a device may send with /api/sensor-data
READING_FIELDS = (
    "soil_moisture", "water_level", "ph_level", "co2_level",
    "nitrogen", "phosphorus", "potassium", "light_intensity",
)


class Issue(db.Model):
    __tablename__ = "issues"
    id = db.Column(db.Integer, primary_key=True)
    greenhouse_id = db.Column(db.Integer, db.ForeignKey("greenhouses.id"))
    description = db.Column(db.Text)
    resolved = db.Column(db.Integer, default=0, nullable=False)


class ControlCommand(db.Model):
    __tablename__ = "control_commands"
    id = db.Column(db.Integer, primary_key=True)
    greenhouse_id = db.Column(db.Integer, db.ForeignKey("greenhouses.id"), nullable=False)
    device = db.Column(db.String(100))
    action = db.Column(db.String(100))
    executed = db.Column(db.Integer, default=0, nullable=False)
    timestamp = db.Column(db.DateTime, default=db.func.current_timestamp())

    def to_dict(self):
        return {
            "id": self.id,
            "greenhouse_id": self.greenhouse_id,
            "device": self.device,
            "action": self.action,
            "executed": self.executed,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


# name, temp, humidity, co2, soil moisture, ph, nitrogen, phosphorus, potassium, light
SEED_PLANTS = [
    ("Tomato", 18.0, 29.0, 60.0, 80.0, 350.0, 1000.0, 60.0, 80.0, 6.0, 6.8,
     50.0, 200.0, 20.0, 60.0, 40.0, 80.0, 20000.0, 40000.0),
    ("Lettuce", 10.0, 20.0, 60.0, 80.0, 350.0, 800.0, 70.0, 90.0, 6.0, 7.0,
     30.0, 100.0, 10.0, 30.0, 20.0, 50.0, 15000.0, 30000.0),
]

_PLANT_COLUMNS = (
    "name", "temp_min", "temp_max", "humidity_min", "humidity_max",
    "co2_min", "co2_max", "soil_moisture_min", "soil_moisture_max",
    "ph_min", "ph_max", "nitrogen_min", "nitrogen_max",
    "phosphorus_min", "phosphorus_max", "potassium_min", "potassium_max",
    "light_min", "light_max",
)


def seed_plants():
    """Insert the reference plant profiles if the table is empty.

    Returns the number of rows inserted.
    """
    if db.session.query(Plant.id).first() is not None:
        return 0
    for row in SEED_PLANTS:
        db.session.add(Plant(**dict(zip(_PLANT_COLUMNS, row))))
    db.session.commit()
    return len(SEED_PLANTS)
