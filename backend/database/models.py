import uuid
from datetime import datetime

from database.db import db


def _new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


# ============================================================================
# 🔹 DOMAIN 1: USER DOMAIN
# ============================================================================

class User(db.Model):
    """Login + identity + service entitlements."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(30))
    role = db.Column(db.String(20), nullable=False, default='FARMER')       # ADMIN / FARMER / RANGER / ANALYST
    status = db.Column(db.String(20), nullable=False, default='ACTIVE')     # ACTIVE / INACTIVE / SUSPENDED
    avatar = db.Column(db.Text)
    organization = db.Column(db.String(150))
    location = db.Column(db.String(150))
    language = db.Column(db.String(10), default='en')
    business_type = db.Column(db.String(10))                                # B2C / B2B
    services = db.Column(db.JSON)                                           # ['KUBE_FARM', ...]
    company_name = db.Column(db.String(150))
    company_size = db.Column(db.String(30))
    industry = db.Column(db.String(100))
    last_login_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    farms = db.relationship('Farm', back_populates='owner', lazy=True)
    parks = db.relationship('Park', back_populates='manager', lazy=True)
    reports = db.relationship('Report', back_populates='generated_by', lazy=True)
    activities = db.relationship('Activity', back_populates='user', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'email': self.email,
            'firstName': self.first_name, 'lastName': self.last_name,
            'phone': self.phone, 'role': self.role, 'status': self.status,
            'avatar': self.avatar, 'organization': self.organization,
            'location': self.location, 'language': self.language,
            'businessType': self.business_type,
            'services': self.services or [],
            'companyName': self.company_name, 'companySize': self.company_size,
            'industry': self.industry,
            'lastLoginAt': _iso(self.last_login_at),
            'createdAt': _iso(self.created_at),
        }

    def summary(self, with_email=True):
        data = {'id': self.id, 'firstName': self.first_name, 'lastName': self.last_name}
        if with_email:
            data['email'] = self.email
        return data


# ============================================================================
# 🔹 DOMAIN 2: FARM DOMAIN (KUBE-Farm)
# ============================================================================

class Farm(db.Model):
    """One owner can have multiple farms."""
    __tablename__ = 'farms'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    owner_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    owner = db.relationship('User', back_populates='farms')
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    location = db.Column(db.String(200), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    area = db.Column(db.Float, default=0)                     # hectares
    status = db.Column(db.String(20), default='ACTIVE')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    herds = db.relationship('Herd', back_populates='farm', lazy=True)
    pasture_zones = db.relationship('PastureZone', back_populates='farm', lazy=True)
    alerts = db.relationship('Alert', back_populates='farm', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'ownerId': self.owner_id,
            'name': self.name, 'description': self.description,
            'location': self.location,
            'latitude': self.latitude, 'longitude': self.longitude,
            'area': self.area, 'status': self.status,
            'createdAt': _iso(self.created_at), 'updatedAt': _iso(self.updated_at),
        }

    def summary(self):
        return {'id': self.id, 'name': self.name}


class Herd(db.Model):
    """Counts by health status are maintained by whoever writes them."""
    __tablename__ = 'herds'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    farm_id = db.Column(db.String(36), db.ForeignKey('farms.id'), nullable=False, index=True)
    farm = db.relationship('Farm', back_populates='herds')
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    animal_type = db.Column(db.String(50), nullable=False)
    total_count = db.Column(db.Integer, default=0)
    healthy_count = db.Column(db.Integer, default=0)
    sick_count = db.Column(db.Integer, default=0)
    missing_count = db.Column(db.Integer, default=0)
    status = db.Column(db.String(20), default='HEALTHY')
    avg_health = db.Column(db.Float)
    risk_score = db.Column(db.Float)
    last_seen_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True)

    # Relationships
    animals = db.relationship('Animal', back_populates='herd', lazy=True)
    telemetry = db.relationship('HerdTelemetry', back_populates='herd', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'farmId': self.farm_id,
            'name': self.name, 'description': self.description,
            'animalType': self.animal_type,
            'totalCount': self.total_count, 'healthyCount': self.healthy_count,
            'sickCount': self.sick_count, 'missingCount': self.missing_count,
            'status': self.status, 'avgHealth': self.avg_health,
            'riskScore': self.risk_score,
            'lastSeenAt': _iso(self.last_seen_at),
            'createdAt': _iso(self.created_at), 'updatedAt': _iso(self.updated_at),
        }

    def summary(self):
        return {'id': self.id, 'name': self.name, 'totalCount': self.total_count, 'status': self.status}


class Animal(db.Model):
    __tablename__ = 'animals'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    herd_id = db.Column(db.String(36), db.ForeignKey('herds.id'), nullable=False, index=True)
    herd = db.relationship('Herd', back_populates='animals')
    tag_id = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(100))
    species = db.Column(db.String(50))
    breed = db.Column(db.String(50))
    gender = db.Column(db.String(10))
    age = db.Column(db.Integer)                               # years
    weight = db.Column(db.Float)                              # kg
    status = db.Column(db.String(20), default='HEALTHY', index=True)     # HEALTHY / SICK / MISSING
    temperature = db.Column(db.Float)
    heart_rate = db.Column(db.Integer)
    last_seen_lat = db.Column(db.Float)
    last_seen_lng = db.Column(db.Float)
    last_seen_at = db.Column(db.DateTime)
    last_health_check = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    health_events = db.relationship('HealthEvent', back_populates='animal', lazy=True)
    telemetry = db.relationship('AnimalTelemetry', back_populates='animal', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'herdId': self.herd_id, 'tagId': self.tag_id,
            'name': self.name, 'species': self.species, 'breed': self.breed,
            'gender': self.gender, 'age': self.age, 'weight': self.weight,
            'status': self.status, 'temperature': self.temperature,
            'heartRate': self.heart_rate,
            'lastSeenLat': self.last_seen_lat, 'lastSeenLng': self.last_seen_lng,
            'lastSeenAt': _iso(self.last_seen_at),
            'lastHealthCheck': _iso(self.last_health_check),
            'createdAt': _iso(self.created_at),
        }

    def summary(self):
        return {
            'id': self.id, 'tagId': self.tag_id, 'name': self.name,
            'status': self.status, 'lastSeenAt': _iso(self.last_seen_at),
        }


class HealthEvent(db.Model):
    """Detected health issue for one animal; feeds the 7-day health trend."""
    __tablename__ = 'health_events'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id'), nullable=False, index=True)
    animal = db.relationship('Animal', back_populates='health_events')
    type = db.Column(db.String(50), nullable=False)           # FEVER / INJURY / LAMENESS / ...
    severity = db.Column(db.String(20))
    description = db.Column(db.Text)
    detected_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    resolved_at = db.Column(db.DateTime)

    def to_dict(self):
        return {
            'id': self.id, 'animalId': self.animal_id, 'type': self.type,
            'severity': self.severity, 'description': self.description,
            'detectedAt': _iso(self.detected_at), 'resolvedAt': _iso(self.resolved_at),
        }


class AnimalTelemetry(db.Model):
    __tablename__ = 'animal_telemetry'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id'), nullable=False, index=True)
    animal = db.relationship('Animal', back_populates='telemetry')
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    temperature = db.Column(db.Float)
    heart_rate = db.Column(db.Integer)
    activity_level = db.Column(db.Float)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id, 'animalId': self.animal_id,
            'latitude': self.latitude, 'longitude': self.longitude,
            'temperature': self.temperature, 'heartRate': self.heart_rate,
            'activityLevel': self.activity_level, 'timestamp': _iso(self.timestamp),
        }


class HerdTelemetry(db.Model):
    __tablename__ = 'herd_telemetry'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    herd_id = db.Column(db.String(36), db.ForeignKey('herds.id'), nullable=False, index=True)
    herd = db.relationship('Herd', back_populates='telemetry')
    center_lat = db.Column(db.Float)
    center_lng = db.Column(db.Float)
    spread_radius = db.Column(db.Float)                       # metres
    animal_count = db.Column(db.Integer)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id, 'herdId': self.herd_id,
            'centerLat': self.center_lat, 'centerLng': self.center_lng,
            'spreadRadius': self.spread_radius, 'animalCount': self.animal_count,
            'timestamp': _iso(self.timestamp),
        }


class PastureZone(db.Model):
    __tablename__ = 'pasture_zones'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    farm_id = db.Column(db.String(36), db.ForeignKey('farms.id'), nullable=False, index=True)
    farm = db.relationship('Farm', back_populates='pasture_zones')
    name = db.Column(db.String(150), nullable=False)
    coordinates = db.Column(db.JSON)                          # GeoJSON polygon
    area = db.Column(db.Float)
    ndvi_value = db.Column(db.Float)
    biomass = db.Column(db.Float)
    soil_moisture = db.Column(db.Float)
    degradation = db.Column(db.Float)
    capacity = db.Column(db.Integer)                          # carrying capacity (head)
    current_load = db.Column(db.Integer)
    last_survey_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id, 'farmId': self.farm_id, 'name': self.name,
            'coordinates': self.coordinates, 'area': self.area,
            'ndviValue': self.ndvi_value, 'biomass': self.biomass,
            'soilMoisture': self.soil_moisture, 'degradation': self.degradation,
            'capacity': self.capacity, 'currentLoad': self.current_load,
            'lastSurveyAt': _iso(self.last_survey_at),
            'createdAt': _iso(self.created_at),
        }


# ============================================================================
# 🔹 DOMAIN 3: PARK DOMAIN (KUBE-Park)
# ============================================================================

class Park(db.Model):
    __tablename__ = 'parks'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    manager_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    manager = db.relationship('User', back_populates='parks')
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    park_type = db.Column(db.String(50), nullable=False)      # national_park / reserve / ...
    location = db.Column(db.String(200), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    area = db.Column(db.Float, default=0)                     # km2
    status = db.Column(db.String(20), default='ACTIVE')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    zones = db.relationship('ParkZone', back_populates='park', lazy=True)
    wildlife = db.relationship('WildlifePopulation', back_populates='park', lazy=True)
    patrols = db.relationship('Patrol', back_populates='park', lazy=True)
    incidents = db.relationship('Incident', back_populates='park', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'managerId': self.manager_id,
            'name': self.name, 'description': self.description,
            'parkType': self.park_type, 'location': self.location,
            'latitude': self.latitude, 'longitude': self.longitude,
            'area': self.area, 'status': self.status,
            'createdAt': _iso(self.created_at), 'updatedAt': _iso(self.updated_at),
        }

    def summary(self):
        return {'id': self.id, 'name': self.name}


class ParkZone(db.Model):
    __tablename__ = 'park_zones'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    park_id = db.Column(db.String(36), db.ForeignKey('parks.id'), nullable=False, index=True)
    park = db.relationship('Park', back_populates='zones')
    name = db.Column(db.String(150), nullable=False)
    zone_type = db.Column(db.String(50))                      # core / buffer / restricted
    coordinates = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id, 'parkId': self.park_id, 'name': self.name,
            'zoneType': self.zone_type, 'coordinates': self.coordinates,
            'createdAt': _iso(self.created_at),
        }


class WildlifePopulation(db.Model):
    __tablename__ = 'wildlife_populations'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    park_id = db.Column(db.String(36), db.ForeignKey('parks.id'), nullable=False, index=True)
    park = db.relationship('Park', back_populates='wildlife')
    species = db.Column(db.String(100), nullable=False)
    common_name = db.Column(db.String(150))
    scientific_name = db.Column(db.String(150))
    estimated_count = db.Column(db.Integer, default=0)
    last_census_count = db.Column(db.Integer)
    trend = db.Column(db.String(20))                          # increasing / stable / decreasing
    conservation_status = db.Column(db.String(50))
    health_status = db.Column(db.String(50))
    last_census_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    sightings = db.relationship('WildlifeSighting', back_populates='population', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'parkId': self.park_id, 'species': self.species,
            'commonName': self.common_name, 'scientificName': self.scientific_name,
            'estimatedCount': self.estimated_count,
            'lastCensusCount': self.last_census_count,
            'trend': self.trend, 'conservationStatus': self.conservation_status,
            'healthStatus': self.health_status,
            'lastCensusAt': _iso(self.last_census_at),
            'createdAt': _iso(self.created_at),
        }

    def summary(self):
        return {'id': self.id, 'species': self.species, 'estimatedCount': self.estimated_count}


class WildlifeSighting(db.Model):
    __tablename__ = 'wildlife_sightings'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    population_id = db.Column(db.String(36), db.ForeignKey('wildlife_populations.id'), nullable=False, index=True)
    population = db.relationship('WildlifePopulation', back_populates='sightings')
    count = db.Column(db.Integer, default=1)
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    behavior = db.Column(db.String(50))
    health = db.Column(db.String(50))
    detected_by = db.Column(db.String(30))                    # ai / ranger / camera_trap
    confidence = db.Column(db.Float)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id, 'populationId': self.population_id, 'count': self.count,
            'latitude': self.latitude, 'longitude': self.longitude,
            'behavior': self.behavior, 'health': self.health,
            'detectedBy': self.detected_by, 'confidence': self.confidence,
            'timestamp': _iso(self.timestamp),
        }


class Patrol(db.Model):
    __tablename__ = 'patrols'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    park_id = db.Column(db.String(36), db.ForeignKey('parks.id'), nullable=False, index=True)
    park = db.relationship('Park', back_populates='patrols')
    name = db.Column(db.String(150), nullable=False)
    patrol_type = db.Column(db.String(50), nullable=False)    # anti_poaching / survey / ...
    status = db.Column(db.String(20), default='SCHEDULED', index=True)   # SCHEDULED / IN_PROGRESS / COMPLETED / CANCELLED
    route_coordinates = db.Column(db.JSON)
    planned_distance = db.Column(db.Float)
    actual_distance = db.Column(db.Float)
    scheduled_start = db.Column(db.DateTime, nullable=False)
    scheduled_end = db.Column(db.DateTime, nullable=False)
    actual_start = db.Column(db.DateTime)
    actual_end = db.Column(db.DateTime)
    rangers = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    incidents = db.relationship('Incident', back_populates='patrol', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'parkId': self.park_id, 'name': self.name,
            'patrolType': self.patrol_type, 'status': self.status,
            'routeCoordinates': self.route_coordinates,
            'plannedDistance': self.planned_distance,
            'actualDistance': self.actual_distance,
            'scheduledStart': _iso(self.scheduled_start),
            'scheduledEnd': _iso(self.scheduled_end),
            'actualStart': _iso(self.actual_start), 'actualEnd': _iso(self.actual_end),
            'rangers': self.rangers or [],
            'createdAt': _iso(self.created_at),
        }


class Incident(db.Model):
    __tablename__ = 'incidents'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    park_id = db.Column(db.String(36), db.ForeignKey('parks.id'), nullable=False, index=True)
    park = db.relationship('Park', back_populates='incidents')
    patrol_id = db.Column(db.String(36), db.ForeignKey('patrols.id'), nullable=True)
    patrol = db.relationship('Patrol', back_populates='incidents')
    type = db.Column(db.String(50), nullable=False)           # INTRUSION / POACHING / INJURY / ...
    severity = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    location = db.Column(db.String(200))
    status = db.Column(db.String(20), default='reported', index=True)    # reported / investigating / resolved
    evidence_urls = db.Column(db.JSON)
    reported_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    resolved_at = db.Column(db.DateTime)
    action_taken = db.Column(db.Text)
    outcome = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id, 'parkId': self.park_id, 'patrolId': self.patrol_id,
            'type': self.type, 'severity': self.severity, 'title': self.title,
            'description': self.description,
            'latitude': self.latitude, 'longitude': self.longitude,
            'location': self.location, 'status': self.status,
            'evidenceUrls': self.evidence_urls or [],
            'reportedAt': _iso(self.reported_at), 'resolvedAt': _iso(self.resolved_at),
            'actionTaken': self.action_taken, 'outcome': self.outcome,
        }


# ============================================================================
# 🔹 DOMAIN 4: LAND DOMAIN (KUBE-Land)
# ============================================================================

class LandZone(db.Model):
    """Monitored land area. No single owner, visible to every role."""
    __tablename__ = 'land_zones'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    coordinates = db.Column(db.JSON, nullable=False)
    area = db.Column(db.Float, nullable=False)                # hectares
    region = db.Column(db.String(100), nullable=False, index=True)
    district = db.Column(db.String(100), index=True)
    land_use_type = db.Column(db.String(50), nullable=False)  # grassland / agricultural / forest / ...
    ownership = db.Column(db.String(50))
    vegetation_index = db.Column(db.Float)
    soil_health = db.Column(db.Float)
    degradation_level = db.Column(db.Float)                   # 0-100
    erosion_risk = db.Column(db.Float)
    avg_rainfall = db.Column(db.Float)
    avg_temperature = db.Column(db.Float)
    drought_risk = db.Column(db.Float)
    last_survey_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    surveys = db.relationship('LandSurvey', back_populates='zone', lazy=True)
    changes = db.relationship('LandChange', back_populates='zone', lazy=True)

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'description': self.description,
            'coordinates': self.coordinates, 'area': self.area,
            'region': self.region, 'district': self.district,
            'landUseType': self.land_use_type, 'ownership': self.ownership,
            'vegetationIndex': self.vegetation_index, 'soilHealth': self.soil_health,
            'degradationLevel': self.degradation_level,
            'erosionRisk': self.erosion_risk, 'avgRainfall': self.avg_rainfall,
            'avgTemperature': self.avg_temperature, 'droughtRisk': self.drought_risk,
            'lastSurveyAt': _iso(self.last_survey_at),
            'createdAt': _iso(self.created_at),
        }

    def summary(self):
        return {'id': self.id, 'name': self.name, 'region': self.region}


class LandSurvey(db.Model):
    __tablename__ = 'land_surveys'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    zone_id = db.Column(db.String(36), db.ForeignKey('land_zones.id'), nullable=False, index=True)
    zone = db.relationship('LandZone', back_populates='surveys')
    survey_type = db.Column(db.String(50), nullable=False)    # aerial / satellite / ground
    ndvi = db.Column(db.Float)
    biomass = db.Column(db.Float)
    tree_canopy_cover = db.Column(db.Float)
    bare_ground = db.Column(db.Float)
    water_bodies = db.Column(db.Float)
    health_score = db.Column(db.Float)
    survey_date = db.Column(db.DateTime, nullable=False, index=True)
    recommendations = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id, 'zoneId': self.zone_id, 'surveyType': self.survey_type,
            'ndvi': self.ndvi, 'biomass': self.biomass,
            'treeCanopyCover': self.tree_canopy_cover,
            'bareGround': self.bare_ground, 'waterBodies': self.water_bodies,
            'healthScore': self.health_score,
            'surveyDate': _iso(self.survey_date),
            'recommendations': self.recommendations,
            'createdAt': _iso(self.created_at),
        }


class LandChange(db.Model):
    __tablename__ = 'land_changes'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    zone_id = db.Column(db.String(36), db.ForeignKey('land_zones.id'), nullable=False, index=True)
    zone = db.relationship('LandZone', back_populates='changes')
    change_type = db.Column(db.String(50), nullable=False)    # degradation / deforestation / recovery / ...
    severity = db.Column(db.String(20), nullable=False)
    before_image_url = db.Column(db.Text)
    after_image_url = db.Column(db.Text)
    affected_area = db.Column(db.Float)
    impact_description = db.Column(db.Text, nullable=False)
    causes_identified = db.Column(db.Text)
    recommended_action = db.Column(db.Text)
    detected_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id, 'zoneId': self.zone_id, 'changeType': self.change_type,
            'severity': self.severity,
            'beforeImageUrl': self.before_image_url,
            'afterImageUrl': self.after_image_url,
            'affectedArea': self.affected_area,
            'impactDescription': self.impact_description,
            'causesIdentified': self.causes_identified,
            'recommendedAction': self.recommended_action,
            'detectedAt': _iso(self.detected_at),
            'createdAt': _iso(self.created_at),
        }


# ============================================================================
# 🔹 DOMAIN 5: ALERTS, REPORTS & AUDIT (cross-module)
# ============================================================================

class Alert(db.Model):
    """NEW -> ACKNOWLEDGED -> IN_PROGRESS -> RESOLVED, changed only by explicit calls."""
    __tablename__ = 'alerts'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    type = db.Column(db.String(30), nullable=False)           # HEALTH / SECURITY / ENVIRONMENTAL / ...
    severity = db.Column(db.String(20), nullable=False)       # CRITICAL / HIGH / WARNING / ...
    status = db.Column(db.String(20), nullable=False, default='NEW', index=True)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    module = db.Column(db.String(20), nullable=False, index=True)        # farm / park / land / system
    entity_type = db.Column(db.String(30))
    entity_id = db.Column(db.String(36))
    farm_id = db.Column(db.String(36), db.ForeignKey('farms.id'), nullable=True, index=True)
    farm = db.relationship('Farm', back_populates='alerts')
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    location = db.Column(db.String(200))
    assigned_to_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=True, index=True)
    action_taken = db.Column(db.Text)
    resolved_by = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=True)
    resolved_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    assigned_to = db.relationship('User', foreign_keys=[assigned_to_id])

    def to_dict(self):
        return {
            'id': self.id, 'type': self.type, 'severity': self.severity,
            'status': self.status, 'title': self.title, 'message': self.message,
            'details': self.details, 'module': self.module,
            'entityType': self.entity_type, 'entityId': self.entity_id,
            'farmId': self.farm_id,
            'latitude': self.latitude, 'longitude': self.longitude,
            'location': self.location,
            'assignedToId': self.assigned_to_id,
            'actionTaken': self.action_taken,
            'resolvedBy': self.resolved_by, 'resolvedAt': _iso(self.resolved_at),
            'createdAt': _iso(self.created_at), 'updatedAt': _iso(self.updated_at),
        }


class Report(db.Model):
    """The caller owns the snapshot contents; it is stored verbatim."""
    __tablename__ = 'reports'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    generated_by_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    generated_by = db.relationship('User', back_populates='reports')
    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(50), nullable=False)           # monthly / quarterly / incident / custom
    module = db.Column(db.String(20), nullable=False)
    description = db.Column(db.Text)
    period_start = db.Column(db.DateTime)
    period_end = db.Column(db.DateTime)
    data_snapshot = db.Column(db.JSON, nullable=False)
    charts = db.Column(db.JSON)
    generated_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id, 'generatedById': self.generated_by_id,
            'title': self.title, 'type': self.type, 'module': self.module,
            'description': self.description,
            'periodStart': _iso(self.period_start), 'periodEnd': _iso(self.period_end),
            'dataSnapshot': self.data_snapshot, 'charts': self.charts,
            'generatedAt': _iso(self.generated_at),
        }


class Activity(db.Model):
    """Audit trail shown on the overview dashboard."""
    __tablename__ = 'activities'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    user = db.relationship('User', back_populates='activities')
    type = db.Column(db.String(50), nullable=False)           # USER_LOGIN / ALERT_CREATED / ...
    action = db.Column(db.String(30), nullable=False)         # login / create / update / complete
    description = db.Column(db.Text)
    module = db.Column(db.String(20))
    entity_type = db.Column(db.String(30))
    entity_id = db.Column(db.String(36))
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id, 'userId': self.user_id, 'type': self.type,
            'action': self.action, 'description': self.description,
            'module': self.module, 'entityType': self.entity_type,
            'entityId': self.entity_id, 'timestamp': _iso(self.timestamp),
        }
