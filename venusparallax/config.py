"""
Configuration constants for VenusParallax.

This module centralizes all configuration parameters used throughout the application,
making them easily configurable and maintainable.
"""

# === Physical Constants ===

AU_KM = 149597870.7                  # Astronomical Unit in km (IAU 2012, exact)
EARTH_MEAN_RADIUS_KM = 6371.0088     # IUGG mean Earth radius in km
SOLAR_RADIUS_KM = 696340.0           # Solar radius in km
SOLAR_PARALLAX_ARCSEC = 8.794148     # Accepted solar parallax (arcsec)
GRAVITATIONAL_CONSTANT = 6.67430e-11 # G in SI units (m³ kg⁻¹ s⁻²)
SOLAR_MASS_KG = 1.989e30             # Solar mass in kg

# Unit conversions
ARCSEC_PER_DEGREE = 3600.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0
METERS_PER_KM = 1000.0

# === Time Scale Configuration ===

J2000_JD = 2451545.0                 # Julian Date of the J2000.0 epoch
DAYS_PER_JULIAN_CENTURY = 36525.0    # Days in a Julian century
TIME_SCALE = 'tt'                    # Uniform time scale used for JD conversions
DEFAULT_TIMEZONE = 'UTC'             # Naive datetimes are interpreted in this zone

# === Orbital Elements Table ===
# Mean elements at J2000.0 (degrees / AU).
# 'longitude_of_perihelion' is the table's omega (varpi = Omega + argument of perihelion).
# Rates are (c0, c1, c2) per element: element(T) = element0 + c0 + c1*T + c2*T^2,
# T in Julian centuries from J2000.0.
ORBITAL_ELEMENTS = {
    'earth': {
        'elements': {
            'semi_major_axis': 1.00000011,
            'eccentricity': 0.01671022,
            'inclination': 0.00005,
            'mean_longitude': 100.46457166,
            'longitude_of_perihelion': 102.93768193,
            'longitude_of_ascending_node': 0.0,
        },
        'rates': {
            'semi_major_axis': (0.0, -0.00000059, 0.0),
            'eccentricity': (0.0, -0.00003804, 0.0),
            'inclination': (0.0, -0.00004193, 0.0),
            'mean_longitude': (0.0, 35999.05034290, 0.0),
            'longitude_of_perihelion': (0.0, 0.32255570, 0.0),
            'longitude_of_ascending_node': (0.0, -0.24123856, 0.0),
        },
    },
    'venus': {
        'elements': {
            'semi_major_axis': 0.72333199,
            'eccentricity': 0.00677323,
            'inclination': 3.39471,
            'mean_longitude': 181.97980085,
            'longitude_of_perihelion': 131.56370300,
            'longitude_of_ascending_node': 76.67984255,
        },
        'rates': {
            'semi_major_axis': (0.0, -0.00000092, 0.0),
            'eccentricity': (0.0, -0.00004938, 0.0),
            'inclination': (0.0, -0.00001034, 0.0),
            'mean_longitude': (0.0, 58517.81567600, 0.0),
            'longitude_of_perihelion': (0.0, 0.00206355, 0.0),
            'longitude_of_ascending_node': (0.0, -0.27769418, 0.0),
        },
    },
}

# Elements stored in degrees in ORBITAL_ELEMENTS (converted to radians on load)
ANGULAR_ELEMENTS = (
    'inclination',
    'mean_longitude',
    'longitude_of_perihelion',
    'longitude_of_ascending_node',
)

SUN_BODY_NAME = 'sun'               # Fixed at the heliocentric origin
EARTH_BODY_NAME = 'earth'
VENUS_BODY_NAME = 'venus'

# === PHYSICS Configuration - Kepler Solver ===

DEFAULT_KEPLER_TOLERANCE = 1e-10     # Convergence tolerance on |delta E| (radians)
DEFAULT_KEPLER_MAX_ITERATIONS = 100  # Hard iteration cap per solve
KEPLER_MIN_DERIVATIVE = 1e-12        # Floor on |1 - e cos E| before dividing
KEPLER_LOGGING_PRECISION = 6         # Decimal places for logging

# Eccentricity validation (elliptical orbits only)
MIN_ECCENTRICITY = 0.0
MAX_ECCENTRICITY_EXCLUSIVE = 1.0

# Rotation model for orbital-plane -> ecliptic conversion
ROTATION_MODELS = ['inclination_only', 'full']
DEFAULT_ROTATION_MODEL = 'inclination_only'

# In the inclination-only frame the derived ecliptic longitude differs from the
# mean longitude by the equation of centre, bounded by ~2e radians (< 2 deg for Earth)
SIMPLIFIED_LONGITUDE_TOLERANCE_DEG = 2.0

# === Geodesy Configuration ===

MIN_LATITUDE_DEG = -90.0
MAX_LATITUDE_DEG = 90.0
MIN_LONGITUDE_DEG = -180.0
MAX_LONGITUDE_DEG = 180.0

# === Parallax Engine Configuration ===

PARALLAX_CALCULATION_METHOD = 'Keplerian elements + haversine baseline'

# Assumed measurement uncertainties (informational only)
TIMING_UNCERTAINTY_SECONDS = 120.0   # +-2 minutes on contact timings
ANGULAR_UNCERTAINTY_ARCSEC = 0.5     # Angular measurement uncertainty
BASELINE_UNCERTAINTY_METERS = 1000.0 # Site position uncertainty

# Precision modes and validation tolerances (fraction of the reference AU)
PRECISION_MODES = ['standard', 'high', 'ultra']
DEFAULT_PRECISION_MODE = 'high'
PRECISION_TOLERANCES = {
    'standard': 0.10,  # 10%
    'high': 0.05,      # 5%
    'ultra': 0.01      # 1%
}
PRECISION_ANGULAR_ARCSEC = {
    'standard': 0.01,
    'high': 0.01,
    'ultra': 0.001
}
PRECISION_TEMPORAL_SECONDS = {
    'standard': 60.0,
    'high': 60.0,
    'ultra': 1.0
}

# Historical accuracy claimed for each expedition year
HISTORICAL_ACCURACY = {
    1761: '±5%',
    1769: '±2%'
}
DEFAULT_HISTORICAL_ACCURACY = '±5%'

# Logging Configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# === CLI Configuration - Display Parameters ===

CLI_DISPLAY_LINE_WIDTH = 90
CLI_HEADER_CHAR = "="
CLI_SUBHEADER_CHAR = "-"
CLI_SITE_COLUMN_WIDTH = 22
CLI_VALUE_NOT_AVAILABLE = "N/A"
CLI_COLUMN_SEPARATOR = " | "

# Formatting Precision
CLI_DISTANCE_PRECISION = 1     # Decimal places for km values
CLI_ANGLE_PRECISION = 4        # Decimal places for arcsec values
CLI_ERROR_PRECISION = 3        # Decimal places for error percentages
CLI_POSITION_PRECISION = 8     # Decimal places for AU coordinates

CLI_TRANSIT_YEARS = [1761, 1769]
