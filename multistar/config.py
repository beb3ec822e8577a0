"""
Configuration constants for multistar.

This module centralizes all configuration parameters used throughout the application,
making them easily configurable and maintainable.
"""

# Physical Constants
LY_PER_PARSEC = 3.26167               # Light years per parsec (Celestia internal value)
OBLIQUITY_DEG = 23.4392911            # Obliquity of the J2000 ecliptic
SOLAR_RADIUS_KM = 695700.0            # Nominal solar radius (IAU 2015)
SOLAR_LUMINOSITY_W = 3.828e26         # Nominal solar luminosity (IAU 2015)
STEFAN_BOLTZMANN = 5.67036713e-8      # W m^-2 K^-4
AU_PER_SOLAR_RADIUS = 1.0 / 215.032   # Solar radii per AU is 215.032
AU_PER_LIGHT_YEAR = 63241.1
KM_PER_AU = 149597870.7
DAYS_PER_JULIAN_YEAR = 365.25
HOURS_PER_DAY = 24.0
SECONDS_PER_DAY = 86400.0
TYCHO_CATALOG_FACTORS = (1, 10000, 1000000000)  # TYC a-b-c -> a + b*1e4 + c*1e9

# Photometry
SOLAR_BOLOMETRIC_MAGNITUDE = 4.74
WHITE_DWARF_ABSOLUTE_MAGNITUDE = 13.0
# Reed (1998), JRASC 92, 36: BC = sum(c_n * (log10(Teff) - 4)^n), highest power first
BOLOMETRIC_CORRECTION_COEFFS = (-8.499, 13.421, -8.131, -3.901, -0.438)

# Orbit transformation guards
DEFAULT_DECLINATION_DEG = 0.00001     # Used when Dec is missing or exactly zero
EDGE_ON_INCLINATION_DEG = 90.0
EDGE_ON_INCLINATION_NUDGED_DEG = 89.99999
DEFAULT_SECONDARY_PERIASTRON_DEG = 180.0
CIRCULAR_PRIMARY_MINIMUM_MEAN_ANOMALY_DEG = 90.0
UNKNOWN_SPECTROSCOPIC_INCLINATION_DEG = 45.0
BESSELIAN_REFERENCE_YEAR = 2000.0

# Tidal locking assumption
TIDAL_LOCK_MAX_PERIOD_YEARS = 1.0
TIDAL_LOCK_MAX_ECCENTRICITY = 0.01

# Output precision
DEFAULT_AXIS_SIG_FIGS = 3
DEFAULT_ANGLE_DECIMALS = 2
DEFAULT_PERIASTRON_DECIMALS = 0
RADIUS_SIG_FIGS = 4
MAGNITUDE_DECIMALS = 2
RA_DEC_DECIMALS = 8
DISTANCE_DECIMALS = 3

# Input Catalog Layout
# 0-based column positions in the tab-delimited catalog (first row is a header)
CATALOG_COLUMNS = {
    'index': 0,
    'hip': 1,
    'hd': 2,
    'ads': 3,
    'ccdm': 4,
    'proper_names': 5,
    'other_names': 6,
    'names_primary': 7,
    'names_secondary': 8,
    'bayer': 9,
    'flamsteed': 10,
    'multiplicity': 11,
    'ra': 12,
    'dec': 13,
    'ra_b': 14,
    'dec_b': 15,
    'parallax': 16,
    'distance_pc': 18,
    'mag_a': 20,
    'mag_b': 21,
    'mag_type': 22,
    'sptype_a': 23,
    'sptype_b': 24,
    'mass_a': 25,
    'mass_b': 27,
    'radius_a': 29,
    'radius_b': 31,
    'lum_a': 33,
    'lum_b': 35,
    'lum_is_log': 37,
    'teff_a': 38,
    'teff_b': 40,
    'teff_is_log': 42,
    'rotation_period_a': 43,
    'period': 45,
    'period_unit': 47,
    'semimajor_axis': 48,
    'axis_is_photocentric': 50,
    'axis_unit': 51,
    'eccentricity': 52,
    'inclination': 54,
    'node': 56,
    'periastron_arg': 58,
    'periastron_owner': 60,
    'epoch': 61,
    'epoch_is_primary_minimum': 63,
    'epoch_unit': 64,
    'flip': 65,
    'k1': 66,
}
NAME_LIST_SEPARATOR = ':'
LOG_FLAG_VALUE = 'log'
APPARENT_MAGNITUDE_FLAG = 'mV'
ABSOLUTE_MAGNITUDE_FLAG = 'MV'
PERIOD_UNIT_DAYS = 'd'
EPOCH_UNIT_JULIAN = 'JD'
EPOCH_UNIT_BESSELIAN = 'B'
FLIP_NEGATE_VALUE = 'yes'
BARYCENTER_SPECTRAL_TYPE = '*'
AXIS_UNIT_AU = 'a'
AXIS_UNIT_SOLAR_RADII = 'r'
AXIS_UNIT_ARCSEC = 's'
AXIS_UNIT_MILLIARCSEC = 'm'
PERIASTRON_OWNER_PRIMARY = '1'
PERIASTRON_OWNER_SECONDARY = '2'

# Designation Hierarchy
# Output rank of each component designation. Codes that share a rank never
# appear in the same system (e.g. AB-C and A-BC).
DESIGNATION_RANK = {
    '': 0, 'AB-C': 0, 'A-BC': 0, 'AB-CD': 0, 'AB-CE': 0, 'AB-DE': 0, 'ACB': 0, 'ACD': 0,
    'AB': 1, 'AC': 1,
    'A': 2, 'Aa': 3, 'Aa1': 4, 'Aa2': 5, 'Ab': 6, 'Ab1': 7, 'Ab2': 8,
    'BC': 9,
    'B': 10, 'Ba': 11, 'Ba1': 12, 'Ba2': 13, 'Bb': 14, 'Bb1': 15, 'Bb2': 16,
    'CD': 17, 'CE': 17, 'DE': 17,
    'C': 18, 'Ca': 19, 'Cb': 20,
    'D': 21, 'Da': 22, 'Db': 23,
    'E': 24, 'Ea': 25, 'Eb': 26,
}
UNKNOWN_DESIGNATION_RANK = -1
ROOT_MULTIPLICITY_CODE = 'AB'
HYPHENATED_NAME_REWRITE = ('AB', 'A-B')
CROSS_CATALOG_PREFIXES = ('ADS ', 'CCDM J')
PRIMARY_LIST_DESIGNATION_PREFIXES = ('HD', 'SAO')

# Provenance notes
NOTE_SPTYPE_FROM_TEMPERATURE = "Estimate from temperature"
NOTE_SPTYPE_FROM_MASS = "Estimate from mass"
NOTE_SPTYPE_FROM_ABSMAG = "Estimate from absolute magnitude"
NOTE_SPTYPE_FROM_APPMAG = "Estimate from apparent magnitude"
NOTE_MAG_FROM_RADIUS = "From radius and temperature"
NOTE_MAG_FROM_LUMINOSITY = "From luminosity and temperature"
NOTE_MAG_FROM_SPTYPE = "Estimate from spectral type"
NOTE_MAG_FROM_MASS = "Estimate from mass"
NOTE_MAG_WHITE_DWARF = "Guess, for a white dwarf"
NOTE_MAG_GUESS_FROM_MASS = "Guess, from mass"
NOTE_MASS_GUESS = "Guess"
NOTE_MASS_RATIOS_APPROXIMATE = "Mass ratios approximate"
NOTE_MASS_RATIO = "Mass ratio {primary}:{secondary}"
NOTE_PARAMETER_UNKNOWN = "Plane-of-sky parameter unknown"
NOTE_INCLINATION_FROM_K1 = "Plane-of-sky inclination is about {inclination} degrees, estimated from K1"
NOTE_PRIMARY_MINIMUM = "Epoch of primary minimum"
NOTE_FULLY_SPECIFIED = "Fully specified orientation"
NOTE_TIDAL_LOCKING = "Assume tidal locking"

# Files
DEFAULT_CATALOG_FILE = 'catalog.txt'
DEFAULT_OUTPUT_FILE = 'binarycatalog.stc'
EXISTING_BARYCENTER_PATTERN = r'Barycenter (\d+)'
ENCODING_FALLBACK_ORDER = ['utf-8', 'latin-1']

# Logging Configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# STC header
STC_HEADER = """\
# Catalogue of named multiple stars for Celestia
#
# Generated by multistar from a table of stellar pairs. The order of the rows
# in the table determines both the order of the systems in this file and the
# hierarchy of each system.
#
# Missing spectral types are estimated from temperatures, masses or
# V magnitudes (in that order) using Mamajek's dwarf sequence. Missing
# magnitudes are estimated from luminosities and bolometric corrections
# (Reed 1998, JRASC 92, 36), otherwise from the spectral type or mass.
# Stellar masses are estimated from Mamajek's table, or from Straizys &
# Kuriliene (1981), Ap&SS 80, 353 for other luminosity classes.
#
# Plane-of-sky orbits are transformed to the J2000 ecliptic using the
# equations from Grant Hutchison's star orbit spreadsheet. Orbits whose true
# orientation is known from radial velocities are marked "Fully specified
# orientation"; unknown plane-of-sky elements are marked "Plane-of-sky
# parameter unknown".
#
# Pairs with an orbital period under a year and an eccentricity under 0.01
# are assumed to be tidally locked.
"""
