"""
Column schema for the fuel consumption dataset.
Columns in the CSV (extra columns such as MODELYEAR or MODEL are allowed):
MAKE, VEHICLECLASS, TRANSMISSION, FUELTYPE, ENGINESIZE, CYLINDERS,
FUELCONSUMPTION_CITY, FUELCONSUMPTION_HWY, FUELCONSUMPTION_COMB, CO2EMISSIONS
"""

CATEGORICAL_COLUMNS = ['MAKE', 'VEHICLECLASS', 'TRANSMISSION', 'FUELTYPE']

NUMERIC_COLUMNS = [
    'ENGINESIZE',
    'CYLINDERS',
    'FUELCONSUMPTION_CITY',
    'FUELCONSUMPTION_HWY',
    'FUELCONSUMPTION_COMB',
    'CO2EMISSIONS',
]

REQUIRED_COLUMNS = CATEGORICAL_COLUMNS + NUMERIC_COLUMNS

# Predictors that get z-score scaled
SCALED_PREDICTORS = [
    'ENGINESIZE',
    'CYLINDERS',
    'FUELCONSUMPTION_CITY',
    'FUELCONSUMPTION_HWY',
    'FUELCONSUMPTION_COMB',
]

# Right-hand side of the regression formula, in formula order
MODEL_PREDICTORS = [
    'ENGINESIZE',
    'CYLINDERS',
    'FUELCONSUMPTION_COMB',
    'TRANSMISSION',
    'FUELTYPE',
    'VEHICLECLASS',
]

TARGET_COLUMN = 'CO2EMISSIONS'

GROUP_COLUMN = 'VEHICLECLASS'
