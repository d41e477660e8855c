"""adc: declarative configuration for the APISIX gateway."""

__version__ = "0.1.0"
