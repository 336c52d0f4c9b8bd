"""
Domain Services Package

This package contains the attribute aggregation over a device's traits
and the registry owning the live device set.
"""
