"""
Geometry, records and configuration shared by all routing components
"""
