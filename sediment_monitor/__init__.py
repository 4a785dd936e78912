"""
Sediment Monitoring Sensor Pipeline

Turns noisy water-depth, turbidity and temperature samples from field sensors
into calibrated, smoothed readings with a derived sediment level, a quality
score and an outlier flag.
"""

__version__ = "1.0.0"
