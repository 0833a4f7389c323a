"""Decoders and encoders for home-automation radio protocols and sensor data."""

__version__ = "0.1.0"

__all__ = [
    "core",
    "newkaku",
    "userevent",
    "alecto",
    "alectov3",
    "oregon",
    "homeeasy",
    "fa20rf",
    "otgw",
    "ds18b20",
    "bmp085",
    "dht",
]