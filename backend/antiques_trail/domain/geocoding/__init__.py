from .postcodes import Coordinates, PostcodeGeocoder

__all__ = ["Coordinates", "PostcodeGeocoder"]
