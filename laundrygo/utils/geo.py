# laundrygo/utils/geo.py

def _as_float(value):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def parse_lat_lng(lat, lng):
    """Return (lat, lng) as floats; a missing or out-of-range part becomes None."""
    lat, lng = _as_float(lat), _as_float(lng)
    if lat is not None and not (-90.0 <= lat <= 90.0):
        lat = None
    if lng is not None and not (-180.0 <= lng <= 180.0):
        lng = None
    return lat, lng
