"""
Parcel Hub

One interface over several parcel-carrier APIs: quotes, tracking, shipments
and pickups, with a CompositeService that fans read-only requests out to
every configured carrier.
"""
__version__ = "1.0.0"
