"""Enumeration types for Staybook data models."""

from enum import Enum


class BookingCategory(str, Enum):
    """Catalog category of a listing.

    ALL is a query-side wildcard; no listing is stored with it.
    """

    ALL = "ALL"
    AMAZING_VIEWS = "AMAZING_VIEWS"
    OMG = "OMG"
    TREEHOUSES = "TREEHOUSES"
    BEACH = "BEACH"
    FARMS = "FARMS"
    TINY_HOMES = "TINY_HOMES"
    LAKE = "LAKE"
    CONTAINERS = "CONTAINERS"
    CAMPING = "CAMPING"
    CASTLE = "CASTLE"
    SKIING = "SKIING"
    CAMPERS = "CAMPERS"
    ARTIC = "ARTIC"
    BOAT = "BOAT"
    BED_AND_BREAKFASTS = "BED_AND_BREAKFASTS"
    ROOMS = "ROOMS"
    EARTH_HOMES = "EARTH_HOMES"
    TOWER = "TOWER"
    CAVES = "CAVES"
    LUXES = "LUXES"
    CHEFS_KITCHEN = "CHEFS_KITCHEN"


class Authority(str, Enum):
    """Capabilities a principal may hold."""

    TENANT = "ROLE_TENANT"
    LANDLORD = "ROLE_LANDLORD"


class CancellationKind(str, Enum):
    """Which authorization path a cancellation goes through."""

    TENANT = "tenant"
    LANDLORD = "landlord"
