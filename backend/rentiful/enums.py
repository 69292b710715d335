from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    tenant = "tenant"
    manager = "manager"


class PropertyType(str, Enum):
    Rooms = "Rooms"
    Tinyhouse = "Tinyhouse"
    Apartment = "Apartment"
    Villa = "Villa"
    Townhouse = "Townhouse"
    Cottage = "Cottage"


class Amenity(str, Enum):
    WasherDryer = "WasherDryer"
    AirConditioning = "AirConditioning"
    Dishwasher = "Dishwasher"
    HighSpeedInternet = "HighSpeedInternet"
    HardwoodFloors = "HardwoodFloors"
    WalkInClosets = "WalkInClosets"
    Microwave = "Microwave"
    Refrigerator = "Refrigerator"
    Pool = "Pool"
    Gym = "Gym"
    Parking = "Parking"
    PetsAllowed = "PetsAllowed"
    WiFi = "WiFi"


class Highlight(str, Enum):
    HighSpeedInternetAccess = "HighSpeedInternetAccess"
    WasherDryer = "WasherDryer"
    AirConditioning = "AirConditioning"
    Heating = "Heating"
    SmokeFree = "SmokeFree"
    CableReady = "CableReady"
    SatelliteTV = "SatelliteTV"
    DoubleVanities = "DoubleVanities"
    TubShower = "TubShower"
    Intercom = "Intercom"
    SprinklerSystem = "SprinklerSystem"
    RecentlyRenovated = "RecentlyRenovated"
    CloseToTransit = "CloseToTransit"
    GreatView = "GreatView"
    QuietNeighborhood = "QuietNeighborhood"


class ApplicationStatus(str, Enum):
    Pending = "Pending"
    Denied = "Denied"
    Approved = "Approved"


class PaymentStatus(str, Enum):
    Pending = "Pending"
    Paid = "Paid"
    PartiallyPaid = "PartiallyPaid"
    Overdue = "Overdue"
