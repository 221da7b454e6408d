"""Checklist item keys and their display labels.

Collection handovers use ``CHECK_ITEMS``; deliveries add
``DELIVERY_CHECK_ITEMS`` on top.  Keys are what the handover store persists,
labels are what the report prints.
"""

from __future__ import annotations

CHECK_ITEM_LABELS: dict[str, str] = {
    "v5_present": "V5 registration document present",
    "service_book": "Service book / service history present",
    "spare_keys": "Spare keys supplied",
    "locking_wheel_nut": "Locking wheel nut present",
    "spare_wheel_or_kit": "Spare wheel or inflation kit present",
    "warning_lights": "No warning lights on dashboard",
    "fuel_level": "Fuel level recorded",
    "lights_exterior": "Exterior lights working (head, tail, brake, indicators)",
    "wipers_washers": "Wipers and washers working",
    "horn": "Horn working",
    "air_conditioning": "Air conditioning / climate control working",
    "infotainment": "Infotainment, radio and navigation working",
    "windows_mirrors": "Electric windows and mirrors working",
    "seats_trim": "Seats and interior trim free from damage",
    "bodywork": "Bodywork inspected and damage recorded",
    "windscreen": "Windscreen free from chips and cracks",
    "alloys": "Alloy wheels inspected and kerbing recorded",
    "parcel_shelf": "Parcel shelf / load cover present",
    "first_aid_kit": "First aid kit and warning triangle present",
    "personal_items_removed": "Personal items removed from vehicle",
}

DELIVERY_CHECK_ITEM_LABELS: dict[str, str] = {
    "vehicle_cleaned": "Vehicle cleaned inside and out",
    "handbook_supplied": "Owner's handbook supplied",
    "features_demonstrated": "Key features demonstrated to customer",
    "number_plates_fitted": "Number plates fitted and correct",
    "customer_documents": "Customer documents handed over",
}

CHECK_ITEMS: tuple[str, ...] = tuple(CHECK_ITEM_LABELS)
DELIVERY_CHECK_ITEMS: tuple[str, ...] = tuple(DELIVERY_CHECK_ITEM_LABELS)


def resolve_label(check_item_key: str) -> str:
    """Return the display label for *check_item_key*, or the raw key if unmapped."""
    return (
        CHECK_ITEM_LABELS.get(check_item_key)
        or DELIVERY_CHECK_ITEM_LABELS.get(check_item_key)
        or check_item_key
    )
