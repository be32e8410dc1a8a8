# app/models/enums.py

from enum import Enum

class District(str, Enum):
    """The closed set of administrative districts a student may live in."""
    COLOMBO = "Colombo"
    GAMPAHA = "Gampaha"
    KALUTARA = "Kalutara"
    KANDY = "Kandy"
    MATALE = "Matale"
    NUWARA_ELIYA = "Nuwara Eliya"
    GALLE = "Galle"
    MATARA = "Matara"
    HAMBANTOTA = "Hambantota"
    JAFFNA = "Jaffna"
    KILINOCHCHI = "Kilinochchi"
    MANNAR = "Mannar"
    VAVUNIYA = "Vavuniya"
    MULLAITIVU = "Mullaitivu"
    BATTICALOA = "Batticaloa"
    AMPARA = "Ampara"
    TRINCOMALEE = "Trincomalee"
    KURUNEGALA = "Kurunegala"
    PUTTALAM = "Puttalam"
    ANURADHAPURA = "Anuradhapura"
    POLONNARUWA = "Polonnaruwa"
    BADULLA = "Badulla"
    MONARAGALA = "Monaragala"
    RATNAPURA = "Ratnapura"
    KEGALLE = "Kegalle"

# Canonical order, shared by validation and the /districts endpoint
DISTRICT_NAMES = [district.value for district in District]
