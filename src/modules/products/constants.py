"""Product vocabularies and catalog defaults."""

from django.db import models


class Fabric(models.TextChoices):
    COTTON = "Cotton", "Cotton"
    SILK = "Silk", "Silk"
    CHIFFON = "Chiffon", "Chiffon"
    GEORGETTE = "Georgette", "Georgette"
    CREPE = "Crepe", "Crepe"
    LINEN = "Linen", "Linen"
    BANARASI = "Banarasi", "Banarasi"
    KANJIVARAM = "Kanjivaram", "Kanjivaram"
    TUSSAR = "Tussar", "Tussar"
    OTHER = "Other", "Other"


class Pattern(models.TextChoices):
    SOLID = "Solid", "Solid"
    PRINTED = "Printed", "Printed"
    EMBROIDERED = "Embroidered", "Embroidered"
    WOVEN = "Woven", "Woven"
    BLOCK_PRINT = "Block Print", "Block Print"
    DIGITAL_PRINT = "Digital Print", "Digital Print"
    HAND_PAINTED = "Hand Painted", "Hand Painted"
    OTHER = "Other", "Other"


class Occasion(models.TextChoices):
    CASUAL = "Casual", "Casual"
    FORMAL = "Formal", "Formal"
    PARTY = "Party", "Party"
    WEDDING = "Wedding", "Wedding"
    FESTIVAL = "Festival", "Festival"
    OFFICE = "Office", "Office"
    TRADITIONAL = "Traditional", "Traditional"
    OTHER = "Other", "Other"


DEFAULT_SIZE = "Free Size"

# Public ``sortBy`` values mapped to ORM orderings.  Price sorts use the list
# price; the price range filter uses the effective price.
CATALOG_SORTS: dict[str, list[str]] = {
    "price": ["price", "created_at"],
    "-price": ["-price", "created_at"],
    "-rating": ["-rating", "created_at"],
    "title": ["title", "created_at"],
    "-createdAt": ["-created_at", "-id"],
}
DEFAULT_CATALOG_SORT = ["created_at"]
