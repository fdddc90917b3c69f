"""Column definitions for the body fat case study."""

from __future__ import annotations

from .base_columns import BaseColumn, ColumnMetadata


class BodyfatColumn(BaseColumn):
    """Columns of the body fat dataset (Johnson, 1996; 252 men).

    The outcome is percent body fat by Siri's equation. Abdomen circumference
    and height are retained in every model.
    """

    CASE = "case"
    SIRI = "siri"
    AGE = "age"
    WEIGHT = "weight_kg"
    HEIGHT = "height_cm"
    NECK = "neck"
    CHEST = "chest"
    ABDOMEN = "abdomen"
    HIP = "hip"
    THIGH = "thigh"
    KNEE = "knee"
    ANKLE = "ankle"
    BICEPS = "biceps"
    FOREARM = "forearm"
    WRIST = "wrist"

    TARGET = SIRI

    def metadata(self) -> ColumnMetadata:
        unit = {
            BodyfatColumn.SIRI: "%",
            BodyfatColumn.AGE: "years",
            BodyfatColumn.WEIGHT: "kg",
        }.get(self, "cm")
        if self is BodyfatColumn.CASE:
            return ColumnMetadata(original_name="case", cleaned_name="case", dtype="int", pretty_name="Case")
        pretty = {
            BodyfatColumn.SIRI: "Body fat (Siri)",
            BodyfatColumn.WEIGHT: "Weight",
            BodyfatColumn.HEIGHT: "Height",
        }.get(self, self.value.replace("_", " ").title())
        dtype = "int" if self is BodyfatColumn.AGE else "float"
        return ColumnMetadata(
            original_name=self.value,
            cleaned_name=self.value,
            dtype=dtype,
            pretty_name=pretty,
            unit=unit,
        )

    @classmethod
    def identifier_columns(cls) -> list[str]:
        return [cls.CASE]

    @classmethod
    def forced_columns(cls) -> list[str]:
        return [cls.ABDOMEN, cls.HEIGHT]
